"""
Property repository: filtered search over listings and listing creation.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import ValidationError
from lightbnb.repositories.base import BaseRepository, Row
from lightbnb.schemas.property import PropertySearchFilters, PropertyCreate
from lightbnb.utils.exceptions import InvalidRecordError
from lightbnb.utils.query_builder import PropertySearchQuery, DEFAULT_LIMIT
from lightbnb.utils.result import QueryResult
from typing import Optional, List, Any, Mapping, Union
import logging

logger = logging.getLogger(__name__)

# Column order of the insert; values are bound in the same order
PROPERTY_COLUMNS = (
    "owner_id",
    "title",
    "description",
    "thumbnail_photo_url",
    "cover_photo_url",
    "cost_per_night",
    "street",
    "city",
    "province",
    "post_code",
    "country",
    "parking_spaces",
    "number_of_bathrooms",
    "number_of_bedrooms",
)

INSERT_PROPERTY = text(
    f"INSERT INTO properties ({', '.join(PROPERTY_COLUMNS)}) "
    f"VALUES ({', '.join(':' + column for column in PROPERTY_COLUMNS)}) "
    "RETURNING *"
)


class PropertyRepository(BaseRepository):
    """
    Repository for property listings.
    Search goes through PropertySearchQuery; writes insert one full listing.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(db)

    async def try_get_all_properties(
        self,
        options: Optional[Union[PropertySearchFilters, Mapping[str, Any]]] = None,
        limit: int = DEFAULT_LIMIT
    ) -> QueryResult[List[Row]]:
        """
        Search properties, cheapest first, with their average review rating.

        Args:
            options: Optional city, owner_id, price range and minimum_rating
            limit: Maximum number of properties to return

        Returns:
            QueryResult holding property rows with average_rating
        """
        try:
            if options is not None and not isinstance(options, PropertySearchFilters):
                options = PropertySearchFilters.model_validate(dict(options))
            query = PropertySearchQuery(options, limit)
        except ValidationError as e:
            return self._invalid("get_all_properties", "property search options", e)
        except (TypeError, ValueError) as e:
            logger.error(f"get_all_properties failed: {e}")
            return QueryResult.failure(InvalidRecordError("property search options", str(e)))

        logger.debug(f"Property search:\n{query.sql}\nvalues={query.values}")

        statement, params = query.statement()
        return await self.fetch_all(statement, params, "get_all_properties")

    async def get_all_properties(
        self,
        options: Optional[Union[PropertySearchFilters, Mapping[str, Any]]] = None,
        limit: int = DEFAULT_LIMIT
    ) -> Optional[List[Row]]:
        result = await self.try_get_all_properties(options, limit)
        return result.value_or_none()

    async def try_add_property(self, property_data: Union[PropertyCreate, Mapping[str, Any]]) -> QueryResult[List[Row]]:
        """
        Add a property listing.

        Args:
            property_data: Every column in PROPERTY_COLUMNS; owner_id and the
                room counts may be numeric text

        Returns:
            QueryResult holding the inserted rows
        """
        try:
            if not isinstance(property_data, PropertyCreate):
                property_data = PropertyCreate.model_validate(dict(property_data))
        except ValidationError as e:
            return self._invalid("add_property", "property", e)

        params = property_data.model_dump(include=set(PROPERTY_COLUMNS))
        return await self.execute_write(INSERT_PROPERTY, params, "add_property")

    async def add_property(self, property_data: Union[PropertyCreate, Mapping[str, Any]]) -> Optional[List[Row]]:
        result = await self.try_add_property(property_data)
        return result.value_or_none()
