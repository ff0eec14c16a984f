"""
Reservation repository: a guest's past stays with the property's rating.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from lightbnb.repositories.base import BaseRepository, Row
from lightbnb.utils.exceptions import InvalidRecordError
from lightbnb.utils.query_builder import DEFAULT_LIMIT
from lightbnb.utils.result import QueryResult
from typing import Optional, List
import logging

logger = logging.getLogger(__name__)

# Grouping by reservation as well as property keeps each stay a separate row
# despite the fan-out from joining several reviews.
PAST_RESERVATIONS = text("""SELECT reservations.*, properties.*, avg(property_reviews.rating) as average_rating
FROM reservations
JOIN properties ON reservations.property_id = properties.id
JOIN property_reviews ON property_reviews.property_id = properties.id
WHERE reservations.guest_id = :guest_id
AND reservations.end_date < now()::DATE
GROUP BY properties.id, reservations.id
ORDER BY reservations.start_date
LIMIT :row_limit""")


class ReservationRepository(BaseRepository):
    """Read-only access to reservations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db)

    async def try_get_all_reservations(self, guest_id: int, limit: int = DEFAULT_LIMIT) -> QueryResult[List[Row]]:
        """
        Get reservations for a guest that ended before today.

        Args:
            guest_id: ID of the guest user
            limit: Maximum number of reservations to return

        Returns:
            QueryResult holding reservation rows enriched with the property's
            columns and average_rating, oldest start date first
        """
        try:
            params = {"guest_id": int(guest_id), "row_limit": int(limit)}
        except (TypeError, ValueError) as e:
            logger.error(f"get_all_reservations failed: {e}")
            return QueryResult.failure(InvalidRecordError("reservation lookup", str(e)))
        return await self.fetch_all(PAST_RESERVATIONS, params, "get_all_reservations")

    async def get_all_reservations(self, guest_id: int, limit: int = DEFAULT_LIMIT) -> Optional[List[Row]]:
        result = await self.try_get_all_reservations(guest_id, limit)
        return result.value_or_none()
