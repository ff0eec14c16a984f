"""
Structured builder for the filtered property search statement.

Optional filters become an ordered list of predicates, each a SQL fragment
plus the value it binds. The first applied predicate is joined with WHERE and
every later one with AND, whichever filters are present. The rating filter
runs on the aggregated average, so it is emitted as HAVING after GROUP BY.
The row limit is always the last bound value.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Tuple
from sqlalchemy import text
from sqlalchemy.sql.elements import TextClause
from lightbnb.schemas.property import PropertySearchFilters

DEFAULT_LIMIT = 10

SUBUNITS_PER_UNIT = 100

Placeholder = Callable[[int], str]


def numeric_dollar(position: int) -> str:
    """PostgreSQL-native positional marker: $1, $2, ..."""
    return f"${position}"


def named_param(position: int) -> str:
    """Named marker understood by SQLAlchemy text(): :param_1, :param_2, ..."""
    return f":param_{position}"


def to_subunits(amount: Any) -> int:
    """Convert a major-unit price (e.g. dollars) to stored subunits (cents)."""
    return int(Decimal(str(amount)) * SUBUNITS_PER_UNIT)


@dataclass(frozen=True)
class Predicate:
    """One SQL condition; ``{}`` in the fragment marks where its value binds."""

    fragment: str
    value: Any

    def render(self, marker: str) -> str:
        return self.fragment.format(marker)


class PropertySearchQuery:
    """
    Builds the property search statement from ``PropertySearchFilters``.

    The canonical text (``sql``) uses $n markers; ``statement()`` returns the
    same statement with named markers for execution through SQLAlchemy.
    """

    BASE_QUERY = (
        "SELECT properties.*, avg(property_reviews.rating) as average_rating\n"
        "FROM properties\n"
        "JOIN property_reviews ON properties.id = property_id"
    )

    def __init__(self, filters: Optional[PropertySearchFilters] = None, limit: int = DEFAULT_LIMIT):
        self.filters = filters or PropertySearchFilters()
        # Every search is bounded; None is rejected rather than meaning "all rows"
        self.limit = int(limit)
        self.predicates = self._build_predicates(self.filters)
        self.having = self._build_having(self.filters)

    @staticmethod
    def _build_predicates(filters: PropertySearchFilters) -> List[Predicate]:
        """Row-level conditions, in fixed order: city, owner, min price, max price."""
        predicates = []

        # Substring containment anywhere in the city name
        if filters.city:
            predicates.append(Predicate("city ILIKE {}", f"%{filters.city}%"))

        if filters.owner_id:
            predicates.append(Predicate("owner_id = {}", filters.owner_id))

        if filters.minimum_price_per_night:
            predicates.append(
                Predicate("cost_per_night >= {}", to_subunits(filters.minimum_price_per_night))
            )

        if filters.maximum_price_per_night:
            predicates.append(
                Predicate("cost_per_night <= {}", to_subunits(filters.maximum_price_per_night))
            )

        return predicates

    @staticmethod
    def _build_having(filters: PropertySearchFilters) -> Optional[Predicate]:
        if filters.minimum_rating:
            return Predicate("avg(property_reviews.rating) >= {}", filters.minimum_rating)
        return None

    @property
    def values(self) -> List[Any]:
        """Bound values in placeholder order."""
        values = [predicate.value for predicate in self.predicates]
        if self.having is not None:
            values.append(self.having.value)
        values.append(self.limit)
        return values

    def render(self, placeholder: Placeholder = numeric_dollar) -> str:
        """Assemble the statement text using the given placeholder style."""
        lines = [self.BASE_QUERY]
        position = 0

        for index, predicate in enumerate(self.predicates):
            position += 1
            keyword = "WHERE" if index == 0 else "AND"
            lines.append(f"{keyword} {predicate.render(placeholder(position))}")

        lines.append("GROUP BY properties.id")

        if self.having is not None:
            position += 1
            lines.append(f"HAVING {self.having.render(placeholder(position))}")

        position += 1
        lines.append("ORDER BY cost_per_night")
        lines.append(f"LIMIT {placeholder(position)}")

        return "\n".join(lines)

    @property
    def sql(self) -> str:
        return self.render()

    def statement(self) -> Tuple[TextClause, Dict[str, Any]]:
        """Executable text() clause and its parameter mapping."""
        params = {
            named_param(position)[1:]: value
            for position, value in enumerate(self.values, start=1)
        }
        return text(self.render(named_param)), params

    def __repr__(self) -> str:
        return f"<PropertySearchQuery(predicates={len(self.predicates)}, limit={self.limit})>"
