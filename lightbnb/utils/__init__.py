"""
Utility modules for the data-access layer.
"""

from lightbnb.utils.exceptions import (
    DataAccessError,
    QueryFailedError,
    ConstraintViolationError,
    InvalidRecordError,
)
from lightbnb.utils.result import QueryResult
from lightbnb.utils.query_builder import PropertySearchQuery, Predicate

__all__ = [
    "DataAccessError",
    "QueryFailedError",
    "ConstraintViolationError",
    "InvalidRecordError",
    "QueryResult",
    "PropertySearchQuery",
    "Predicate",
]
