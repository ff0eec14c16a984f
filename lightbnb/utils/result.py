"""
Success/failure result type returned by the typed accessor entry points.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar
from lightbnb.utils.exceptions import DataAccessError

T = TypeVar("T")


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    """
    Outcome of one accessor call.

    A successful result carries the shaped rows in ``value`` (which may itself
    be None or empty when nothing matched); a failed one carries the error.
    """

    value: Optional[T] = None
    error: Optional[DataAccessError] = None

    @classmethod
    def success(cls, value: Optional[T]) -> "QueryResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: DataAccessError) -> "QueryResult[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Optional[T]:
        """Return the value, raising the carried error on failure."""
        if self.error is not None:
            raise self.error
        return self.value

    def value_or_none(self) -> Optional[T]:
        """Collapse failure and empty into None, as legacy callers expect."""
        return self.value if self.ok else None
