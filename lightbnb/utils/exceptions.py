"""
Custom exception classes for the LightBnB data-access layer.
Each error carries a stable error code so callers can branch on failure kind.
"""

from typing import Optional
from pydantic import ValidationError


class DataAccessError(Exception):
    """Base data-access exception class."""

    error_code = "DATA_ACCESS_ERROR"

    def __init__(self, detail: str, error_code: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        if error_code:
            self.error_code = error_code

    def __str__(self) -> str:
        return self.detail


class QueryFailedError(DataAccessError):
    """The database or driver rejected or failed to run a statement."""

    error_code = "QUERY_FAILED"


class ConstraintViolationError(QueryFailedError):
    """A unique, foreign key or not-null constraint rejected a write."""

    error_code = "CONSTRAINT_VIOLATION"


class InvalidRecordError(DataAccessError):
    """An input record is missing fields or holds values that cannot be bound."""

    error_code = "INVALID_RECORD"

    def __init__(self, record: str, detail: str):
        super().__init__(f"Invalid {record}: {detail}")
        self.record = record


def describe_validation_error(error: ValidationError) -> str:
    """Summarize a pydantic ValidationError by field and message, leaving out input values."""
    problems = []
    for detail in error.errors(include_input=False, include_url=False):
        location = ".".join(str(part) for part in detail["loc"]) or "record"
        problems.append(f"{location}: {detail['msg']}")
    return "; ".join(problems)
