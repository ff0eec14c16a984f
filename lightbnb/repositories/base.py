"""
Base repository class for textual SQL accessors using async SQLAlchemy.
Runs one statement per call and turns the outcome into a QueryResult.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, StatementError
from pydantic import ValidationError
from sqlalchemy.engine import Result
from sqlalchemy.sql.elements import TextClause
from sqlalchemy import text
from lightbnb.utils.exceptions import (
    DataAccessError,
    QueryFailedError,
    ConstraintViolationError,
    InvalidRecordError,
    describe_validation_error,
)
from lightbnb.utils.result import QueryResult
from typing import Optional, List, Dict, Any, Union
import logging

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
Statement = Union[str, TextClause]


class BaseRepository:
    """
    Base repository wrapping an injected database session.

    Subclasses describe their statement and parameters; this class executes
    it, shapes the rows into dicts, and reports failures as typed errors
    instead of raising them.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize repository with a database session.

        Args:
            db: Async database session drawn from the connection pool
        """
        self.db = db

    @staticmethod
    def _shape_rows(result: Result) -> List[Row]:
        """
        Convert result rows into plain dicts keyed by column name.
        When two joined tables share a column name, the later one wins.
        """
        keys = list(result.keys())
        return [dict(zip(keys, row)) for row in result.all()]

    @staticmethod
    def _error_message(error: Exception) -> str:
        """
        Driver message for an error, without the statement or bound values.
        SQLAlchemy's own str() appends the bound parameters.
        """
        if isinstance(error, StatementError):
            return str(error.orig) if error.orig is not None else type(error).__name__
        return str(error)

    @classmethod
    def _translate_error(cls, error: Exception) -> DataAccessError:
        message = cls._error_message(error)
        if isinstance(error, IntegrityError):
            return ConstraintViolationError(message)
        return QueryFailedError(message)

    async def _rollback(self, operation: str) -> None:
        """Roll back after a failure; a dead connection can fail here too."""
        try:
            await self.db.rollback()
        except Exception as e:
            logger.error(f"{operation} rollback failed: {self._error_message(e)}")

    async def _fail(self, operation: str, error: Exception) -> QueryResult:
        await self._rollback(operation)
        translated = self._translate_error(error)
        logger.error(f"{operation} failed: {translated}")
        return QueryResult.failure(translated)

    async def fetch_all(
        self,
        statement: Statement,
        params: Optional[Dict[str, Any]] = None,
        operation: str = "query"
    ) -> QueryResult[List[Row]]:
        """
        Run a read statement and return every row.

        Args:
            statement: SQL text or text() clause
            params: Bound parameter values
            operation: Accessor name used in log messages

        Returns:
            QueryResult holding the list of rows, or the error
        """
        if isinstance(statement, str):
            statement = text(statement)
        try:
            result = await self.db.execute(statement, params or {})
            rows = self._shape_rows(result)
            logger.debug(f"{operation} returned {len(rows)} rows")
            return QueryResult.success(rows)
        except Exception as e:
            return await self._fail(operation, e)

    async def fetch_one(
        self,
        statement: Statement,
        params: Optional[Dict[str, Any]] = None,
        operation: str = "query"
    ) -> QueryResult[Row]:
        """Run a read statement and return its first row, or None when empty."""
        result = await self.fetch_all(statement, params, operation)
        if not result.ok:
            return QueryResult.failure(result.error)
        return QueryResult.success(result.value[0] if result.value else None)

    async def execute_write(
        self,
        statement: Statement,
        params: Optional[Dict[str, Any]] = None,
        operation: str = "write"
    ) -> QueryResult[List[Row]]:
        """
        Run a single INSERT ... RETURNING statement and commit it.

        Returns:
            QueryResult holding the returned rows, or the error. The session
            is rolled back on failure so it stays usable.
        """
        if isinstance(statement, str):
            statement = text(statement)
        try:
            result = await self.db.execute(statement, params or {})
            rows = self._shape_rows(result)
            await self.db.commit()
            logger.info(f"{operation} wrote {len(rows)} rows")
            return QueryResult.success(rows)
        except Exception as e:
            return await self._fail(operation, e)

    def _invalid(self, operation: str, record: str, error: ValidationError) -> QueryResult:
        """Report a record pydantic rejected, naming fields but not their values."""
        translated = InvalidRecordError(record, describe_validation_error(error))
        logger.error(f"{operation} failed: {translated}")
        return QueryResult.failure(translated)
