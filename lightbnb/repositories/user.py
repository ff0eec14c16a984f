"""
User repository: lookups by email and id, and account creation.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import ValidationError
from lightbnb.repositories.base import BaseRepository, Row
from lightbnb.schemas.user import UserCreate
from lightbnb.utils.exceptions import InvalidRecordError
from lightbnb.utils.result import QueryResult
from typing import Optional, List, Dict, Any, Mapping, Union
import logging

logger = logging.getLogger(__name__)

USER_BY_EMAIL = text("""SELECT *
FROM users
WHERE email = :email""")

USER_BY_ID = text("""SELECT *
FROM users
WHERE id = :id""")

INSERT_USER = text("""INSERT INTO users (name, email, password)
VALUES (:name, :email, :password)
RETURNING *""")


class UserRepository(BaseRepository):
    """
    Repository for user accounts.

    Every accessor comes in two forms: ``try_*`` returns a QueryResult so
    failures can be told apart from "not found", and the plain form logs the
    failure and returns None, the behavior existing callers rely on.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(db)

    async def try_get_user_with_email(self, email: str) -> QueryResult[Row]:
        """
        Get a single user given their email.

        Args:
            email: Email address to match exactly

        Returns:
            QueryResult holding the user row, or None if no user matches
        """
        return await self.fetch_one(USER_BY_EMAIL, {"email": email}, "get_user_with_email")

    async def get_user_with_email(self, email: str) -> Optional[Row]:
        result = await self.try_get_user_with_email(email)
        return result.value_or_none()

    async def try_get_user_with_id(self, user_id: int) -> QueryResult[Row]:
        """
        Get a single user given their id.

        Args:
            user_id: Primary key of the user

        Returns:
            QueryResult holding the user row, or None if no user matches
        """
        try:
            user_id = int(user_id)
        except (TypeError, ValueError) as e:
            logger.error(f"get_user_with_id failed: {e}")
            return QueryResult.failure(InvalidRecordError("user id", str(e)))
        return await self.fetch_one(USER_BY_ID, {"id": user_id}, "get_user_with_id")

    async def get_user_with_id(self, user_id: int) -> Optional[Row]:
        result = await self.try_get_user_with_id(user_id)
        return result.value_or_none()

    async def try_add_user(self, user: Union[UserCreate, Mapping[str, Any]]) -> QueryResult[List[Row]]:
        """
        Add a new user. Duplicate emails are rejected by the users table's
        unique constraint, not checked here.

        Args:
            user: name, email and password

        Returns:
            QueryResult holding the inserted rows
        """
        try:
            if not isinstance(user, UserCreate):
                user = UserCreate.model_validate(dict(user))
        except ValidationError as e:
            return self._invalid("add_user", "user", e)

        params: Dict[str, Any] = {
            "name": user.name,
            "email": user.email,
            "password": user.password,
        }
        return await self.execute_write(INSERT_USER, params, "add_user")

    async def add_user(self, user: Union[UserCreate, Mapping[str, Any]]) -> Optional[List[Row]]:
        result = await self.try_add_user(user)
        return result.value_or_none()
