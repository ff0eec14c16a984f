"""
Test configuration and fixtures for the LightBnB data-access layer.
Provides a stand-in session for unit tests, a real PostgreSQL session for
integration tests, and test data factories.
"""

import pytest
import os
import uuid
from typing import AsyncGenerator, Any, Dict, Sequence
from unittest.mock import AsyncMock, Mock
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from lightbnb.config import settings
from lightbnb.database import create_tables, drop_tables, test_database_connection
from lightbnb.repositories.user import UserRepository
from lightbnb.repositories.reservation import ReservationRepository
from lightbnb.repositories.property import PropertyRepository


# Test database configuration
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", settings.test_database_url)


def make_result(keys: Sequence[str], rows: Sequence[tuple]) -> Mock:
    """Build a stand-in for a SQLAlchemy Result with the given columns and rows."""
    result = Mock()
    result.keys.return_value = list(keys)
    result.all.return_value = list(rows)
    return result


@pytest.fixture
def db_session() -> Mock:
    """Stand-in async session whose execute() returns an empty result by default."""
    session = Mock(spec=AsyncSession)
    session.execute = AsyncMock(return_value=make_result([], []))
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


# Repository fixtures
@pytest.fixture
def user_repository(db_session: Mock) -> UserRepository:
    """Create a user repository instance."""
    return UserRepository(db_session)


@pytest.fixture
def reservation_repository(db_session: Mock) -> ReservationRepository:
    """Create a reservation repository instance."""
    return ReservationRepository(db_session)


@pytest.fixture
def property_repository(db_session: Mock) -> PropertyRepository:
    """Create a property repository instance."""
    return PropertyRepository(db_session)


@pytest.fixture
async def pg_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Session on a freshly created schema in the PostgreSQL test database.
    Skips the test when the database is unreachable.
    """
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=NullPool)
    if not await test_database_connection(engine):
        await engine.dispose()
        pytest.skip(f"PostgreSQL not reachable at {TEST_DATABASE_URL}")

    await drop_tables(engine)
    await create_tables(engine)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()
    await drop_tables(engine)
    await engine.dispose()


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    def create_user_data(
        email: str = None,
        name: str = "Test User",
        password: str = "$2a$10$FB/BOAVhpuLvpOREQVmvmezD4ED/.JBIDRh70tGevYzYzQgFId2u."
    ) -> Dict[str, Any]:
        """Create user data dictionary."""
        return {
            "name": name,
            "email": email or f"test{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
        }


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_data(
        owner_id: Any = 1,
        title: str = "Speed lamp",
        description: str = "description",
        cost_per_night: Any = 10000,
        city: str = "San Francisco",
        parking_spaces: Any = 1,
        number_of_bathrooms: Any = 2,
        number_of_bedrooms: Any = 3
    ) -> Dict[str, Any]:
        """Create property data dictionary."""
        return {
            "owner_id": owner_id,
            "title": title,
            "description": description,
            "thumbnail_photo_url": "https://images.pexels.com/photos/2086676/pexels-photo-2086676.jpeg?auto=compress&cs=tinysrgb&h=350",
            "cover_photo_url": "https://images.pexels.com/photos/2086676/pexels-photo-2086676.jpeg",
            "cost_per_night": cost_per_night,
            "street": "536 Namsub Highway",
            "city": city,
            "province": "California",
            "post_code": "28142",
            "country": "United States",
            "parking_spaces": parking_spaces,
            "number_of_bathrooms": number_of_bathrooms,
            "number_of_bedrooms": number_of_bedrooms,
        }


def executed_params(session: Mock, call_index: int = -1) -> Dict[str, Any]:
    """Parameters bound on a recorded session.execute() call."""
    return session.execute.call_args_list[call_index].args[1]


def executed_sql(session: Mock, call_index: int = -1) -> str:
    """SQL text of a recorded session.execute() call."""
    return str(session.execute.call_args_list[call_index].args[0])
