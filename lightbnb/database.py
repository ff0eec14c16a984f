"""
Database connection and session management for PostgreSQL.
Owns the async SQLAlchemy engine (the connection pool) and session factory.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import Integer, text
from lightbnb.config import settings, Settings
from typing import AsyncGenerator, Optional
import logging

logger = logging.getLogger(__name__)


def create_engine_from_settings(
    config: Settings = settings,
    database_url: Optional[str] = None
) -> AsyncEngine:
    """
    Create an async engine with connection pooling from settings.

    Args:
        config: Settings to read pool parameters from
        database_url: Overrides the configured database URL when given

    Returns:
        AsyncEngine backed by a connection pool
    """
    return create_async_engine(
        database_url or config.database_url,
        echo=config.debug,
        pool_size=config.db_pool_size,
        max_overflow=config.db_max_overflow,
        pool_pre_ping=True,  # Validate connections before use
        pool_recycle=config.db_pool_recycle,
        pool_timeout=config.db_pool_timeout,
        hide_parameters=True,  # Bound values include user passwords
        connect_args={
            "server_settings": {
                "application_name": "lightbnb",
            }
        }
    )


# Engine creation does not connect; the pool opens connections on first use
engine = create_engine_from_settings()

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """
    Base class for all database models.
    Every LightBnB table has a serial integer primary key named id.
    """

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    def __repr__(self) -> str:
        """String representation of the model."""
        return f"<{self.__class__.__name__}(id={self.id})>"


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a database session and ensure it's closed after use.
    Suitable as a request-scoped dependency for the HTTP layer.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def test_database_connection(target_engine: Optional[AsyncEngine] = None) -> bool:
    """
    Test database connectivity.
    Returns True if connection is successful, False otherwise.
    """
    target_engine = target_engine or engine
    try:
        async with target_engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            result.scalar()
            logger.info("Database connection successful")
            return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False


# Not a test function; keeps pytest from collecting it when imported in tests
test_database_connection.__test__ = False


async def create_tables(target_engine: Optional[AsyncEngine] = None) -> None:
    """
    Create all database tables from the model metadata.
    Used to stand up development and test databases.
    """
    # Register every model on the metadata before creating
    import lightbnb.models  # noqa: F401

    target_engine = target_engine or engine
    async with target_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created successfully")


async def drop_tables(target_engine: Optional[AsyncEngine] = None) -> None:
    """
    Drop all database tables.
    This should only be used in testing or development.
    """
    if settings.is_production:
        raise RuntimeError("Cannot drop tables in production environment")

    import lightbnb.models  # noqa: F401

    target_engine = target_engine or engine
    async with target_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        logger.info("Database tables dropped successfully")


async def close_db_connection() -> None:
    """
    Close database connections.
    This should be called during application shutdown.
    """
    await engine.dispose()
    logger.info("Database connections closed")
