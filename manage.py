#!/usr/bin/env python3
"""
Database management script.
Creates or drops the LightBnB tables and checks connectivity.
"""

import asyncio
import sys
import argparse
import logging

from lightbnb.config import settings
from lightbnb.database import (
    engine,
    create_engine_from_settings,
    create_tables,
    drop_tables,
    test_database_connection,
    close_db_connection,
)

logger = logging.getLogger(__name__)


def configure_logging(level: str = settings.log_level) -> None:
    """Configure root logging for command-line use."""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


class DatabaseManager:
    """Runs schema and connectivity commands against the main or test database."""

    def __init__(self, test: bool = False):
        self.test = test
        self.engine = create_engine_from_settings(database_url=settings.test_database_url) if test else engine

    async def close(self) -> None:
        # The shared engine is shut down the way the application shuts it down
        if self.test:
            await self.engine.dispose()
        else:
            await close_db_connection()

    async def create(self) -> None:
        logger.info(f"Creating tables ({'test' if self.test else settings.environment} database)")
        try:
            await create_tables(self.engine)
        finally:
            await self.close()

    async def drop(self) -> None:
        logger.warning("Dropping tables - all data will be lost!")
        try:
            await drop_tables(self.engine)
        finally:
            await self.close()

    async def check(self) -> bool:
        try:
            return await test_database_connection(self.engine)
        finally:
            await self.close()


def main():
    """Main CLI interface for database management."""
    parser = argparse.ArgumentParser(description="LightBnB database management")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    create_parser = subparsers.add_parser("create-tables", help="Create all tables")
    create_parser.add_argument("--test", action="store_true", help="Use the test database")

    drop_parser = subparsers.add_parser("drop-tables", help="Drop all tables (not in production)")
    drop_parser.add_argument("--test", action="store_true", help="Use the test database")
    drop_parser.add_argument("--confirm", action="store_true", help="Confirm dropping tables")

    check_parser = subparsers.add_parser("check", help="Check database connectivity")
    check_parser.add_argument("--test", action="store_true", help="Use the test database")

    args = parser.parse_args()
    configure_logging(args.log_level.upper())

    if not args.command:
        parser.print_help()
        return

    manager = DatabaseManager(test=args.test)

    try:
        if args.command == "create-tables":
            asyncio.run(manager.create())

        elif args.command == "drop-tables":
            if not args.confirm:
                print("Dropping tables requires --confirm flag")
                return
            asyncio.run(manager.drop())

        elif args.command == "check":
            if not asyncio.run(manager.check()):
                sys.exit(1)

    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
