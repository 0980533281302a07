"""
Application lifecycle event handlers.

These functions are executed during application startup and shutdown.
"""

from typing import Callable, List

from loguru import logger
from sqlalchemy import text

from catalog.db.session import Base, engine


async def connect_to_db() -> None:
    """
    Verify the database is reachable and create missing tables.
    """
    # Registers every model on Base.metadata
    import catalog.db.models  # noqa: F401

    try:
        logger.info("Connecting to database...")
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database connection established and schema verified")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        raise


async def close_db_connection() -> None:
    """
    Close database connection.
    """
    try:
        logger.info("Closing database connections...")
        await engine.dispose()
        logger.info("Database connections closed")
    except Exception as e:
        logger.error(f"Error closing database connections: {e}")


# List of startup event handlers to be executed in order
startup_event_handlers: List[Callable] = [
    connect_to_db,
]

# List of shutdown event handlers to be executed in order
shutdown_event_handlers: List[Callable] = [
    close_db_connection,
]
