"""
Database session configuration.
"""

from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from catalog.core.config import settings

DATABASE_URL = str(settings.DATABASE_URI)

engine_options: Dict[str, Any] = {"echo": settings.DEBUG, "pool_pre_ping": True}
if not DATABASE_URL.startswith("sqlite"):
    engine_options.update(pool_size=10, max_overflow=20)

# Create async engine
engine = create_async_engine(DATABASE_URL, **engine_options)

# Create session factory
async_session_factory = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,
    autoflush=False,
    autocommit=False,
    class_=AsyncSession,
)

# Base class for all models
Base = declarative_base()
