"""
Database session configuration.

This module handles database engine creation and session management
using SQLAlchemy with async support. Only used when the database
storage backend is selected.
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from backend.app.core.config import settings


def build_engine(database_url: str, echo: bool = False):
    """Create an async engine; pool sizing only applies to server databases."""
    kwargs = {"echo": echo, "future": True}
    if not database_url.startswith("sqlite"):
        kwargs["pool_size"] = settings.db_pool_size
        kwargs["max_overflow"] = settings.db_max_overflow
    return create_async_engine(database_url, **kwargs)


# Create async engine
engine = build_engine(settings.database_url, echo=settings.db_echo)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Create declarative base for models
Base = declarative_base()
