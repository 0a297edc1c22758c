"""
Database engine and session management with SQLAlchemy async.

The engine and session factory are created explicitly and handed to the
components that need them; nothing in the ingestion core reaches for a
module-level connection.
"""

from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool
from core.config import settings
import logging

logger = logging.getLogger(__name__)


def create_session_factory(
    database_url: Optional[str] = None,
    echo: bool = False
) -> Tuple[AsyncEngine, async_sessionmaker]:
    """
    Create an async engine and a session factory bound to it.

    The caller owns the engine and must dispose of it when done.
    """
    engine = create_async_engine(
        database_url or settings.DATABASE_URL,
        echo=echo,
        poolclass=NullPool,  # Single batch invocations, no long-lived pool
        future=True
    )
    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )
    return engine, session_factory
