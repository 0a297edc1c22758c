"""
Create (or recreate) the article tables without going through alembic
"""

import argparse
import asyncio
import logging
import sys
import os

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.database import create_session_factory
from core.logging import setup_logging
from models.base import Base
# Registers news_articles and article_links on Base.metadata
import models.article  # noqa: F401
import models.article_link  # noqa: F401

logger = logging.getLogger(__name__)


async def init_database(drop: bool = False):
    engine, _ = create_session_factory()

    try:
        async with engine.begin() as conn:
            if drop:
                logger.warning("Dropping article tables")
                await conn.run_sync(Base.metadata.drop_all)
            logger.info(f"Creating tables: {', '.join(Base.metadata.tables)}")
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Tables created successfully.")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the article tables")
    parser.add_argument("--drop", action="store_true", help="Drop existing tables first")
    setup_logging()
    asyncio.run(init_database(drop=parser.parse_args().drop))
