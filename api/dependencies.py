"""
FastAPI dependencies: database sessions and upstream clients
"""

from typing import AsyncGenerator, Optional
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from core.config import settings
from core.database import create_session_factory
from ingestion.client import ContentApiClient
from ingestion.enrichment.link_titles import LinkTitleFetcher
from ingestion.enrichment.summaries import OpenAISummarizer, Summarizer

_session_factory: Optional[async_sessionmaker] = None


def get_session_factory() -> async_sessionmaker:
    """Session factory shared by the API process, created on first use"""
    global _session_factory
    if _session_factory is None:
        _, _session_factory = create_session_factory()
    return _session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with get_session_factory()() as session:
        yield session


async def get_content_client() -> AsyncGenerator[ContentApiClient, None]:
    async with ContentApiClient() as client:
        yield client


async def get_title_fetcher() -> AsyncGenerator[LinkTitleFetcher, None]:
    async with LinkTitleFetcher() as fetcher:
        yield fetcher


def get_summarizer() -> Summarizer:
    if not settings.OPENAI_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Summary generation is not configured (OPENAI_API_KEY missing)"
        )
    return OpenAISummarizer()
