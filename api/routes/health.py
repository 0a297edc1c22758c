"""
Health check endpoint with database and per-source article status
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select, text
from api.dependencies import get_db
from schemas.api import HealthCheckResponse, SourceStats
from models.article import NewsArticle
from core.utils import utcnow
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    Health check endpoint.

    Returns:
    - Database connectivity status
    - Stored article counts per source
    """

    db_connected = False

    try:
        await db.execute(text("SELECT 1"))
        db_connected = True
    except Exception as e:
        logger.error(f"Database connection failed: {str(e)}")

    sources = []
    if db_connected:
        try:
            result = await db.execute(
                select(
                    NewsArticle.source,
                    func.count(NewsArticle.article_id),
                    func.count(NewsArticle.ai_summary),
                    func.max(NewsArticle.published_at),
                ).group_by(NewsArticle.source)
            )
            for source, article_count, summarized_count, latest in result.all():
                sources.append(SourceStats(
                    source=source,
                    article_count=article_count,
                    summarized_count=summarized_count,
                    latest_published_at=latest
                ))
        except Exception as e:
            logger.error(f"Failed to fetch article stats: {str(e)}")

    return HealthCheckResponse(
        status="healthy" if db_connected else "unhealthy",
        timestamp=utcnow(),
        database_connected=db_connected,
        sources=sources
    )
