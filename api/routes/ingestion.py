"""
Manual triggers for the ingestion and summary passes
"""

from typing import Optional
from fastapi import APIRouter, Body, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from api.dependencies import get_content_client, get_db, get_summarizer, get_title_fetcher
from core.exceptions import IngestionException, InvalidWindowError
from ingestion.client import ContentApiClient
from ingestion.enrichment.link_titles import LinkTitleFetcher
from ingestion.enrichment.summaries import Summarizer, SummaryGenerator
from ingestion.loaders.article_repository import ArticleRepository
from ingestion.runner import IngestionRunner
from schemas.api import SummaryRequest, SummaryResponse
from schemas.ingestion import IngestionRequest
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Ingestion"])


def _failure(request: Request, error: IngestionException) -> HTTPException:
    request_id = getattr(request.state, "request_id", None)
    logger.error(f"[{request_id}] {error}")
    if isinstance(error, InvalidWindowError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.message)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=error.to_dict())


@router.post("/ingest/news")
async def ingest_news(
    request: Request,
    body: Optional[IngestionRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
    client: ContentApiClient = Depends(get_content_client),
    title_fetcher: LinkTitleFetcher = Depends(get_title_fetcher)
):
    """
    Ingest announcements for {startDate?, endDate?, daysBack?}.

    Returns the inserted/skipped counts, the resolved date range and
    fetch diagnostics.
    """
    runner = IngestionRunner(db, client, title_fetcher=title_fetcher)
    try:
        result = await runner.run_news(body)
    except IngestionException as e:
        raise _failure(request, e)
    return result.to_payload()


@router.post("/ingest/blog")
async def ingest_blog(
    request: Request,
    body: Optional[IngestionRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
    client: ContentApiClient = Depends(get_content_client)
):
    """Ingest news-category blog posts for {startDate?, endDate?, daysBack?}"""
    runner = IngestionRunner(db, client)
    try:
        result = await runner.run_blog(body)
    except IngestionException as e:
        raise _failure(request, e)
    return result.to_payload()


@router.post("/summaries", response_model=SummaryResponse, response_model_exclude_none=True)
async def generate_summaries(
    body: Optional[SummaryRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
    summarizer: Summarizer = Depends(get_summarizer)
):
    """Summarize the newest announcements that have none yet"""
    batch_size = body.batch_size if body else None
    generator = SummaryGenerator(ArticleRepository(db), summarizer)
    return SummaryResponse(**await generator.run(batch_size))
