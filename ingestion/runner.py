"""
Ingestion Runner - Orchestrates fetch, normalize and store for one invocation.

This module ties the pipeline together:
- Resolve the fetch window from the invocation request
- Assemble the in-window articles from the content API
- Store them idempotently and report inserted/skipped counts

Per-format, per-item and per-link failures are absorbed by the stages
that own them. Anything else (an invalid window, a lost database
connection) propagates so the caller can report a failed run.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from core.config import settings
from ingestion.assembler import RangeAssembler
from ingestion.client import ContentApiClient
from ingestion.enrichment.link_titles import LinkTitleFetcher
from ingestion.loaders.article_loader import ArticleLoader
from ingestion.loaders.article_repository import ArticleRepository
from models.base import ArticleSource, RunStatus
from schemas.ingestion import Diagnostics, FetchWindow, IngestionRequest, IngestionResult, StorageResult

logger = logging.getLogger(__name__)


def run_status(stored: StorageResult, diagnostics: Diagnostics) -> RunStatus:
    """PARTIAL when any format, article or link was lost along the way"""
    if stored.failed or stored.links_failed:
        return RunStatus.PARTIAL
    if any(p.failed_formats for p in diagnostics.partitions):
        return RunStatus.PARTIAL
    return RunStatus.SUCCESS


class IngestionRunner:
    """
    Ingestion orchestrator for the news and blog sources.

    Responsibilities:
    - Turn {startDate?, endDate?, daysBack?} into a FetchWindow
    - Drive the RangeAssembler and the ArticleLoader
    - Build the invocation payload
    """

    def __init__(
        self,
        db_session: AsyncSession,
        client: ContentApiClient,
        title_fetcher: Optional[LinkTitleFetcher] = None,
        now: Optional[datetime] = None
    ):
        self.db = db_session
        self.client = client
        self.title_fetcher = title_fetcher
        self.now = now
        self.assembler = RangeAssembler(client)

    def resolve_window(self, request: IngestionRequest) -> FetchWindow:
        return FetchWindow.resolve(
            request,
            now=self.now,
            default_days_back=settings.DEFAULT_DAYS_BACK
        )

    async def run_news(self, request: Optional[IngestionRequest] = None) -> IngestionResult:
        """
        Ingest announcements for the requested window.

        Raises:
            InvalidWindowError: If the request does not describe a valid window
            StorageUnavailableError: If the database connection is lost
        """
        request = request or IngestionRequest()
        window = self.resolve_window(request)
        logger.info(f"Starting news ingestion for {window.to_range()}")

        current_year = self.now.year if self.now else None
        articles, diagnostics = await self.assembler.assemble(window, current_year=current_year)

        loader = ArticleLoader(ArticleRepository(self.db), title_fetcher=self.title_fetcher)
        stored = await loader.load(articles)

        result = IngestionResult(
            status=run_status(stored, diagnostics),
            source=ArticleSource.AWS_NEWS.value,
            inserted=stored.inserted,
            skipped=stored.skipped,
            failed=stored.failed,
            links_inserted=stored.links_inserted,
            processed=len(articles),
            date_range=window.to_range(),
            diagnostics=diagnostics.summary()
        )

        logger.info(
            f"News ingestion completed - Processed: {result.processed}, "
            f"Inserted: {result.inserted}, Skipped: {result.skipped}, Failed: {result.failed}"
        )
        return result

    async def run_blog(self, request: Optional[IngestionRequest] = None) -> IngestionResult:
        """Ingest news-category blog posts for the requested window"""
        request = request or IngestionRequest()
        window = self.resolve_window(request)
        logger.info(f"Starting blog ingestion for {window.to_range()}")

        articles, diagnostics = await self.assembler.assemble_blog(window)

        loader = ArticleLoader(ArticleRepository(self.db))
        stored = await loader.load(articles)

        result = IngestionResult(
            status=run_status(stored, diagnostics),
            source=ArticleSource.AWS_BLOG.value,
            inserted=stored.inserted,
            skipped=stored.skipped,
            failed=stored.failed,
            processed=len(articles),
            date_range=window.to_range(),
            diagnostics=diagnostics.summary()
        )

        logger.info(
            f"Blog ingestion completed - Processed: {result.processed}, "
            f"Inserted: {result.inserted}, Skipped: {result.skipped}, Failed: {result.failed}"
        )
        return result
