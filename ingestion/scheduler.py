import logging
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.ext.asyncio import async_sessionmaker
from core.config import settings
from core.database import create_session_factory
from ingestion.client import ContentApiClient
from ingestion.enrichment.link_titles import LinkTitleFetcher
from ingestion.enrichment.summaries import OpenAISummarizer, SummaryGenerator
from ingestion.loaders.article_repository import ArticleRepository
from ingestion.runner import IngestionRunner

logger = logging.getLogger(__name__)


class IngestionScheduler:
    def __init__(
        self,
        session_factory: Optional[async_sessionmaker] = None,
        interval_minutes: Optional[int] = None
    ):
        self.scheduler = AsyncIOScheduler()
        self.engine = None
        if session_factory is None:
            self.engine, session_factory = create_session_factory()
        self.SessionLocal = session_factory
        self.interval_minutes = interval_minutes or settings.INGEST_INTERVAL_MINUTES

    async def run_news_job(self):
        """Job to ingest the default news window"""
        logger.info("Scheduler: Starting news ingestion job")
        async with self.SessionLocal() as session:
            try:
                async with ContentApiClient() as client, LinkTitleFetcher() as titles:
                    runner = IngestionRunner(session, client, title_fetcher=titles)
                    await runner.run_news()
            except Exception as e:
                logger.error(f"Scheduler: news ingestion job failed - {e}")

    async def run_blog_job(self):
        """Job to ingest the default blog window"""
        logger.info("Scheduler: Starting blog ingestion job")
        async with self.SessionLocal() as session:
            try:
                async with ContentApiClient() as client:
                    runner = IngestionRunner(session, client)
                    await runner.run_blog()
            except Exception as e:
                logger.error(f"Scheduler: blog ingestion job failed - {e}")

    async def run_summary_job(self):
        """Job to summarize newly stored announcements"""
        if not settings.OPENAI_API_KEY:
            logger.debug("Scheduler: OPENAI_API_KEY not set, skipping summaries")
            return

        logger.info("Scheduler: Starting summary job")
        async with self.SessionLocal() as session:
            try:
                generator = SummaryGenerator(ArticleRepository(session), OpenAISummarizer())
                await generator.run()
            except Exception as e:
                logger.error(f"Scheduler: summary job failed - {e}")

    def start(self):
        """Start the scheduler"""
        trigger = IntervalTrigger(minutes=self.interval_minutes)
        for job_id, job in (
            ("news_ingestion", self.run_news_job),
            ("blog_ingestion", self.run_blog_job),
            ("summary_generation", self.run_summary_job),
        ):
            self.scheduler.add_job(
                job,
                trigger=trigger,
                id=job_id,
                replace_existing=True,
                max_instances=1
            )
        self.scheduler.start()
        logger.info(f"Ingestion scheduler started (every {self.interval_minutes} minutes)")

    async def stop(self):
        self.scheduler.shutdown()
        if self.engine is not None:
            await self.engine.dispose()
        logger.info("Ingestion scheduler stopped")
