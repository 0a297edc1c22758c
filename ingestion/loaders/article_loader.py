"""
Write normalized articles and their cross-reference links (idempotent)
"""

from typing import List, Optional
from sqlalchemy.exc import DBAPIError
from core.config import settings
from core.exceptions import StorageUnavailableError, StorageWriteError
from core.utils import derive_id
from ingestion.enrichment.link_titles import LinkTitleFetcher
from ingestion.loaders.article_repository import ArticleRepository
from schemas.articles import NormalizedArticle
from schemas.ingestion import StorageResult
import logging

logger = logging.getLogger(__name__)


class ArticleLoader:
    """
    Persist articles with at-most-once semantics per derived id.

    Ensures:
    - Re-ingesting the same window inserts nothing new
    - A failing article is rolled back and counted, the rest continue
    - Links are written only for articles created by this run
    """

    def __init__(
        self,
        repository: ArticleRepository,
        title_fetcher: Optional[LinkTitleFetcher] = None,
        link_domain: Optional[str] = None
    ):
        self.repository = repository
        self.title_fetcher = title_fetcher
        self.link_domain = link_domain or settings.CROSS_REFERENCE_DOMAIN

    async def load(self, articles: List[NormalizedArticle]) -> StorageResult:
        """
        Store each article in its own transaction.

        Returns:
            Inserted/skipped/failed counters plus link counters

        Raises:
            StorageUnavailableError: If the database connection is lost
        """
        result = StorageResult()

        for article in articles:
            article_id = article.derived_id

            try:
                if await self.repository.exists(article_id):
                    result.skipped += 1
                    continue

                created = await self.repository.insert_article(article_id, article)
                await self.repository.commit()
            except Exception as e:
                await self._rollback_or_abort(e, article_id)
                result.failed += 1
                error = StorageWriteError(
                    "Failed to store article",
                    context={"article_id": article_id, "url": article.url, "table_name": "news_articles"},
                    original_exception=e
                )
                logger.error(str(error), extra={"error_context": error.to_dict()})
                continue

            if not created:
                # Stored concurrently between the check and the insert
                result.skipped += 1
                continue

            result.inserted += 1

            if article.cross_references:
                inserted, failed = await self._store_links(article_id, article.cross_references)
                result.links_inserted += inserted
                result.links_failed += failed

        logger.info(
            f"Storage: {result.inserted} inserted, {result.skipped} skipped, "
            f"{result.failed} failed, {result.links_inserted} links"
        )
        return result

    async def _store_links(self, article_id: str, urls: List[str]) -> tuple:
        inserted = 0
        failed = 0

        for url in urls:
            title = await self._fetch_title(url)

            try:
                created = await self.repository.insert_link(
                    link_id=derive_id(article_id, url),
                    article_id=article_id,
                    url=url,
                    title=title,
                    domain=self.link_domain
                )
                await self.repository.commit()
                if created:
                    inserted += 1
            except Exception as e:
                await self._rollback_or_abort(e, article_id)
                failed += 1
                logger.warning(f"Failed to store link {url} for article {article_id}: {e}")

        return inserted, failed

    async def _fetch_title(self, url: str) -> Optional[str]:
        if self.title_fetcher is None:
            return None
        try:
            return await self.title_fetcher.fetch_title(url)
        except Exception as e:
            logger.warning(f"Title lookup failed for {url}, storing link untitled: {e}")
            return None

    async def _rollback_or_abort(self, error: Exception, article_id: str) -> None:
        """Roll back the failed write, or abort the run if the connection is gone"""
        if isinstance(error, DBAPIError) and error.connection_invalidated:
            raise StorageUnavailableError(
                "Database connection lost",
                context={"article_id": article_id},
                original_exception=error
            )
        try:
            await self.repository.rollback()
        except Exception as e:
            raise StorageUnavailableError(
                "Rollback failed",
                context={"article_id": article_id},
                original_exception=e
            )
