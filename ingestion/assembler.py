"""
Assemble the normalized items of a fetch window.

Announcements are queried per calendar-year partition and per tag
format. Within a partition every tag format gets its own sequential
pagination stream; the streams run concurrently and are merged in the
resolver's order before deduplication, so which duplicate survives does
not depend on which request finished first.
"""

import asyncio
import logging
from functools import partial
from typing import List, Optional, Tuple
from core.config import settings
from core.exceptions import MalformedItemError
from core.utils import utcnow
from ingestion.client import ContentApiClient
from ingestion.dedup import deduplicate_items
from ingestion.diagnostics import find_mismatched_items, log_diagnostics, log_partition
from ingestion.normalizer import ItemNormalizer
from ingestion.paginator import PaginationController
from ingestion.tag_formats import TagFormat, resolve_tag_formats
from models.base import ArticleSource
from schemas.articles import NormalizedArticle
from schemas.ingestion import Diagnostics, FetchWindow, PartitionDiagnostics
from schemas.upstream import RawItem

logger = logging.getLogger(__name__)


class RangeAssembler:
    """
    Collect every article of a window from the content API.

    Responsibilities:
    - Partition the window into years (newest first)
    - Fan out one pagination stream per tag format, isolating failures
    - Merge, deduplicate and normalize the results
    - Record diagnostics along the way
    """

    def __init__(
        self,
        client: ContentApiClient,
        page_size: Optional[int] = None,
        cross_reference_prefix: Optional[str] = None,
        blog_category_tag: Optional[str] = None,
        blog_path_filter: Optional[str] = None
    ):
        self.client = client
        self.page_size = page_size or settings.PAGE_SIZE
        self.news_normalizer = ItemNormalizer(ArticleSource.AWS_NEWS, cross_reference_prefix)
        self.blog_normalizer = ItemNormalizer(ArticleSource.AWS_BLOG)
        self.blog_category_tag = blog_category_tag if blog_category_tag is not None else settings.BLOG_CATEGORY_TAG
        self.blog_path_filter = blog_path_filter if blog_path_filter is not None else settings.BLOG_PATH_FILTER

    # ------------------------------------------------------------------
    # Announcements
    # ------------------------------------------------------------------

    async def assemble(
        self,
        window: FetchWindow,
        current_year: Optional[int] = None
    ) -> Tuple[List[NormalizedArticle], Diagnostics]:
        """
        Fetch, deduplicate and normalize all announcements in the window.

        Returns:
            Normalized in-window articles (newest partition first) and
            the diagnostics of the run
        """
        current_year = current_year or utcnow().year
        diagnostics = Diagnostics()
        collected: List[RawItem] = []

        for year in window.partitions(current_year):
            items, partition = await self.fetch_partition(year, window)
            diagnostics.partitions.append(partition)
            collected.extend(items)

        # Mistagged items can show up under more than one year
        unique = deduplicate_items(collected)
        diagnostics.cross_partition_duplicates = len(collected) - len(unique)

        articles = self._normalize(unique, self.news_normalizer, diagnostics)

        log_diagnostics(diagnostics)
        logger.info(f"Assembled {len(articles)} articles for {window.to_range()}")
        return articles, diagnostics

    async def fetch_partition(
        self,
        year: int,
        window: FetchWindow
    ) -> Tuple[List[RawItem], PartitionDiagnostics]:
        """Run every tag format's stream for one year and merge them"""
        formats = resolve_tag_formats(year)
        controllers = [
            PaginationController(
                partial(self._fetch_news_page, fmt.tag_for(year)),
                window,
                label=f"{year}/{fmt.name}"
            )
            for fmt in formats
        ]

        outcomes = await asyncio.gather(
            *(self._run_stream(controller, fmt, year) for controller, fmt in zip(controllers, formats))
        )

        diagnostics = PartitionDiagnostics(year=year)
        for controller, fmt, succeeded in zip(controllers, formats, outcomes):
            diagnostics.tag_formats_used.append(fmt.name)
            diagnostics.tag_format_results[fmt.name] = controller.items_fetched
            diagnostics.pages_fetched[fmt.name] = controller.pages_fetched
            if not succeeded:
                diagnostics.failed_formats.append(fmt.name)

        # Resolver order, not completion order
        fetched = [item for controller in controllers for item in controller.fetched]
        unique_fetched = deduplicate_items(fetched)
        accepted = deduplicate_items(item for controller in controllers for item in controller.accepted)

        diagnostics.total_items_fetched = len(fetched)
        diagnostics.duplicates_removed = len(fetched) - len(unique_fetched)
        diagnostics.items_in_window = len(accepted)
        diagnostics.mismatched_items = find_mismatched_items(unique_fetched, year)

        log_partition(diagnostics)
        return accepted, diagnostics

    async def _fetch_news_page(self, tag_id: str, page: int):
        return await self.client.fetch_news_page(tag_id, page, self.page_size)

    async def _run_stream(self, controller: PaginationController, fmt: TagFormat, year: int) -> bool:
        """Run one stream; a failure ends only this stream"""
        try:
            await controller.run()
            return True
        except Exception as e:
            logger.warning(
                f"Tag format {fmt.name} failed for {year} on page {controller.page}; "
                f"keeping {len(controller.accepted)} items from earlier pages: {e}"
            )
            return False

    # ------------------------------------------------------------------
    # Blog posts
    # ------------------------------------------------------------------

    async def assemble_blog(self, window: FetchWindow) -> Tuple[List[NormalizedArticle], Diagnostics]:
        """
        Fetch the news-category blog posts in the window.

        The blog directory has no year partitions; one stream is paged
        with the same stop rules, then posts outside the news blog path
        are dropped.
        """
        diagnostics = Diagnostics()
        controller = PaginationController(
            self._fetch_blog_page,
            window,
            label="blog"
        )
        # No sibling streams here, so a failure aborts the invocation
        await controller.run()

        unique = deduplicate_items(controller.accepted)
        in_path = [item for item in unique if self._in_blog_path(item)]
        filtered = len(unique) - len(in_path)
        diagnostics.cross_partition_duplicates = len(controller.accepted) - len(unique)

        articles = self._normalize(in_path, self.blog_normalizer, diagnostics)

        logger.info(
            f"Blog fetch: {controller.pages_fetched} pages, {controller.items_fetched} posts fetched, "
            f"{filtered} outside {self.blog_path_filter}, {len(articles)} in window"
        )
        return articles, diagnostics

    async def _fetch_blog_page(self, page: int):
        return await self.client.fetch_blog_page(page, self.page_size, self.blog_category_tag or None)

    def _in_blog_path(self, item: RawItem) -> bool:
        link = item.additional_fields.link or ""
        return self.blog_path_filter in link

    # ------------------------------------------------------------------

    @staticmethod
    def _normalize(
        items: List[RawItem],
        normalizer: ItemNormalizer,
        diagnostics: Diagnostics
    ) -> List[NormalizedArticle]:
        articles = []
        for item in items:
            try:
                articles.append(normalizer.normalize(item))
            except MalformedItemError as e:
                diagnostics.malformed_items += 1
                logger.debug(f"Skipping malformed item: {e}")
        return articles
