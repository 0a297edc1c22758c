"""
Parameterized SQL access to the article tables
"""

from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy import func, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession
from models.article import NewsArticle
from models.article_link import ArticleLink
from schemas.articles import NormalizedArticle
import logging

logger = logging.getLogger(__name__)


class ArticleRepository:
    """
    Storage operations used by the ingestion and summary passes.

    The session is supplied by the caller, who owns its lifecycle.
    Writes are conflict-safe: inserting an id that already exists is
    a no-op reported through the return value, never an error.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def exists(self, article_id: str) -> bool:
        """Whether an article row with this derived id is stored"""
        result = await self.db.execute(
            select(NewsArticle.article_id).where(NewsArticle.article_id == article_id).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def insert_article(self, article_id: str, article: NormalizedArticle) -> bool:
        """
        INSERT ... ON CONFLICT (article_id) DO NOTHING.

        Returns:
            True if a row was created, False if another run stored it first
        """
        stmt = insert(NewsArticle).values(
            article_id=article_id,
            source_id=article.source_id,
            source=article.source.value,
            title=article.title,
            url=article.url,
            description=article.description,
            raw_html=article.raw_body,
            published_at=article.published_at,
            blog_category=article.blog_category,
        ).on_conflict_do_nothing(index_elements=["article_id"])

        result = await self.db.execute(stmt)
        return (result.rowcount or 0) > 0

    async def insert_link(
        self,
        link_id: str,
        article_id: str,
        url: str,
        title: Optional[str],
        domain: str
    ) -> bool:
        """Insert a cross-reference link, ignoring duplicate keys"""
        stmt = insert(ArticleLink).values(
            link_id=link_id,
            article_id=article_id,
            url=url,
            title=title,
            domain=domain,
        ).on_conflict_do_nothing()

        result = await self.db.execute(stmt)
        return (result.rowcount or 0) > 0

    async def find_articles_needing_summary(
        self,
        source: str,
        min_description_length: int,
        limit: int
    ) -> List[NewsArticle]:
        """Newest articles of a source with a long enough description and no summary"""
        result = await self.db.execute(
            select(NewsArticle)
            .where(
                NewsArticle.ai_summary.is_(None),
                NewsArticle.description.is_not(None),
                func.length(NewsArticle.description) > min_description_length,
                NewsArticle.source == source,
            )
            .order_by(NewsArticle.published_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def save_summary(self, article_id: str, summary: str, generated_at: Optional[datetime] = None) -> None:
        await self.db.execute(
            update(NewsArticle)
            .where(NewsArticle.article_id == article_id)
            .values(
                ai_summary=summary,
                summary_generated_at=generated_at or datetime.now(timezone.utc),
            )
        )

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
