from sqlalchemy import Column, String, Text, DateTime, Index, func
from models.base import Base


class NewsArticle(Base):
    """
    One ingested announcement or blog post.

    Design:
    - article_id is a deterministic hash of the upstream identity (source id
      for announcements, URL for blog posts), so re-ingesting the same item
      hits the primary key instead of creating a new row
    - Rows are append-only for the ingestion pipeline; only the summary pass
      updates ai_summary / summary_generated_at afterwards
    """
    __tablename__ = "news_articles"

    article_id = Column(String(32), primary_key=True)

    # Source tracking
    source_id = Column(String(255), nullable=True, index=True)  # Upstream item id
    source = Column(String(50), nullable=False, index=True)

    # Content
    title = Column(String(1000), nullable=False)
    url = Column(String(2048), nullable=False)
    description = Column(Text, nullable=True)  # Plain text, HTML stripped
    raw_html = Column(Text, nullable=True)
    blog_category = Column(String(200), nullable=True)

    # Enrichment
    ai_summary = Column(Text, nullable=True)
    summary_generated_at = Column(DateTime(timezone=True), nullable=True)

    # Timestamps
    published_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index("idx_news_articles_published", "published_at"),
        Index("idx_news_articles_source_published", "source", "published_at"),
    )
