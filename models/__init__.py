"""
SQLAlchemy ORM models for database tables.

Models:
    base: Base declarative class and shared enums (ArticleSource, RunStatus)
    article: Ingested articles keyed by a derived id
    article_link: Cross-reference links extracted from article bodies

Usage:
    from models.article import NewsArticle
    from models.article_link import ArticleLink
    from models.base import ArticleSource

Relationships:
    - NewsArticle → ArticleLink (one-to-many, by article_id)
"""

__all__ = [
    "Base",
    "ArticleSource",
    "RunStatus",
    "NewsArticle",
    "ArticleLink",
]
