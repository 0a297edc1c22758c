from sqlalchemy import Column, String, DateTime, ForeignKey, func
from models.base import Base


class ArticleLink(Base):
    """
    Cross-reference link found in an announcement body, pointing at a
    companion blog post. link_id is derived from (article_id, url).
    """
    __tablename__ = "article_links"

    link_id = Column(String(32), primary_key=True)
    article_id = Column(
        String(32),
        ForeignKey("news_articles.article_id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    url = Column(String(2048), nullable=False)
    title = Column(String(1000), nullable=True)
    domain = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
