"""article tables

Revision ID: 0001_article_tables
Revises:
Create Date: 2026-01-27
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_article_tables"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "news_articles",
        sa.Column("article_id", sa.String(length=32), primary_key=True),
        sa.Column("source_id", sa.String(length=255), nullable=True),
        sa.Column("source", sa.String(length=50), nullable=False),
        sa.Column("title", sa.String(length=1000), nullable=False),
        sa.Column("url", sa.String(length=2048), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("raw_html", sa.Text(), nullable=True),
        sa.Column("blog_category", sa.String(length=200), nullable=True),
        sa.Column("ai_summary", sa.Text(), nullable=True),
        sa.Column("summary_generated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_news_articles_source_id", "news_articles", ["source_id"])
    op.create_index("ix_news_articles_source", "news_articles", ["source"])
    op.create_index("idx_news_articles_published", "news_articles", ["published_at"])
    op.create_index("idx_news_articles_source_published", "news_articles", ["source", "published_at"])

    op.create_table(
        "article_links",
        sa.Column("link_id", sa.String(length=32), primary_key=True),
        sa.Column(
            "article_id",
            sa.String(length=32),
            sa.ForeignKey("news_articles.article_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("url", sa.String(length=2048), nullable=False),
        sa.Column("title", sa.String(length=1000), nullable=True),
        sa.Column("domain", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_article_links_article_id", "article_links", ["article_id"])


def downgrade() -> None:
    op.drop_index("ix_article_links_article_id", table_name="article_links")
    op.drop_table("article_links")
    op.drop_index("idx_news_articles_source_published", table_name="news_articles")
    op.drop_index("idx_news_articles_published", table_name="news_articles")
    op.drop_index("ix_news_articles_source", table_name="news_articles")
    op.drop_index("ix_news_articles_source_id", table_name="news_articles")
    op.drop_table("news_articles")
