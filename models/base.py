from sqlalchemy.orm import declarative_base
import enum

Base = declarative_base()


# ============================================================================
# ENUMS
# ============================================================================

class ArticleSource(str, enum.Enum):
    """Upstream feeds an article can come from"""
    AWS_NEWS = "aws-news"
    AWS_BLOG = "aws-blog"


class RunStatus(str, enum.Enum):
    """Outcome of one ingestion invocation"""
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"
