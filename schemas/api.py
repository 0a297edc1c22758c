"""
Pydantic schemas for API request/response models
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


# ============================================================================
# Health Check Schemas
# ============================================================================

class SourceStats(BaseModel):
    """Stored article counts for one source"""
    source: str
    article_count: int = 0
    summarized_count: int = 0
    latest_published_at: Optional[datetime] = None


class HealthCheckResponse(BaseModel):
    """Health check response model"""
    status: str = Field(..., description="Overall system status: healthy, unhealthy")
    timestamp: datetime
    database_connected: bool
    sources: List[SourceStats] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "status": "healthy",
                "timestamp": "2026-01-27T12:00:00Z",
                "database_connected": True,
                "sources": [
                    {
                        "source": "aws-news",
                        "article_count": 412,
                        "summarized_count": 380,
                        "latest_published_at": "2026-01-27T09:00:00Z"
                    }
                ]
            }
        }


# ============================================================================
# Summary Schemas
# ============================================================================

class SummaryRequest(BaseModel):
    """Body of POST /summaries"""
    batch_size: Optional[int] = Field(None, alias="batchSize", ge=1, le=1000)

    class Config:
        populate_by_name = True


class SummaryResponse(BaseModel):
    status_code: int = Field(200, alias="statusCode")
    processed: int = 0
    errors: Optional[int] = None
    remaining: Optional[int] = None
    message: Optional[str] = None

    class Config:
        populate_by_name = True
