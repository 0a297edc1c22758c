"""
FastAPI application initialization
"""

from typing import Optional
from fastapi import FastAPI
from api.routes import health, ingestion
from core.config import settings
from core.logging import setup_logging
import logging
from api.middleware import RequestContextMiddleware
from ingestion.scheduler import IngestionScheduler

setup_logging()

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="AWS News Ingestion API",
    description="Ingests AWS What's New announcements and news blog posts",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(RequestContextMiddleware)

scheduler: Optional[IngestionScheduler] = None


# Include routers
app.include_router(health.router)
app.include_router(ingestion.router)


@app.on_event("startup")
async def startup_event():
    """Application startup event"""
    global scheduler
    logger.info("Starting AWS News Ingestion API")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Database: {settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else 'configured'}")

    if settings.SCHEDULER_ENABLED:
        scheduler = IngestionScheduler()
        scheduler.start()


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown event"""
    logger.info("Shutting down AWS News Ingestion API")
    if scheduler is not None:
        await scheduler.stop()


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "AWS News Ingestion API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "news": "/ingest/news",
            "blog": "/ingest/blog",
            "summaries": "/summaries"
        }
    }
