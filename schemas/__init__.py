"""
Pydantic schemas for data validation and serialization.

Schemas:
    upstream: Search envelope and raw items returned by the content API
    articles: Typed content items and the normalized article record
    ingestion: Invocation request, fetch window, diagnostics and results
    api: API endpoint request/response schemas

Usage:
    from schemas.upstream import SearchResponse, RawItem
    from schemas.articles import NormalizedArticle
    from schemas.ingestion import IngestionRequest, FetchWindow

Example:
    # Resolve the window of a daysBack request
    request = IngestionRequest(daysBack=3)
    window = FetchWindow.resolve(request)
    window.to_range()  # {"start": "...Z", "end": "...Z"}

Validation:
    Upstream items are parsed one at a time so that a single malformed
    item is counted and skipped instead of failing its page.
"""

__all__ = [
    "SearchResponse",
    "RawItem",
    "Announcement",
    "BlogPost",
    "NormalizedArticle",
    "IngestionRequest",
    "FetchWindow",
    "Diagnostics",
    "IngestionResult",
    "HealthCheckResponse",
]
