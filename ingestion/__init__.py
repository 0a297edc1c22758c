"""
Ingestion pipeline for AWS What's New announcements and news blog posts.

Modules:
    retry: Bounded exponential-backoff retry for upstream calls
    tag_formats: Year tag encodings queried for each partition
    client: Content API page fetcher
    paginator: Per-stream pagination state machine
    assembler: Year partitioning, format fan-out and merging
    normalizer: Raw item to NormalizedArticle conversion
    dedup: First-occurrence-wins deduplication by upstream id
    diagnostics: Partition diagnostics and year-tag mismatch detection
    runner: Window resolution, assembly and storage for one invocation
    scheduler: APScheduler integration for periodic runs

Subpackages:
    loaders: Idempotent storage of articles and cross-reference links
    enrichment: Link title resolution and AI summaries

Usage:
    from ingestion.client import ContentApiClient
    from ingestion.runner import IngestionRunner
    from schemas.ingestion import IngestionRequest

Example:
    async with ContentApiClient() as client:
        runner = IngestionRunner(session, client)
        result = await runner.run_news(IngestionRequest(daysBack=7))

    print(f"Inserted {result.inserted}, skipped {result.skipped}")

Error Handling:
    A failing tag format, item or link is logged and counted by the stage
    that owns it. Only failures outside those scopes (invalid window,
    lost database connection) reach the caller.
"""

__all__ = [
    "with_retry",
    "ContentApiClient",
    "PaginationController",
    "RangeAssembler",
    "ItemNormalizer",
    "deduplicate_items",
    "ArticleLoader",
    "ArticleRepository",
    "IngestionRunner",
    "IngestionScheduler",
]
