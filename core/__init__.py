"""
Core utilities and configuration for the news ingestion service.

This package provides foundational components used throughout the pipeline:

Modules:
    config: Application configuration and environment variable management
    database: Engine and session factory creation
    exceptions: Custom exception hierarchy for error handling
    logging: Logging configuration
    utils: Deterministic id derivation and timestamp helpers

Usage:
    from core.config import settings
    from core.database import create_session_factory
    from core.exceptions import UpstreamRequestError, StorageWriteError
    from core.logging import setup_logging

Example:
    # Initialize logging
    setup_logging()

    # Open a session for one ingestion run
    engine, session_factory = create_session_factory()
    async with session_factory() as session:
        # Perform database operations
        pass
    await engine.dispose()
"""

__all__ = [
    "settings",
    "create_session_factory",
    "setup_logging",
    # Exceptions
    "IngestionException",
    "UpstreamError",
    "UpstreamRequestError",
    "MalformedItemError",
    "StorageError",
    "StorageWriteError",
    "StorageUnavailableError",
    "EnrichmentError",
    "EnrichmentTimeoutError",
    "SummaryGenerationError",
    "InvalidWindowError",
]
