"""
Custom exceptions for the ingestion pipeline with structured error context.

Each exception carries a context dictionary so failures can be logged
with enough information to trace the upstream call, article or link
that caused them.

Exception Hierarchy:
    IngestionException (base)
    ├── UpstreamError
    │   ├── UpstreamRequestError
    │   └── MalformedItemError
    ├── StorageError
    │   ├── StorageWriteError
    │   └── StorageUnavailableError
    ├── EnrichmentError
    │   ├── EnrichmentTimeoutError
    │   └── SummaryGenerationError
    └── InvalidWindowError
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone


class IngestionException(Exception):
    """
    Base exception for all ingestion-related errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (url, article_id, etc.)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now(timezone.utc)

        self.context["error_timestamp"] = self.timestamp.isoformat()

        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Upstream Errors
# ============================================================================

class UpstreamError(IngestionException):
    """Base exception for failures talking to the upstream content API."""
    pass


class UpstreamRequestError(UpstreamError):
    """
    Raised when the content API answers with a non-success status or the
    transport fails. Retried by the retry executor; once attempts are
    exhausted it is fatal for a single (partition, tag format) stream only.

    Context should include:
        - url: The request URL
        - status_code: HTTP status code (if a response was received)
        - tag_id: The tag filter of the request (if any)
        - page: 1-based page number
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None,
        status_code: Optional[int] = None
    ):
        super().__init__(message, context, original_exception)
        self.status_code = status_code
        if status_code is not None:
            self.context["status_code"] = status_code


class MalformedItemError(UpstreamError):
    """
    Raised when an upstream item lacks a field required to store it
    (identity, URL or a resolvable date). Such items are skipped.

    Context should include:
        - source_id: Upstream item id (if present)
        - missing_field: Name of the missing field
    """
    pass


# ============================================================================
# Storage Errors
# ============================================================================

class StorageError(IngestionException):
    """Base exception for storage failures."""
    pass


class StorageWriteError(StorageError):
    """
    Raised when inserting one article or one link fails. Caught by the
    storage writer, counted, and never aborts the batch.

    Context should include:
        - article_id: Derived id of the article
        - url: Link URL (for link writes)
        - table_name: Target table
    """
    pass


class StorageUnavailableError(StorageError):
    """Connection-level storage failure that aborts the whole run."""
    pass


# ============================================================================
# Enrichment Errors
# ============================================================================

class EnrichmentError(IngestionException):
    """Base exception for optional enrichment steps."""
    pass


class EnrichmentTimeoutError(EnrichmentError):
    """
    Raised when a cross-reference title fetch times out or returns a
    non-success status. Converted to "no title" by the fetcher.
    """
    pass


class SummaryGenerationError(EnrichmentError):
    """Raised when the summarizer fails or returns an empty summary."""
    pass


# ============================================================================
# Invocation Errors
# ============================================================================

class InvalidWindowError(IngestionException):
    """
    Raised when the requested ingestion window cannot be built, e.g. an
    end date without a start date, or a start after the end.
    """
    pass
