"""
Custom exceptions for the sync pipeline with structured error context.

This module provides the exception hierarchy used throughout crawling,
enrichment and loading. Each exception carries context information for
debugging and monitoring.

Exception Hierarchy:
    SyncException (base)
    ├── ConfigurationError
    ├── CrawlError
    ├── EnrichmentError
    │   ├── ScrapeError
    │   └── EmbedParseError
    ├── LoadError
    │   ├── DocumentStoreError
    │   └── CommitError
    └── CheckpointError
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone


class SyncException(Exception):
    """
    Base exception for all sync-related errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (source, url, etc.)
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
        """Convert exception to dictionary for logging/storage."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


class ConfigurationError(SyncException):
    """
    Raised when the roster or a source profile is misconfigured.

    Context should include:
        - crawler_name or source: The offending configuration key
    """
    pass


# ============================================================================
# Crawl Errors
# ============================================================================

class CrawlError(SyncException):
    """
    Raised when a crawler fails to produce its posts.

    Context should include:
        - crawler_name: Name of the crawler in the roster
        - source: Source the crawler reads from
    """
    pass


# ============================================================================
# Enrichment Errors
# ============================================================================

class EnrichmentError(SyncException):
    """Base exception for secondary-page enrichment failures."""
    pass


class ScrapeError(EnrichmentError):
    """
    Raised when a page fetch fails.

    Context should include:
        - url: The page that failed
        - status_code: HTTP status code (if applicable)
    """
    pass


class EmbedParseError(EnrichmentError):
    """
    Raised when an embed payload is present but cannot be parsed.

    Context should include:
        - selector: Selector the payload was read from
        - payload: The raw payload (truncated)
    """
    pass


# ============================================================================
# Load Errors
# ============================================================================

class LoadError(SyncException):
    """Base exception for document store write failures."""
    pass


class DocumentStoreError(LoadError):
    """
    Raised when a document store read or write fails.

    Context should include:
        - operation: get, list, set, create
        - path: Document path
    """
    pass


class CommitError(LoadError):
    """
    Raised when an atomic write batch fails to commit.

    Context should include:
        - operations: Number of staged operations
        - documents: Number of documents touched
    """
    pass


# ============================================================================
# Checkpoint Errors
# ============================================================================

class CheckpointError(SyncException):
    """
    Raised when the sync checkpoint cannot be read or parsed.

    Context should include:
        - path: Checkpoint document path
        - checkpoint_value: The raw stored value
    """
    pass
