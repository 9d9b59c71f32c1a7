"""
Core utilities and configuration for the post sync system.

This package provides foundational components used throughout the pipeline:

Modules:
    config: Application configuration and environment variable management
    database: Database connection and session management
    exceptions: Custom exception hierarchy for error handling
    ids: Deterministic and auto-generated document identifiers
    logging: Logging configuration and utilities

Usage:
    from core.config import settings
    from core.database import async_session_maker
    from core.exceptions import CrawlError, CommitError
    from core.ids import create_id
    from core.logging import setup_logging

Example:
    # Initialize logging
    setup_logging()

    # Get database session
    async with async_session_maker() as session:
        store = DocumentStore(session)
"""

__all__ = [
    "settings",
    "setup_logging",
    "create_id",
    "new_document_id",
    # Exceptions
    "SyncException",
    "ConfigurationError",
    "CrawlError",
    "EnrichmentError",
    "ScrapeError",
    "EmbedParseError",
    "LoadError",
    "DocumentStoreError",
    "CommitError",
    "CheckpointError",
]
