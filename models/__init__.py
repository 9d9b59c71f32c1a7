"""
SQLAlchemy ORM models for database tables.

Models:
    base: Base declarative class and shared enums (Source, WorkType, MediaType, SyncStatus)
    document: Path-addressed documents backing the document store
    sync_run: Sync execution tracking and metrics

Database Schema:
    All models inherit from the Base declarative class. Document bodies use
    JSONB on PostgreSQL and plain JSON on other dialects.

Usage:
    from models.document import Document
    from models.sync_run import SyncRun
    from models.base import Source, SyncStatus

Logical collections stored as documents:
    - posts/<auto-id>
    - artists/<id>, artists/<id>/albums/<id>, artists/<id>/tracks/<id>
    - media/<id>
    - settings/timestamps (field: lastScrape)
"""

__all__ = [
    "Base",
    "Source",
    "WorkType",
    "MediaType",
    "SyncStatus",
    "Document",
    "SyncRun",
]
