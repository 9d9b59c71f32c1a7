from sqlalchemy import Column, BigInteger, String, Enum, DateTime, Float, Integer, Text, Index
import uuid
from models.base import Base, SyncStatus, JSONDocument, utcnow


class SyncRun(Base):
    """
    Tracks metadata for each sync execution.

    Purpose:
    - Audit trail of all sync runs
    - Error tracking and debugging
    - Checkpoint movement per run
    """
    __tablename__ = "sync_runs"

    id = Column(BigInteger().with_variant(Integer(), "sqlite"), primary_key=True, autoincrement=True)
    run_id = Column(String(36), default=lambda: str(uuid.uuid4()), unique=True, nullable=False, index=True)

    # Run metadata
    status = Column(Enum(SyncStatus), default=SyncStatus.PENDING, nullable=False, index=True)
    crawlers = Column(JSONDocument, nullable=True)  # Roster names at run time

    # Timestamps
    started_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    completed_at = Column(DateTime, nullable=True)
    duration_seconds = Column(Float, nullable=True)

    # Statistics
    posts_collected = Column(Integer, default=0)
    posts_skipped = Column(Integer, default=0)
    posts_ingested = Column(Integer, default=0)
    enrichment_failures = Column(Integer, default=0)

    # Error tracking
    error_message = Column(Text, nullable=True)
    error_details = Column(JSONDocument, nullable=True)

    # Checkpoint info
    checkpoint_before = Column(String(64), nullable=True)
    checkpoint_after = Column(String(64), nullable=True)

    __table_args__ = (
        Index("idx_sync_run_status", "status", "started_at"),
    )
