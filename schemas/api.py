"""
Pydantic schemas for API responses
"""

from pydantic import BaseModel, Field, validator
from typing import Optional, List, Dict, Any
from datetime import datetime
from models.base import SyncStatus, utcnow


# ============================================================================
# Sync Run Schemas
# ============================================================================

class SyncRunInfo(BaseModel):
    """One row of the sync run audit trail"""
    run_id: str
    status: SyncStatus
    crawlers: Optional[List[str]] = None
    started_at: datetime
    completed_at: Optional[datetime] = None
    duration_seconds: Optional[float] = None
    posts_collected: int = 0
    posts_skipped: int = 0
    posts_ingested: int = 0
    enrichment_failures: int = 0
    checkpoint_before: Optional[str] = None
    checkpoint_after: Optional[str] = None
    error_message: Optional[str] = None

    @validator("posts_collected", "posts_skipped", "posts_ingested", "enrichment_failures", pre=True)
    def none_to_zero(cls, v):
        return v or 0

    class Config:
        from_attributes = True
        use_enum_values = True


class SyncRunListResponse(BaseModel):
    """Recent sync runs, newest first"""
    runs: List[SyncRunInfo] = Field(default_factory=list)
    total_runs: int = 0


# ============================================================================
# Health Check Schemas
# ============================================================================

class HealthCheckResponse(BaseModel):
    """Health check response model"""
    status: str = Field("healthy", description="Overall system status: healthy, degraded, unhealthy")
    timestamp: datetime = Field(default_factory=utcnow)
    database_connected: bool
    last_checkpoint: Optional[datetime] = None
    last_run: Optional[SyncRunInfo] = None
    document_counts: Dict[str, int] = Field(default_factory=dict)

    class Config:
        json_schema_extra = {
            "example": {
                "status": "healthy",
                "timestamp": "2024-01-15T10:30:00Z",
                "database_connected": True,
                "last_checkpoint": "2024-01-15T10:00:00+00:00",
                "last_run": {
                    "run_id": "3f1f8a0e-8d7c-4d3b-9a43-8a6b1cf5f2a1",
                    "status": "success",
                    "crawlers": ["gvb", "stereogum", "pitchfork_tracks"],
                    "started_at": "2024-01-15T09:59:40Z",
                    "posts_collected": 60,
                    "posts_skipped": 52,
                    "posts_ingested": 8
                },
                "document_counts": {"posts": 1200, "artists": 950, "media": 1100}
            }
        }
