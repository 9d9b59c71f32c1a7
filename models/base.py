from datetime import datetime, timezone
from sqlalchemy import JSON
from sqlalchemy.orm import declarative_base
from sqlalchemy.dialects.postgresql import JSONB
import enum

Base = declarative_base()

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONDocument = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    """Current UTC time, naive, as stored in the DateTime columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# ============================================================================
# ENUMS
# ============================================================================

class Source(str, enum.Enum):
    """Content sources crawled by the roster"""
    BLEEP = "bleep"
    GVB = "gvb"
    PITCHFORK = "pitchfork"
    STEREOGUM = "stereogum"


class WorkType(str, enum.Enum):
    """Kinds of creative work a post can be about"""
    ALBUM = "album"
    TRACK = "track"

    @property
    def collection(self) -> str:
        """Sub-collection name under the owning artist"""
        return f"{self.value}s"


class MediaType(str, enum.Enum):
    """Embedded media platforms"""
    YOUTUBE = "youtube"
    SPOTIFY = "spotify"
    BANDCAMP = "bandcamp"


class SyncStatus(str, enum.Enum):
    """Sync run status"""
    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"
    PARTIAL = "partial"
