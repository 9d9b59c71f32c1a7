"""
Pydantic schemas for crawled posts and classified media
"""

from pydantic import BaseModel, Field, validator
from typing import Optional, List
from datetime import datetime, timezone
from models.base import Source, WorkType, MediaType


class MediaRecord(BaseModel):
    """A deduplicated embedded-media reference"""
    id: str
    type: MediaType
    external_id: str
    url: str

    def to_document(self) -> dict:
        return {
            "type": self.type.value,
            "externalId": self.external_id,
            "url": self.url,
        }


class Post(BaseModel):
    """
    A normalized post as produced by a crawler.

    ``artists`` keeps credit order: index 0 is the primary artist and owns
    the work the post is about.
    """
    source: Source
    url: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    type: WorkType
    artists: List[str] = Field(default_factory=list)
    date: Optional[datetime] = None
    media: Optional[MediaRecord] = None

    @validator("title")
    def clean_title(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty after stripping")
        return v

    @validator("artists", pre=True)
    def clean_artists(cls, v):
        """Strip names and drop blanks, keeping credit order"""
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        return [str(a).strip() for a in v if str(a).strip()]

    @validator("date")
    def ensure_aware(cls, v):
        """Naive datetimes from crawlers are taken as UTC"""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v
