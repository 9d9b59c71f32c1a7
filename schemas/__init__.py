"""
Pydantic schemas for data validation and serialization.

Schemas:
    post: Crawled posts and classified media records
    api: API endpoint response models

Usage:
    from schemas.post import Post, MediaRecord
    from schemas.api import HealthCheckResponse, SyncRunInfo

Example:
    post = Post(
        source=Source.PITCHFORK,
        url="https://pitchfork.com/reviews/tracks/some-track/",
        title="Some Track",
        type=WorkType.TRACK,
        artists=["Primary Artist", "Featured Artist"],
    )
"""

__all__ = [
    "Post",
    "MediaRecord",
    "HealthCheckResponse",
    "SyncRunInfo",
    "SyncRunListResponse",
]
