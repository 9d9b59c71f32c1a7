"""
Unit tests for model helpers
"""

from datetime import datetime, timedelta, timezone
from models.base import WorkType, utcnow


def test_utcnow_is_naive_utc():
    now = utcnow()

    assert now.tzinfo is None
    assert abs(now - datetime.now(timezone.utc).replace(tzinfo=None)) < timedelta(seconds=5)


def test_work_type_collection():
    assert WorkType.ALBUM.collection == "albums"
    assert WorkType.TRACK.collection == "tracks"
