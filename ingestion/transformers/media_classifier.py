"""
Classify embed URLs into deduplicated media records
"""

from typing import Callable, List, Optional, Tuple
from core.ids import create_id
from models.base import MediaType
from schemas.post import MediaRecord, Post
from ingestion.transformers.platforms import (
    get_id_from_bandcamp_url,
    get_id_from_spotify_url,
    get_id_from_youtube_url,
)
import logging

logger = logging.getLogger(__name__)

# Checked in order; the first platform whose marker appears in the URL wins
PLATFORMS: List[Tuple[MediaType, Tuple[str, ...], Callable[[str], Optional[str]]]] = [
    (MediaType.YOUTUBE, ("youtube", "youtu.be"), get_id_from_youtube_url),
    (MediaType.SPOTIFY, ("spotify",), get_id_from_spotify_url),
    (MediaType.BANDCAMP, ("bandcamp",), get_id_from_bandcamp_url),
]


def media_id(media_type: MediaType, external_id: str) -> str:
    """Deterministic media id; the URL itself is not part of identity."""
    return create_id(f"{media_type.value}_{external_id}")


class MediaClassifier:
    """
    Turn a raw URL into a ``MediaRecord`` and attach it to its post.

    Records are keyed by ``(type, external id)`` so cosmetic URL variations
    (extra query params, embed vs. watch pages) collapse to a single record.
    The record is written insert-if-absent when the post is batched.
    """

    def classify(self, url: Optional[str], post: Optional[Post] = None) -> Optional[MediaRecord]:
        """
        Classify ``url``; when ``post`` is given its media reference is set.

        Returns:
            The media record, or None for an empty or unrecognized URL
        """
        if not url:
            return None

        for media_type, markers, parse in PLATFORMS:
            if any(marker in url for marker in markers):
                break
        else:
            logger.debug(f"No known platform for embed url {url}")
            return None

        external_id = parse(url)
        if not external_id:
            logger.warning(f"Could not parse {media_type.value} id from {url}")
            return None

        record = MediaRecord(
            id=media_id(media_type, external_id),
            type=media_type,
            external_id=external_id,
            url=url,
        )

        if post is not None:
            post.media = record

        return record
