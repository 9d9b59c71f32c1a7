"""
Document identifiers.

Deterministic ids are derived from content so that the same logical entity
(an artist name, a work title, a media pair) always maps to the same store
key, across runs and across cosmetic differences in the input string.
"""

import hashlib
import re
import unicodedata
import uuid

_WHITESPACE = re.compile(r"\s+")


def normalize_key(value: str) -> str:
    """Normalize a string before hashing (unicode form, case, whitespace)."""
    value = unicodedata.normalize("NFKC", value or "")
    return _WHITESPACE.sub(" ", value).strip().casefold()


def create_id(value: str) -> str:
    """Return a stable 32-char id for ``value``."""
    digest = hashlib.sha256(normalize_key(value).encode("utf-8")).hexdigest()
    return digest[:32]


def new_document_id() -> str:
    """Return a random id for auto-id documents (posts)."""
    return uuid.uuid4().hex[:20]
