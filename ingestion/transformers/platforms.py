"""
URL parsers that pull the platform-specific id out of an embed or page URL.

Each parser returns ``None`` when the URL carries no recognizable id.
"""

import re
from typing import Optional
from urllib.parse import urlparse, parse_qs

_YOUTUBE_ID = re.compile(r"^[A-Za-z0-9_-]+$")
_SPOTIFY_KINDS = ("track", "album", "playlist", "artist", "episode", "show")
_BANDCAMP_PARAM = re.compile(r"(album|track)=(\d+)")


def get_id_from_youtube_url(url: str) -> Optional[str]:
    """
    Examples:
        https://www.youtube.com/watch?v=abc123xyz&t=5  -> abc123xyz
        https://www.youtube.com/embed/abc123xyz?rel=0  -> abc123xyz
        https://youtu.be/abc123xyz                     -> abc123xyz
    """
    parsed = urlparse(url)
    query = parse_qs(parsed.query)
    if query.get("v"):
        candidate = query["v"][0]
    else:
        parts = [p for p in parsed.path.split("/") if p]
        if not parts:
            return None
        if parts[0] in ("embed", "v", "shorts", "live") and len(parts) > 1:
            candidate = parts[1]
        elif "youtu.be" in parsed.netloc:
            candidate = parts[0]
        else:
            return None
    return candidate if _YOUTUBE_ID.match(candidate) else None


def get_id_from_spotify_url(url: str) -> Optional[str]:
    """
    Returns ``<kind>:<id>`` so that a track and an album sharing an id
    never collide.

    Examples:
        https://open.spotify.com/embed/track/4uLU6hMCjMI75M1A2tKUQC -> track:4uLU6hMCjMI75M1A2tKUQC
        spotify:album:1DFixLWuPkv3KT3TnV35m3                      -> album:1DFixLWuPkv3KT3TnV35m3
    """
    if url.startswith("spotify:"):
        parts = url.split(":")[1:]
    else:
        parts = [p for p in urlparse(url).path.split("/") if p]

    for index, part in enumerate(parts[:-1]):
        if part in _SPOTIFY_KINDS:
            return f"{part}:{parts[index + 1]}"
    return None


def get_id_from_bandcamp_url(url: str) -> Optional[str]:
    """
    Bandcamp embeds put the numeric id in the player path.

    Examples:
        https://bandcamp.com/EmbeddedPlayer/album=1234567/size=large/ -> album:1234567
        https://bandcamp.com/EmbeddedPlayer/v=2/track=987/            -> track:987
    """
    match = _BANDCAMP_PARAM.search(urlparse(url).path)
    if not match:
        match = _BANDCAMP_PARAM.search(urlparse(url).query)
    if not match:
        return None
    return f"{match.group(1)}:{match.group(2)}"
