"""
Unit tests for platform URL parsers
"""

import pytest
from ingestion.transformers.platforms import (
    get_id_from_bandcamp_url,
    get_id_from_spotify_url,
    get_id_from_youtube_url,
)


@pytest.mark.parametrize("url,expected", [
    ("https://youtube.com/watch?v=abc", "abc"),
    ("https://www.youtube.com/watch?v=abc&t=5", "abc"),
    ("https://www.youtube.com/embed/dQw4w9WgXcQ?rel=0", "dQw4w9WgXcQ"),
    ("https://youtu.be/dQw4w9WgXcQ", "dQw4w9WgXcQ"),
    ("https://www.youtube.com/channel/", None),
    ("https://www.youtube.com/", None),
])
def test_youtube(url, expected):
    assert get_id_from_youtube_url(url) == expected


@pytest.mark.parametrize("url,expected", [
    ("https://open.spotify.com/embed/track/4uLU6hMCjMI75M1A2tKUQC", "track:4uLU6hMCjMI75M1A2tKUQC"),
    ("https://open.spotify.com/album/1DFixLWuPkv3KT3TnV35m3?si=x", "album:1DFixLWuPkv3KT3TnV35m3"),
    ("spotify:playlist:37i9dQZF1DX", "playlist:37i9dQZF1DX"),
    ("https://open.spotify.com/", None),
])
def test_spotify(url, expected):
    assert get_id_from_spotify_url(url) == expected


@pytest.mark.parametrize("url,expected", [
    ("https://bandcamp.com/EmbeddedPlayer/album=1234567/size=large/bgcol=ffffff/", "album:1234567"),
    ("https://bandcamp.com/EmbeddedPlayer/v=2/track=987/", "track:987"),
    ("https://artist.bandcamp.com/album/some-record", None),
])
def test_bandcamp(url, expected):
    assert get_id_from_bandcamp_url(url) == expected
