"""
Unit tests for media classification
"""

from ingestion.transformers.media_classifier import MediaClassifier, media_id
from models.base import MediaType


class TestMediaClassifier:
    """Classifier behavior"""

    def test_url_variations_share_one_id(self):
        classifier = MediaClassifier()

        first = classifier.classify("https://youtube.com/watch?v=abc")
        second = classifier.classify("https://youtube.com/watch?v=abc&t=5")

        assert first.id == second.id
        assert first.url != second.url

    def test_embed_and_watch_urls_share_one_id(self):
        classifier = MediaClassifier()

        watch = classifier.classify("https://www.youtube.com/watch?v=dQw4w9WgXcQ")
        embed = classifier.classify("https://www.youtube.com/embed/dQw4w9WgXcQ")

        assert watch.id == embed.id

    def test_record_fields(self):
        record = MediaClassifier().classify(
            "https://bandcamp.com/EmbeddedPlayer/album=42/size=large/"
        )

        assert record.type == MediaType.BANDCAMP
        assert record.external_id == "album:42"
        assert record.id == media_id(MediaType.BANDCAMP, "album:42")
        assert record.to_document() == {
            "type": "bandcamp",
            "externalId": "album:42",
            "url": "https://bandcamp.com/EmbeddedPlayer/album=42/size=large/",
        }

    def test_same_external_id_on_different_platforms_differs(self):
        assert media_id(MediaType.YOUTUBE, "abc") != media_id(MediaType.SPOTIFY, "abc")

    def test_empty_url_is_silent_noop(self, make_post):
        post = make_post()
        classifier = MediaClassifier()

        assert classifier.classify("", post) is None
        assert classifier.classify(None, post) is None
        assert post.media is None

    def test_unknown_platform_yields_nothing(self, make_post):
        post = make_post()

        assert MediaClassifier().classify("https://soundcloud.com/player?url=x", post) is None
        assert post.media is None

    def test_unparseable_platform_url_yields_nothing(self, make_post):
        post = make_post()

        assert MediaClassifier().classify("https://artist.bandcamp.com/", post) is None
        assert post.media is None

    def test_first_matching_platform_wins(self):
        record = MediaClassifier().classify("https://www.youtube.com/watch?v=abc&ref=spotify")

        assert record.type == MediaType.YOUTUBE

    def test_sets_media_on_post_only(self, make_post, t0):
        post = make_post(title="Keep Me", date=t0)

        record = MediaClassifier().classify("https://open.spotify.com/embed/track/xyz", post)

        assert post.media == record
        assert post.title == "Keep Me"
        assert post.date == t0
