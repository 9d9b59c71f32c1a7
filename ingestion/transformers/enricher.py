"""
Secondary-page enrichment of posts
"""

from typing import Any, Dict, Mapping, Optional, Protocol
from core.exceptions import EmbedParseError, EnrichmentError
from ingestion.extractors.html_scraper import FieldRule, HTMLScraper
from ingestion.transformers.media_classifier import MediaClassifier
from ingestion.transformers.selectors import profile_for
from schemas.post import Post
import logging

logger = logging.getLogger(__name__)


class Scraper(Protocol):
    async def scrape(self, url: str, rules: Mapping[str, FieldRule]) -> Dict[str, Any]:
        ...


class MetadataEnricher:
    """
    Fill in a post's media reference (and date, where the source needs it)
    from the post's own page.

    Responsibilities:
    - Skip sources whose listing already carries the embed
    - Fetch the post page once with the source's selector profile
    - Classify the embed URL before returning
    - Replace the post date when the profile reads one from the page
    """

    def __init__(
        self,
        scraper: Optional[Scraper] = None,
        classifier: Optional[MediaClassifier] = None
    ):
        self.scraper = scraper or HTMLScraper()
        self.classifier = classifier or MediaClassifier()

    async def enrich(self, post: Post) -> None:
        """
        Enrich ``post`` in place.

        Raises:
            ScrapeError: The page could not be fetched
            EmbedParseError: The page has no embed, or its payload is unreadable
            EnrichmentError: Any other failure while extracting fields
        """
        profile = profile_for(post.source)
        if not profile.requires_fetch:
            return

        try:
            fields = await self.scraper.scrape(post.url, profile.field_rules())
        except EnrichmentError:
            raise
        except Exception as e:
            raise EnrichmentError(
                "Unexpected error extracting page fields",
                context={"source": post.source.value, "url": post.url},
                original_exception=e
            )

        embed_url = fields.get("embed")
        if not embed_url:
            raise EmbedParseError(
                "Page has no media embed",
                context={
                    "source": post.source.value,
                    "url": post.url,
                    "selector": profile.embed.selector
                }
            )

        media = self.classifier.classify(embed_url, post)
        logger.debug(
            f"Enriched {post.url}: media={media.id if media else None}"
        )

        if profile.date is not None and fields.get("date") is not None:
            post.date = fields["date"]
