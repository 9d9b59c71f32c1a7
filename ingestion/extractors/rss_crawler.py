"""
RSS Feed Crawler

Turns the entries of a source's RSS/Atom feed into posts. Artist credits
and the work title are pulled out of the entry title with a regex.
"""

import asyncio
import re
import feedparser
import httpx
from typing import List, Optional, Pattern, Union
from datetime import datetime, timezone
from core.config import settings
from ingestion.base import Crawler
from models.base import Source, WorkType
from schemas.post import Post
import logging

logger = logging.getLogger(__name__)

# 'Artist A & Artist B – "Title"' / 'Artist: Title'
DEFAULT_TITLE_PATTERN = r'^(?P<artists>.+?)\s*(?:[–—:]|\s-)\s*[“"]?(?P<title>.+?)[”"]?$'
ARTIST_SEPARATORS = re.compile(r"\s*(?:,|&|\b(?:feat|ft)\b\.?)\s*", re.IGNORECASE)


def split_artists(credit: str) -> List[str]:
    """Split an artist credit into names, keeping credit order."""
    return [name for name in (n.strip() for n in ARTIST_SEPARATORS.split(credit)) if name]


class RSSCrawler(Crawler):
    """Crawl posts from an RSS feed"""

    def __init__(
        self,
        name: str,
        source: Union[Source, str],
        feed_url: str,
        post_type: Union[WorkType, str] = WorkType.TRACK,
        title_pattern: Union[str, Pattern] = DEFAULT_TITLE_PATTERN,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        super().__init__(name=name, source=Source(source))
        self.feed_url = feed_url
        self.post_type = WorkType(post_type)
        self.title_pattern = re.compile(title_pattern) if isinstance(title_pattern, str) else title_pattern
        self.timeout = timeout if timeout is not None else settings.SCRAPE_TIMEOUT
        self.transport = transport

    async def fetch_posts(self) -> List[Post]:
        """
        Fetch and parse the feed.

        Entries whose title does not match the title pattern are skipped.
        """
        async with httpx.AsyncClient(
            timeout=self.timeout,
            headers={"User-Agent": settings.SCRAPE_USER_AGENT},
            transport=self.transport
        ) as client:
            response = await client.get(self.feed_url)
            response.raise_for_status()
            rss_content = response.text

        # Parse RSS in thread pool
        feed = await asyncio.to_thread(feedparser.parse, rss_content)

        if feed.bozo and not feed.entries:
            raise ValueError(f"Failed to parse RSS feed: {feed.bozo_exception}")

        posts = []
        for entry in feed.entries:
            post = self.entry_to_post(entry)
            if post is not None:
                posts.append(post)

        logger.info(f"{self.name}: {len(posts)} posts from {len(feed.entries)} feed entries")
        return posts

    def entry_to_post(self, entry) -> Optional[Post]:
        match = self.title_pattern.match((entry.get("title") or "").strip())
        link = entry.get("link")
        if not match or not link:
            logger.debug(f"{self.name}: skipping entry {entry.get('title')!r}")
            return None

        return Post(
            source=self.source,
            url=link,
            title=match.group("title"),
            type=self.post_type,
            artists=split_artists(match.group("artists")),
            date=self._entry_date(entry),
        )

    @staticmethod
    def _entry_date(entry) -> Optional[datetime]:
        parsed = entry.get("published_parsed") or entry.get("updated_parsed")
        if parsed:
            return datetime(*parsed[:6], tzinfo=timezone.utc)
        return None
