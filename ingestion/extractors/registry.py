"""
Crawler roster.

Crawlers are looked up by name. A name resolves either to a factory
registered in code with ``register_crawler`` or to a feed entry from the
``CRAWLER_FEEDS`` setting, e.g.::

    CRAWLER_FEEDS='{"stereogum": {"source": "stereogum",
                                  "feed_url": "https://www.stereogum.com/feed/",
                                  "post_type": "track"}}'

Only names listed in ``ENABLED_CRAWLERS`` make it into the roster.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence
from core.config import settings
from core.exceptions import ConfigurationError
from ingestion.base import Crawler
from ingestion.extractors.rss_crawler import RSSCrawler
import logging

logger = logging.getLogger(__name__)

CrawlerFactory = Callable[[], Crawler]

_FACTORIES: Dict[str, CrawlerFactory] = {}


def register_crawler(name: str, factory: CrawlerFactory) -> None:
    """Make ``name`` available to the roster."""
    if name in _FACTORIES:
        logger.warning(f"Replacing crawler factory for {name}")
    _FACTORIES[name] = factory


def unregister_crawler(name: str) -> None:
    _FACTORIES.pop(name, None)


def registered_crawlers() -> List[str]:
    return sorted(_FACTORIES)


def _feed_crawler(name: str, feed: Mapping[str, Any]) -> Crawler:
    try:
        return RSSCrawler(name=name, **feed)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            "Invalid feed configuration",
            context={"crawler_name": name, "feed": dict(feed)},
            original_exception=e
        )


def build_roster(
    enabled: Optional[Sequence[str]] = None,
    feeds: Optional[Mapping[str, Mapping[str, Any]]] = None
) -> List[Crawler]:
    """
    Instantiate the enabled crawlers, in the configured order.

    Raises:
        ConfigurationError: An enabled name has no factory and no feed entry
    """
    enabled = settings.ENABLED_CRAWLERS if enabled is None else enabled
    feeds = settings.CRAWLER_FEEDS if feeds is None else feeds

    roster = []
    for name in enabled:
        if name in _FACTORIES:
            roster.append(_FACTORIES[name]())
        elif name in feeds:
            roster.append(_feed_crawler(name, feeds[name]))
        else:
            raise ConfigurationError(
                "Enabled crawler is not registered",
                context={"crawler_name": name, "registered": registered_crawlers()}
            )

    logger.info(f"Roster: {[crawler.name for crawler in roster]}")
    return roster
