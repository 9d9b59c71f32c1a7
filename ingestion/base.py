"""
Abstract base class for crawlers
"""

from abc import ABC, abstractmethod
from typing import List
from models.base import Source
from schemas.post import Post
import logging

logger = logging.getLogger(__name__)


class Crawler(ABC):
    """
    Abstract base class for all source crawlers.

    A crawler reads one listing of one source and returns normalized posts.
    It holds no database handle: persistence is the batcher's job.
    """

    def __init__(self, name: str, source: Source):
        self.name = name
        self.source = Source(source)

    @abstractmethod
    async def fetch_posts(self) -> List[Post]:
        """
        Fetch the current listing.

        Returns:
            Posts in listing order
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, source={self.source.value!r})"
