"""
Declarative HTML field extraction.

A page is fetched once and each requested field is located with a CSS
selector. The field value is either an attribute of the first matching node
or its text, optionally passed through a ``convert`` callable.
"""

import httpx
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional
from selectolax.lexbor import LexborHTMLParser
from core.config import settings
from core.exceptions import ScrapeError
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldRule:
    """
    How to extract one field.

    Attributes:
        selector: CSS selector; the first match is used
        attr: Attribute to read; the node's text when None
        convert: Post-processing applied to the raw value (also called with None)
    """
    selector: str
    attr: Optional[str] = None
    convert: Optional[Callable[[Optional[str]], Any]] = None


def extract_fields(html: str, rules: Mapping[str, FieldRule]) -> Dict[str, Any]:
    """Apply ``rules`` to an HTML document."""
    doc = LexborHTMLParser(html)
    data: Dict[str, Any] = {}

    for name, rule in rules.items():
        node = doc.css_first(rule.selector)
        raw: Optional[str] = None
        if node is not None:
            raw = node.attributes.get(rule.attr) if rule.attr else node.text(strip=True)

        data[name] = rule.convert(raw) if rule.convert else raw

    return data


class HTMLScraper:
    """
    Fetch a page and extract fields from it.

    Network failures surface as ``ScrapeError``; errors raised by a rule's
    ``convert`` propagate unchanged.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.timeout = timeout if timeout is not None else settings.SCRAPE_TIMEOUT
        self.headers = headers or {"User-Agent": settings.SCRAPE_USER_AGENT}
        self.transport = transport

    async def fetch(self, url: str) -> str:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers=self.headers,
                follow_redirects=True,
                transport=self.transport
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.text

        except httpx.HTTPStatusError as e:
            raise ScrapeError(
                f"HTTP {e.response.status_code} fetching page",
                context={"url": url, "status_code": e.response.status_code},
                original_exception=e
            )
        except httpx.HTTPError as e:
            raise ScrapeError(
                "Network error fetching page",
                context={"url": url},
                original_exception=e
            )

    async def scrape(self, url: str, rules: Mapping[str, FieldRule]) -> Dict[str, Any]:
        """
        Fetch ``url`` and extract every field in ``rules``.

        Returns:
            Dictionary of field name to extracted (and converted) value
        """
        html = await self.fetch(url)
        logger.debug(f"Fetched {len(html)} bytes from {url}")
        return extract_fields(html, rules)
