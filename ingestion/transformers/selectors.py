"""
Per-source selector profiles for secondary-page enrichment.

Every ``Source`` has exactly one profile. A profile names the rule that
locates the media embed on a post's page and, for sources whose listing
lacks a reliable publish date, the rule that reads the date from the page.
Sources that embed media in the listing itself have no embed rule and are
never fetched.
"""

import json
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional
from core.exceptions import ConfigurationError, EmbedParseError
from ingestion.extractors.html_scraper import FieldRule
from models.base import Source

_SRC_ATTR = re.compile(r'src="([^"]*)"')


@dataclass(frozen=True)
class EmbedRule:
    """Embed URL read straight from an attribute (usually an iframe ``src``)."""
    selector: str
    attr: str = "src"

    def parse(self, raw: Optional[str]) -> Optional[str]:
        return raw or None

    def to_field_rule(self) -> FieldRule:
        return FieldRule(self.selector, self.attr, self.parse)


@dataclass(frozen=True)
class JSONEmbedRule(EmbedRule):
    """
    Embed hidden in a lazy-load placeholder: the attribute holds JSON whose
    ``html`` field contains the player markup. The first ``src="..."`` in
    that markup is the embed URL.
    """
    html_field: str = "html"

    def parse(self, raw: Optional[str]) -> Optional[str]:
        if not raw:
            return None

        try:
            html = json.loads(raw)[self.html_field]
        except (ValueError, KeyError, TypeError) as e:
            raise EmbedParseError(
                "Embed placeholder does not hold valid player JSON",
                context={"selector": self.selector, "payload": raw[:200]},
                original_exception=e
            )

        match = _SRC_ATTR.search(html or "")
        if not match:
            raise EmbedParseError(
                "Player markup has no src attribute",
                context={"selector": self.selector, "payload": str(html)[:200]}
            )
        return match.group(1)


@dataclass(frozen=True)
class DateRule:
    """Publish date read from an attribute, parsed with a fixed format."""
    selector: str
    attr: str
    fmt: str
    offset_marker: str = ""

    def parse(self, raw: Optional[str]) -> Optional[datetime]:
        if not raw:
            return None
        value = raw.strip()
        if self.offset_marker:
            value = value.replace(self.offset_marker.strip(), "").strip()
        return datetime.strptime(value, self.fmt).replace(tzinfo=timezone.utc)

    def to_field_rule(self) -> FieldRule:
        return FieldRule(self.selector, self.attr, self.parse)


@dataclass(frozen=True)
class SourceProfile:
    source: Source
    embed: Optional[EmbedRule] = None
    date: Optional[DateRule] = None

    @property
    def requires_fetch(self) -> bool:
        return self.embed is not None

    def field_rules(self) -> Dict[str, FieldRule]:
        rules: Dict[str, FieldRule] = {}
        if self.embed is not None:
            rules["embed"] = self.embed.to_field_rule()
        if self.date is not None:
            rules["date"] = self.date.to_field_rule()
        return rules


PROFILES: Dict[Source, SourceProfile] = {
    # Media is embedded inline in the listing
    Source.BLEEP: SourceProfile(Source.BLEEP),
    Source.GVB: SourceProfile(
        Source.GVB,
        embed=JSONEmbedRule(".pod-content .lazyload-placeholder", attr="data-pod"),
        date=DateRule(
            ".page-header .byline time",
            attr="datetime",
            fmt="%Y-%m-%d %H:%M:%S",
            offset_marker="+0000",
        ),
    ),
    Source.PITCHFORK: SourceProfile(
        Source.PITCHFORK,
        embed=EmbedRule(".contents .contents__embed iframe", attr="src"),
    ),
    Source.STEREOGUM: SourceProfile(
        Source.STEREOGUM,
        embed=EmbedRule(".article-content iframe", attr="data-src"),
    ),
}

_missing = set(Source) - set(PROFILES)
if _missing:
    raise ConfigurationError(
        "Sources without a selector profile",
        context={"sources": sorted(s.value for s in _missing)}
    )


def profile_for(source: Source) -> SourceProfile:
    return PROFILES[Source(source)]
