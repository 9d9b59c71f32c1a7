"""
Unit tests for HTML field extraction
"""

import httpx
import pytest
from core.exceptions import ScrapeError
from ingestion.extractors.html_scraper import FieldRule, HTMLScraper, extract_fields

PAGE = """
<html><body>
  <h1 class="title"> Hello  </h1>
  <div class="embed"><iframe src="https://www.youtube.com/embed/abc"></iframe></div>
  <div class="embed"><iframe src="https://www.youtube.com/embed/second"></iframe></div>
</body></html>
"""


class TestExtractFields:

    def test_attribute_of_first_match(self):
        data = extract_fields(PAGE, {"embed": FieldRule(".embed iframe", "src")})
        assert data == {"embed": "https://www.youtube.com/embed/abc"}

    def test_text_when_no_attribute(self):
        assert extract_fields(PAGE, {"title": FieldRule("h1.title")}) == {"title": "Hello"}

    def test_missing_node_is_none(self):
        data = extract_fields(PAGE, {"missing": FieldRule(".nope", "src")})
        assert data == {"missing": None}

    def test_convert_runs_on_missing_values_too(self):
        seen = []

        def convert(raw):
            seen.append(raw)
            return "converted"

        data = extract_fields(PAGE, {"missing": FieldRule(".nope", "src", convert)})

        assert data["missing"] == "converted"
        assert seen == [None]


@pytest.mark.asyncio
async def test_scrape_fetches_and_extracts():
    requested = []

    def handler(request):
        requested.append(str(request.url))
        return httpx.Response(200, text=PAGE)

    scraper = HTMLScraper(transport=httpx.MockTransport(handler))
    data = await scraper.scrape("https://example.com/post", {"embed": FieldRule("iframe", "src")})

    assert data["embed"] == "https://www.youtube.com/embed/abc"
    assert requested == ["https://example.com/post"]


@pytest.mark.asyncio
async def test_http_error_status_raises_scrape_error():
    scraper = HTMLScraper(transport=httpx.MockTransport(lambda request: httpx.Response(404)))

    with pytest.raises(ScrapeError) as exc_info:
        await scraper.fetch("https://example.com/gone")

    assert exc_info.value.context["status_code"] == 404


@pytest.mark.asyncio
async def test_network_error_raises_scrape_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    scraper = HTMLScraper(transport=httpx.MockTransport(handler))

    with pytest.raises(ScrapeError):
        await scraper.fetch("https://example.com/down")


def test_attribute_entities_are_decoded():
    page = '<div class="pod"><span data-pod="{&quot;html&quot;: &quot;x&quot;}"></span></div>'

    data = extract_fields(page, {"pod": FieldRule(".pod span", "data-pod")})

    assert data == {"pod": '{"html": "x"}'}
