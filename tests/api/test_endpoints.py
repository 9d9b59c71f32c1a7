"""
API endpoint tests
"""

import httpx
import pytest
import pytest_asyncio
from datetime import datetime
from api.dependencies import get_db
from api.main import app
from ingestion.loaders.batcher import IngestionBatcher
from ingestion.runner import SyncOrchestrator
from ingestion.base import Crawler
from models.base import Source


class ListingCrawler(Crawler):
    def __init__(self, posts):
        super().__init__(name="pitchfork_tracks", source=Source.PITCHFORK)
        self.posts = posts

    async def fetch_posts(self):
        return self.posts


class BrokenCrawler(Crawler):
    def __init__(self):
        super().__init__(name="broken", source=Source.GVB)

    async def fetch_posts(self):
        raise RuntimeError("feed down")


@pytest_asyncio.fixture
async def client(db_session):
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def parse_time(value):
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@pytest.mark.asyncio
async def test_root(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json()["health"] == "/health"


@pytest.mark.asyncio
async def test_health_on_empty_store(client):
    response = await client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database_connected"] is True
    assert body["last_checkpoint"] is None
    assert body["last_run"] is None
    assert body["document_counts"] == {}


@pytest.mark.asyncio
async def test_health_after_sync(client, db_session, store, make_post, t0):
    post = make_post(title="X", artists=["A", "B"], date=t0)
    await SyncOrchestrator(
        db_session,
        [ListingCrawler([post])],
        batcher=IngestionBatcher(store, clock=lambda: t0)
    ).run()

    body = (await client.get("/health")).json()

    assert body["status"] == "healthy"
    assert parse_time(body["last_checkpoint"]) == t0
    assert body["last_run"]["status"] == "success"
    assert body["document_counts"] == {"posts": 1, "artists": 2}


@pytest.mark.asyncio
async def test_health_degraded_after_failed_run(client, db_session):
    with pytest.raises(Exception):
        await SyncOrchestrator(db_session, [BrokenCrawler()]).run()

    body = (await client.get("/health")).json()

    assert body["status"] == "degraded"
    assert body["last_run"]["status"] == "failed"


@pytest.mark.asyncio
async def test_sync_runs(client, db_session, store, t0):
    await SyncOrchestrator(
        db_session,
        [ListingCrawler([])],
        batcher=IngestionBatcher(store, clock=lambda: t0)
    ).run()
    with pytest.raises(Exception):
        await SyncOrchestrator(db_session, [BrokenCrawler()]).run()

    body = (await client.get("/sync/runs")).json()
    assert body["total_runs"] == 2
    assert len(body["runs"]) == 2
    assert body["runs"][0]["crawlers"] in (["pitchfork_tracks"], ["broken"])

    failed = (await client.get("/sync/runs", params={"status": "failed"})).json()
    assert failed["total_runs"] == 1
    assert failed["runs"][0]["crawlers"] == ["broken"]
    assert failed["runs"][0]["error_message"].startswith("CrawlError")


@pytest.mark.asyncio
async def test_sync_runs_rejects_bad_limit(client):
    response = await client.get("/sync/runs", params={"limit": 0})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_request_id_is_echoed(client):
    response = await client.get("/", headers={"X-Request-ID": "abc-123"})

    assert response.headers["X-Request-ID"] == "abc-123"
    assert "X-API-Latency-ms" in response.headers
