"""
Unit tests for SyncOrchestrator
"""

import asyncio
import pytest
from sqlalchemy import select
from unittest.mock import AsyncMock, MagicMock
from core.exceptions import CommitError, CrawlError
from ingestion.base import Crawler
from ingestion.loaders.batcher import CHECKPOINT_PATH, IngestionBatcher
from ingestion.runner import SyncOrchestrator
from models.base import Source, SyncStatus
from models.sync_run import SyncRun


class StaticCrawler(Crawler):
    def __init__(self, name, posts=None, error=None, source=Source.PITCHFORK):
        super().__init__(name=name, source=source)
        self.posts = posts or []
        self.error = error

    async def fetch_posts(self):
        if self.error:
            raise self.error
        return self.posts


class WaitingCrawler(Crawler):
    """Finishes only once another crawler has started"""

    def __init__(self, name, wait_for, signal):
        super().__init__(name=name, source=Source.GVB)
        self.wait_for = wait_for
        self.signal = signal

    async def fetch_posts(self):
        self.signal.set()
        await asyncio.wait_for(self.wait_for.wait(), timeout=1)
        return []


class SlowCrawler(Crawler):
    def __init__(self, name):
        super().__init__(name=name, source=Source.STEREOGUM)
        self.cancelled = False

    async def fetch_posts(self):
        try:
            await asyncio.sleep(30)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return []


async def sync_runs(db_session):
    result = await db_session.execute(select(SyncRun))
    return result.scalars().all()


class TestSyncOrchestrator:

    @pytest.mark.asyncio
    async def test_successful_run(self, db_session, store, make_post, t0):
        crawlers = [
            StaticCrawler("pitchfork_tracks", [make_post(title="X", artists=["A"])]),
            StaticCrawler("stereogum", [make_post(title="Y", source=Source.STEREOGUM)], source=Source.STEREOGUM),
        ]
        orchestrator = SyncOrchestrator(
            db_session,
            crawlers,
            batcher=IngestionBatcher(store, clock=lambda: t0)
        )

        result = await orchestrator.run()

        assert result["status"] == "success"
        assert result["posts_ingested"] == 2
        assert result["posts_by_crawler"] == {"pitchfork_tracks": 1, "stereogum": 1}

        (run,) = await sync_runs(db_session)
        assert run.run_id == result["run_id"]
        assert run.status == SyncStatus.SUCCESS
        assert run.crawlers == ["pitchfork_tracks", "stereogum"]
        assert run.posts_ingested == 2
        assert run.checkpoint_after == t0.isoformat()
        assert run.completed_at is not None
        assert run.started_at <= run.completed_at
        assert run.duration_seconds >= 0

    @pytest.mark.asyncio
    async def test_crawlers_run_concurrently(self, db_session):
        first, second = asyncio.Event(), asyncio.Event()
        crawlers = [
            WaitingCrawler("a", wait_for=second, signal=first),
            WaitingCrawler("b", wait_for=first, signal=second),
        ]

        results = await SyncOrchestrator(db_session, crawlers).crawl_all()

        assert list(results) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_crawl_failure_aborts_before_ingest(self, db_session, store, make_post):
        slow = SlowCrawler("stereogum")
        crawlers = [
            StaticCrawler("ok", [make_post()]),
            StaticCrawler("broken", error=RuntimeError("feed down")),
            slow,
        ]
        batcher = MagicMock()
        batcher.submit = AsyncMock()

        with pytest.raises(CrawlError) as exc_info:
            await SyncOrchestrator(db_session, crawlers, batcher=batcher).run()

        assert exc_info.value.context["crawler_name"] == "broken"
        assert slow.cancelled
        batcher.submit.assert_not_called()
        assert await store.list(store.collection("posts")) == {}
        assert await store.get(store.document(CHECKPOINT_PATH)) is None

        (run,) = await sync_runs(db_session)
        assert run.status == SyncStatus.FAILED
        assert "Crawler failed" in run.error_message
        assert run.error_details["error_type"] == "CrawlError"
        assert run.error_details["context"]["crawler_name"] == "broken"

    @pytest.mark.asyncio
    async def test_commit_failure_marks_run_failed(self, db_session):
        batcher = MagicMock()
        batcher.submit = AsyncMock(side_effect=CommitError("Failed to commit write batch"))

        with pytest.raises(CommitError):
            await SyncOrchestrator(db_session, [StaticCrawler("ok")], batcher=batcher).run()

        (run,) = await sync_runs(db_session)
        assert run.status == SyncStatus.FAILED

    @pytest.mark.asyncio
    async def test_partial_success(self, db_session):
        batcher = MagicMock()
        batcher.submit = AsyncMock(return_value={
            "status": "partial_success",
            "posts_received": 2,
            "posts_skipped": 0,
            "posts_ingested": 2,
            "enrichment_failures": 1,
            "checkpoint_before": None,
            "checkpoint_after": "2024-01-15T12:00:00+00:00",
            "error_details": [{"phase": "enrichment"}],
        })

        result = await SyncOrchestrator(db_session, [StaticCrawler("ok")], batcher=batcher).run()

        assert result["status"] == "partial_success"
        (run,) = await sync_runs(db_session)
        assert run.status == SyncStatus.PARTIAL
        assert run.enrichment_failures == 1

    @pytest.mark.asyncio
    async def test_empty_roster(self, db_session, store, t0):
        orchestrator = SyncOrchestrator(db_session, [], batcher=IngestionBatcher(store, clock=lambda: t0))

        result = await orchestrator.run()

        assert result["posts_ingested"] == 0
        assert result["checkpoint_after"] == t0.isoformat()
