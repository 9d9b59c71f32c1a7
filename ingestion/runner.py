# ============================================================================
# File: ingestion/runner.py
# Description: Sync orchestrator - concurrent crawl, then one atomic ingest
# ============================================================================
"""
Sync Orchestrator - Runs the crawler roster and hands the results to the
ingestion batcher.

This module provides:
- Concurrent crawling with fail-fast semantics
- No ingestion at all unless every crawler succeeded
- Sync run tracking (one SyncRun row per invocation)
"""

import asyncio
from typing import Any, Dict, List, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from ingestion.base import Crawler
from ingestion.loaders.batcher import IngestionBatcher
from ingestion.loaders.document_store import DocumentStore
from ingestion.transformers.enricher import MetadataEnricher
from models.base import SyncStatus, utcnow
from models.sync_run import SyncRun
from schemas.post import Post
from core.exceptions import CrawlError, SyncException

logger = logging.getLogger(__name__)


class SyncOrchestrator:
    """
    Sync Orchestrator

    Responsibilities:
    - Run every crawler in the roster concurrently
    - Abort before any write if one crawler fails
    - Pass per-crawler results to the IngestionBatcher
    - Record the run in sync_runs
    """

    def __init__(
        self,
        db_session: AsyncSession,
        crawlers: Sequence[Crawler],
        enricher: Optional[MetadataEnricher] = None,
        batcher: Optional[IngestionBatcher] = None
    ):
        self.db = db_session
        self.crawlers = list(crawlers)
        self.store = DocumentStore(db_session)
        self.batcher = batcher or IngestionBatcher(self.store, enricher=enricher)
        self.sync_run: Optional[SyncRun] = None

    async def crawl(self, crawler: Crawler) -> List[Post]:
        try:
            posts = await crawler.fetch_posts()
        except Exception as e:
            raise CrawlError(
                "Crawler failed",
                context={"crawler_name": crawler.name, "source": crawler.source.value},
                original_exception=e
            )
        logger.info(f"Crawler {crawler.name} returned {len(posts)} posts")
        return posts

    async def crawl_all(self) -> Dict[str, List[Post]]:
        """
        Run all crawlers concurrently.

        Returns:
            Crawler name to posts, in roster order

        Raises:
            CrawlError: The first crawler failure; the remaining crawlers are
                cancelled
        """
        tasks = [asyncio.ensure_future(self.crawl(crawler)) for crawler in self.crawlers]

        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        return {crawler.name: posts for crawler, posts in zip(self.crawlers, results)}

    async def start_sync_run(self) -> SyncRun:
        """Create sync run record"""
        self.sync_run = SyncRun(
            status=SyncStatus.RUNNING,
            started_at=utcnow(),
            crawlers=[crawler.name for crawler in self.crawlers]
        )
        self.db.add(self.sync_run)
        await self.db.commit()
        await self.db.refresh(self.sync_run)
        return self.sync_run

    async def complete_sync_run(
        self,
        status: SyncStatus,
        result: Optional[Dict[str, Any]] = None,
        error: Optional[Exception] = None
    ):
        """Complete sync run with statistics"""
        if self.sync_run is None:
            return

        # a failed commit rolls back and expires the run row
        await self.db.refresh(self.sync_run)

        result = result or {}
        self.sync_run.status = status
        self.sync_run.completed_at = utcnow()
        self.sync_run.duration_seconds = (
            self.sync_run.completed_at - self.sync_run.started_at
        ).total_seconds()
        self.sync_run.posts_collected = result.get("posts_received", 0)
        self.sync_run.posts_skipped = result.get("posts_skipped", 0)
        self.sync_run.posts_ingested = result.get("posts_ingested", 0)
        self.sync_run.enrichment_failures = result.get("enrichment_failures", 0)
        self.sync_run.checkpoint_before = result.get("checkpoint_before")
        self.sync_run.checkpoint_after = result.get("checkpoint_after")
        self.sync_run.error_details = result.get("error_details")

        if error is not None:
            self.sync_run.error_message = str(error)
            if isinstance(error, SyncException):
                self.sync_run.error_details = error.to_dict()

        await self.db.commit()

    async def run(self) -> Dict[str, Any]:
        """
        Run one full sync.

        Returns:
            Dictionary with run statistics (see IngestionBatcher.submit) plus
            run_id and per-crawler post counts

        Raises:
            CrawlError: A crawler failed; nothing was written
            CommitError: The write-set could not be committed
            SyncException: Other pipeline failures
        """
        await self.start_sync_run()
        run_id = self.sync_run.run_id

        logger.info(f"Sync run {run_id} started with {len(self.crawlers)} crawlers")

        try:
            results = await self.crawl_all()
            result = await self.batcher.submit(results)

        except Exception as e:
            logger.error(
                f"Sync run {run_id} failed: {str(e)}",
                extra={"error_context": e.to_dict() if isinstance(e, SyncException) else {}}
            )
            await self.db.rollback()
            await self.complete_sync_run(SyncStatus.FAILED, error=e)
            raise

        status = SyncStatus.SUCCESS if result["status"] == "success" else SyncStatus.PARTIAL
        await self.complete_sync_run(status, result=result)

        result["run_id"] = run_id
        result["posts_by_crawler"] = {name: len(posts) for name, posts in results.items()}

        logger.info(
            f"Sync run {run_id} completed: {result['status']} - "
            f"Ingested: {result['posts_ingested']}, Skipped: {result['posts_skipped']}"
        )
        return result
