import logging
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from core.database import create_engine, create_session_maker
from core.config import settings
from ingestion.runner import SyncOrchestrator
from ingestion.extractors.registry import build_roster
from ingestion.transformers.enricher import MetadataEnricher

logger = logging.getLogger(__name__)


class SyncScheduler:
    def __init__(self, interval_minutes: Optional[int] = None):
        self.interval_minutes = interval_minutes or settings.SYNC_INTERVAL_MINUTES
        self.scheduler = AsyncIOScheduler()
        self.engine = create_engine()
        self.SessionLocal = create_session_maker(self.engine)

    async def run_sync_job(self):
        """Job to run one sync"""
        logger.info("Scheduler: Starting sync job")
        async with self.SessionLocal() as session:
            try:
                orchestrator = SyncOrchestrator(
                    session,
                    crawlers=build_roster(),
                    enricher=MetadataEnricher()
                )
                await orchestrator.run()

            except Exception as e:
                # The next interval retries the whole run
                logger.error(f"Scheduler: sync job failed - {e}")

    def start(self):
        """Start the scheduler"""
        self.scheduler.add_job(
            self.run_sync_job,
            trigger=IntervalTrigger(minutes=self.interval_minutes),
            id="sync_job",
            replace_existing=True,
            max_instances=1,
            coalesce=True
        )
        self.scheduler.start()
        logger.info(f"Sync Scheduler started (every {self.interval_minutes} minutes)")

    def stop(self):
        self.scheduler.shutdown()
        logger.info("Sync Scheduler stopped")

    async def dispose(self):
        """Close the scheduler's own connection pool"""
        await self.engine.dispose()
