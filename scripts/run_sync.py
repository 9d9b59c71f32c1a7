"""
Script to run one sync for the configured crawler roster
"""

import argparse
import asyncio
import sys
import os
import logging

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.database import create_engine, create_session_maker
from core.exceptions import SyncException
from core.logging import setup_logging
from ingestion.extractors.registry import build_roster
from ingestion.runner import SyncOrchestrator
from ingestion.transformers.enricher import MetadataEnricher

logger = logging.getLogger(__name__)


async def run_sync(crawlers=None, enrich: bool = True) -> int:
    """Run one sync; returns a process exit code"""

    engine = create_engine()
    AsyncSessionLocal = create_session_maker(engine)

    try:
        roster = build_roster(crawlers)

        if not roster:
            logger.warning("No crawlers enabled; the run only advances the checkpoint")

        async with AsyncSessionLocal() as session:
            orchestrator = SyncOrchestrator(
                session,
                crawlers=roster,
                enricher=MetadataEnricher() if enrich else None
            )
            result = await orchestrator.run()

        logger.info(
            f"Sync completed: {result['status']} - "
            f"Ingested={result['posts_ingested']}, "
            f"Skipped={result['posts_skipped']}, "
            f"Enrichment failures={result['enrichment_failures']}"
        )
        return 0

    except SyncException as e:
        logger.error(f"Sync failed: {e}")
        return 1
    finally:
        await engine.dispose()


def main():
    parser = argparse.ArgumentParser(description="Run one post sync")
    parser.add_argument(
        "--crawler",
        action="append",
        dest="crawlers",
        help="Crawler to run (repeatable); defaults to ENABLED_CRAWLERS"
    )
    parser.add_argument(
        "--no-enrich",
        action="store_true",
        help="Skip secondary-page enrichment"
    )
    args = parser.parse_args()

    setup_logging()
    sys.exit(asyncio.run(run_sync(args.crawlers, enrich=not args.no_enrich)))


if __name__ == "__main__":
    main()
