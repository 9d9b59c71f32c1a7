"""
Create the document store and sync run tables
"""

import asyncio
import logging
import sys
import os

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.database import create_engine
from core.logging import setup_logging
from models.base import Base
# Importing the models registers their tables on Base.metadata
from models.document import Document  # noqa: F401
from models.sync_run import SyncRun  # noqa: F401

logger = logging.getLogger(__name__)


async def init_database():
    engine = create_engine()

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info(f"Tables ready: {', '.join(sorted(Base.metadata.tables))}")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    setup_logging()
    asyncio.run(init_database())
