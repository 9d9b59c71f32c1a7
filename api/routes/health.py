"""
Health check endpoint with database and sync status
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, text, func
from api.dependencies import get_db
from schemas.api import HealthCheckResponse, SyncRunInfo
from ingestion.loaders.batcher import IngestionBatcher
from ingestion.loaders.document_store import DocumentStore
from models.base import SyncStatus, utcnow
from models.document import Document
from models.sync_run import SyncRun
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])

COUNTED_COLLECTIONS = ("posts", "artists", "media")


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    Health check endpoint.

    Returns:
    - Database connectivity status
    - Last successful sync checkpoint
    - Most recent sync run
    - Document counts for the top-level collections
    """

    # Check database connectivity
    db_connected = False

    try:
        await db.execute(text("SELECT 1"))
        db_connected = True
    except Exception as e:
        logger.error(f"Database connection failed: {str(e)}")

    if not db_connected:
        return HealthCheckResponse(status="unhealthy", database_connected=False)

    last_checkpoint = await IngestionBatcher(DocumentStore(db)).read_checkpoint()

    last_run = None
    document_counts = {}

    try:
        result = await db.execute(
            select(SyncRun).order_by(SyncRun.started_at.desc(), SyncRun.id.desc()).limit(1)
        )
        run = result.scalar_one_or_none()
        if run is not None:
            last_run = SyncRunInfo.model_validate(run)

        result = await db.execute(
            select(Document.collection, func.count())
            .where(Document.collection.in_(COUNTED_COLLECTIONS))
            .group_by(Document.collection)
        )
        document_counts = {collection: count for collection, count in result.all()}
    except Exception as e:
        logger.error(f"Failed to fetch sync status: {str(e)}")

    status = "healthy"
    if last_run is not None and last_run.status == SyncStatus.FAILED.value:
        status = "degraded"

    return HealthCheckResponse(
        status=status,
        timestamp=utcnow(),
        database_connected=True,
        last_checkpoint=last_checkpoint,
        last_run=last_run,
        document_counts=document_counts
    )
