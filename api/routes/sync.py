"""
Sync run history endpoint
"""

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from api.dependencies import get_db
from schemas.api import SyncRunInfo, SyncRunListResponse
from models.base import SyncStatus
from models.sync_run import SyncRun
from typing import Optional
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/sync", tags=["Sync"])


@router.get("/runs", response_model=SyncRunListResponse)
async def list_sync_runs(
    request: Request,
    limit: int = Query(20, ge=1, le=200, description="Number of runs to return"),
    status: Optional[SyncStatus] = Query(None, description="Filter by run status"),
    db: AsyncSession = Depends(get_db)
):
    """Recent sync runs, newest first."""
    request_id = getattr(request.state, "request_id", None)

    query = select(SyncRun)
    count_query = select(func.count()).select_from(SyncRun)
    if status:
        query = query.where(SyncRun.status == status)
        count_query = count_query.where(SyncRun.status == status)

    total_runs = (await db.execute(count_query)).scalar()

    result = await db.execute(
        query.order_by(SyncRun.started_at.desc(), SyncRun.id.desc()).limit(limit)
    )
    runs = [SyncRunInfo.model_validate(run) for run in result.scalars().all()]

    logger.info(f"[{request_id}] GET /sync/runs - returned {len(runs)} of {total_runs}")

    return SyncRunListResponse(runs=runs, total_runs=total_runs)
