"""
FastAPI application initialization
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from api.routes import health, sync
from core.config import settings
from core.logging import setup_logging
import logging
from api.middleware import RequestContextMiddleware
from ingestion.scheduler import SyncScheduler

setup_logging()

logger = logging.getLogger(__name__)

# Initialize Scheduler
scheduler = SyncScheduler()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the sync scheduler with the app and stop it on shutdown"""
    logger.info("Starting post sync API")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Database: {settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else 'configured'}")

    scheduler.start()
    yield

    logger.info("Shutting down post sync API")
    scheduler.stop()
    await scheduler.dispose()


# Create FastAPI app
app = FastAPI(
    title="Post Sync API",
    description="Status of the periodic music post sync",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(RequestContextMiddleware)

# Include routers
app.include_router(health.router)
app.include_router(sync.router)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Post Sync API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "sync_runs": "/sync/runs"
        }
    }
