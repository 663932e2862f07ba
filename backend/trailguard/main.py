"""
TrailGuard API

FastAPI application for GPS trail recording, completion verification
and hiker safety alerts.
"""

from contextlib import asynccontextmanager
import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from trailguard.config import settings
from trailguard.api.v1.router import api_router
from trailguard.features.tracking import TrackerRegistry
from trailguard.shared.scheduler import AsyncioScheduler

VERSION = "0.1.0"


# === Logging Setup ===
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)
logger = logging.getLogger(__name__)


# === Lifespan ===
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    logger.info("Starting TrailGuard API...")
    app.state.trackers = TrackerRegistry.from_settings(settings, AsyncioScheduler())

    yield

    # Shutdown: no timer may fire after its tracker is gone
    app.state.trackers.close_all()
    logger.info("Shutting down...")


# === App Creation ===
app = FastAPI(
    title="TrailGuard API",
    description="GPS trail recording, completion rewards and hiker safety alerts",
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# === Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# === Routes ===
app.include_router(api_router, prefix="/api/v1")


# === Health Check ===
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": VERSION}
