"""
API Router v1

Combines all route modules.
"""

from fastapi import APIRouter

from trailguard.api.v1.routes import recordings, safety, difficulty

api_router = APIRouter()

api_router.include_router(recordings.router, prefix="/recordings", tags=["Recordings"])
api_router.include_router(safety.router, prefix="/recordings", tags=["Safety"])
api_router.include_router(difficulty.router, prefix="/difficulty", tags=["Difficulty"])
