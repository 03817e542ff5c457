"""
API v1 router - aggregates all endpoint routers.
"""
from fastapi import APIRouter

from pinboard.api.v1.endpoints import (
    auth,
    boards,
    comments,
    feed,
    health,
    pins,
    profile,
    search,
    settings,
    uploads,
)

# Create main API router
api_router = APIRouter()

# Include endpoint routers
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(profile.router)
api_router.include_router(settings.router)
api_router.include_router(boards.router)
api_router.include_router(pins.router)
api_router.include_router(comments.router)
api_router.include_router(feed.router)
api_router.include_router(search.router)
api_router.include_router(uploads.router)
