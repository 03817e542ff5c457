"""
Feed endpoints.
"""
from typing import List

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from pinboard.api.v1.deps import Page, pagination
from pinboard.core.security import get_current_user
from pinboard.db.mongodb import get_database
from pinboard.schemas.pin import PinListResponse, PinResponse
from pinboard.services import feed as feed_service

router = APIRouter(prefix="/feed", tags=["Feed"])


@router.get(
    "",
    response_model=PinListResponse,
    summary="Home feed",
)
async def home_feed(
    paging: Page = Depends(pagination),
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    """The caller's pins and pins from people they follow, newest first."""
    return await feed_service.home_feed(db, current_user, paging.page, paging.page_size)


@router.get(
    "/trending",
    response_model=List[PinResponse],
    summary="Trending pins",
)
async def trending(
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    return await feed_service.trending(db)


@router.get(
    "/category/{category}",
    response_model=PinListResponse,
    summary="Pins by category",
)
async def category_feed(
    category: str,
    paging: Page = Depends(pagination),
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    return await feed_service.category_feed(db, category, paging.page, paging.page_size)
