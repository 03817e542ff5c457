"""
Search endpoint.
"""
from fastapi import APIRouter, Depends, Query
from motor.motor_asyncio import AsyncIOMotorDatabase

from pinboard.api.v1.deps import Page, pagination
from pinboard.db.mongodb import get_database
from pinboard.schemas.search import SearchResponse
from pinboard.services import feed as feed_service

router = APIRouter(prefix="/search", tags=["Search"])


@router.get(
    "",
    response_model=SearchResponse,
    summary="Search pins, boards or users",
)
async def search(
    q: str = Query(..., description="Text to look for"),
    type: str = Query("pins", description="pins, boards or users"),
    paging: Page = Depends(pagination),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """Case-insensitive substring search over public content."""
    return await feed_service.search(db, q, type, paging.page, paging.page_size)
