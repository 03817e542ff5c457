"""
Pin endpoints: CRUD, saves, likes, clicks and comments.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from pinboard.api.v1.deps import Page, pagination
from pinboard.core.middleware import client_ip
from pinboard.core.security import get_current_user, get_current_user_optional
from pinboard.db.mongodb import get_database
from pinboard.schemas.comment import CommentCreate, CommentResponse
from pinboard.schemas.pin import (
    PinClickResponse,
    PinCreate,
    PinDetailResponse,
    PinListResponse,
    PinResponse,
    PinUpdate,
)
from pinboard.services import analytics
from pinboard.services import comments as comment_service
from pinboard.services import pins as pin_service

router = APIRouter(prefix="/pins", tags=["Pins"])


async def _populated(db: AsyncIOMotorDatabase, pin: dict) -> dict:
    return (await pin_service.populate_pins(db, [pin]))[0]


@router.get(
    "",
    response_model=PinListResponse,
    summary="List public pins",
)
async def list_pins(
    tag: Optional[str] = Query(None, description="Only pins with this tag"),
    paging: Page = Depends(pagination),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """Newest public pins, optionally filtered by tag."""
    return await pin_service.list_public_pins(db, paging.page, paging.page_size, tag=tag)


@router.post(
    "",
    response_model=PinResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create pin",
)
async def create_pin(
    pin_data: PinCreate,
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    """Create a pin on one of the caller's own or shared boards."""
    pin = await pin_service.create_pin(db, current_user, pin_data)
    return await _populated(db, pin)


@router.get(
    "/saved",
    response_model=PinListResponse,
    summary="List saved pins",
)
async def list_saved_pins(
    paging: Page = Depends(pagination),
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    return await pin_service.list_saved_pins(db, current_user, paging.page, paging.page_size)


@router.get(
    "/{pin_id}",
    response_model=PinDetailResponse,
    summary="Get pin",
)
async def get_pin(
    pin_id: str,
    request: Request,
    view_duration: Optional[int] = Query(None, ge=0, description="Seconds spent on the previous view"),
    db: AsyncIOMotorDatabase = Depends(get_database),
    viewer: Optional[dict] = Depends(get_current_user_optional),
):
    """Get a pin and record the view."""
    viewer_id = str(viewer["_id"]) if viewer else None
    pin = await pin_service.get_pin_for_viewer(db, pin_id, viewer_id)

    await analytics.record_pin_view(
        db,
        pin["_id"],
        user_agent=request.headers.get("user-agent"),
        client=client_ip(request),
        view_duration=view_duration,
    )

    pin = await pin_service.get_pin(db, pin_id)
    return await _populated(db, pin)


@router.put(
    "/{pin_id}",
    response_model=PinResponse,
    summary="Update pin",
)
async def update_pin(
    pin_id: str,
    pin_data: PinUpdate,
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    pin = await pin_service.update_pin(db, pin_id, current_user, pin_data)
    return await _populated(db, pin)


@router.delete(
    "/{pin_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete pin",
)
async def delete_pin(
    pin_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    await pin_service.delete_pin(db, pin_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Saves & Likes
# =============================================================================
@router.post("/{pin_id}/save", response_model=PinResponse, summary="Save pin")
async def save_pin(
    pin_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    """Save a pin; saving it again is a 409."""
    pin = await pin_service.save_pin(db, pin_id, current_user)
    return await _populated(db, pin)


@router.delete("/{pin_id}/save", response_model=PinResponse, summary="Unsave pin")
async def unsave_pin(
    pin_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    pin = await pin_service.unsave_pin(db, pin_id, current_user)
    return await _populated(db, pin)


@router.post("/{pin_id}/like", response_model=PinResponse, summary="Like pin")
async def like_pin(
    pin_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    pin = await pin_service.like_pin(db, pin_id, current_user)
    return await _populated(db, pin)


@router.delete("/{pin_id}/like", response_model=PinResponse, summary="Unlike pin")
async def unlike_pin(
    pin_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    pin = await pin_service.unlike_pin(db, pin_id, current_user)
    return await _populated(db, pin)


@router.put("/{pin_id}/click", response_model=PinClickResponse, summary="Record click")
async def record_click(
    pin_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
    viewer: Optional[dict] = Depends(get_current_user_optional),
):
    """Count a click through to the pin's link."""
    viewer_id = str(viewer["_id"]) if viewer else None
    pin = await pin_service.get_pin_for_viewer(db, pin_id, viewer_id)
    clicks = await analytics.record_pin_click(db, pin["_id"])
    return PinClickResponse(clicks=clicks)


# =============================================================================
# Comments
# =============================================================================
@router.get(
    "/{pin_id}/comments",
    response_model=List[CommentResponse],
    summary="List comments",
)
async def list_comments(
    pin_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
    viewer: Optional[dict] = Depends(get_current_user_optional),
):
    viewer_id = str(viewer["_id"]) if viewer else None
    return await comment_service.list_comments(db, pin_id, viewer_id)


@router.post(
    "/{pin_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add comment",
)
async def add_comment(
    pin_id: str,
    comment_data: CommentCreate,
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    return await comment_service.create_comment(db, pin_id, current_user, comment_data.text)
