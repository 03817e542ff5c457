"""
Profile and follow endpoints.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from motor.motor_asyncio import AsyncIOMotorDatabase

from pinboard.api.v1.deps import Page, pagination
from pinboard.core.exceptions import AccessDeniedException
from pinboard.core.security import get_current_user, get_current_user_optional
from pinboard.db.mongodb import get_database
from pinboard.schemas.board import BoardResponse
from pinboard.schemas.pin import PinListResponse
from pinboard.schemas.user import FollowResponse, ProfileResponse, ProfileUpdate, UserMe
from pinboard.services import boards as board_service
from pinboard.services import pins as pin_service
from pinboard.services import uploads as upload_service
from pinboard.services import users as user_service

router = APIRouter(prefix="/profile", tags=["Profile"])


def _viewer_id(viewer: Optional[dict]) -> Optional[str]:
    return str(viewer["_id"]) if viewer else None


@router.get(
    "",
    response_model=UserMe,
    summary="Get own profile",
)
async def get_own_profile(current_user: dict = Depends(get_current_user)):
    return current_user


@router.put(
    "",
    response_model=UserMe,
    summary="Update own profile",
)
async def update_own_profile(
    profile_data: ProfileUpdate,
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    """Update profile fields; omitted fields are left unchanged."""
    return await user_service.update_profile(db, current_user, profile_data)


@router.put(
    "/avatar",
    response_model=UserMe,
    summary="Upload avatar",
)
async def upload_avatar(
    file: UploadFile = File(...),
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    avatar_url = await upload_service.save_upload(file)
    return await user_service.set_avatar(db, current_user, avatar_url)


@router.get(
    "/{username}",
    response_model=ProfileResponse,
    summary="Get a user's profile",
)
async def get_profile(
    username: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
    viewer: Optional[dict] = Depends(get_current_user_optional),
):
    """Public profile with follow state and counts."""
    return await user_service.get_profile(db, username, viewer)


@router.get(
    "/{username}/pins",
    response_model=PinListResponse,
    summary="List a user's pins",
)
async def get_user_pins(
    username: str,
    paging: Page = Depends(pagination),
    db: AsyncIOMotorDatabase = Depends(get_database),
    viewer: Optional[dict] = Depends(get_current_user_optional),
):
    user = await user_service.get_user_by_username(db, username)
    viewer_id = _viewer_id(viewer)
    if not user_service.can_view_content(user, viewer_id):
        raise AccessDeniedException("This profile is private")

    user_id = str(user["_id"])
    query = {"owner_id": user_id}
    if viewer_id != user_id:
        query["is_private"] = False
    return await pin_service.list_pins(db, query, paging.page, paging.page_size)


@router.get(
    "/{username}/boards",
    response_model=List[BoardResponse],
    summary="List a user's boards",
)
async def get_user_boards(
    username: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
    viewer: Optional[dict] = Depends(get_current_user_optional),
):
    user = await user_service.get_user_by_username(db, username)
    viewer_id = _viewer_id(viewer)
    if not user_service.can_view_content(user, viewer_id):
        raise AccessDeniedException("This profile is private")
    return await board_service.list_user_boards(db, str(user["_id"]), viewer_id)


@router.post(
    "/{username}/follow",
    response_model=FollowResponse,
    summary="Follow a user",
)
async def follow(
    username: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    target = await user_service.follow_user(db, current_user, username)
    return FollowResponse(
        message="Successfully followed user",
        followers=len(target.get("followers", []))
    )


@router.post(
    "/{username}/unfollow",
    response_model=FollowResponse,
    summary="Unfollow a user",
)
async def unfollow(
    username: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    target = await user_service.unfollow_user(db, current_user, username)
    return FollowResponse(
        message="Successfully unfollowed user",
        followers=len(target.get("followers", []))
    )
