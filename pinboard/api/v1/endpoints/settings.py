"""
User settings endpoints.
"""
from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from pinboard.core.security import get_current_user
from pinboard.db.mongodb import get_database
from pinboard.models.user import UserSettings
from pinboard.schemas.base import MessageResponse
from pinboard.schemas.settings import PrivacySettingsUpdate, SettingsUpdate
from pinboard.schemas.user import PasswordChange
from pinboard.services import settings as settings_service
from pinboard.services import users as user_service

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("", response_model=UserSettings, summary="Get settings")
async def get_settings(current_user: dict = Depends(get_current_user)):
    return settings_service.load_settings(current_user.get("settings"))


@router.put("", response_model=UserSettings, summary="Update settings")
async def update_settings(
    update: SettingsUpdate,
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    """Merge the supplied settings into the stored ones."""
    return await settings_service.update_settings(db, current_user, update)


@router.post("/reset", response_model=UserSettings, summary="Reset settings")
async def reset_settings(
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    return await settings_service.reset_settings(db, current_user)


@router.put("/privacy", response_model=UserSettings, summary="Update privacy settings")
async def update_privacy(
    update: PrivacySettingsUpdate,
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    return await settings_service.update_privacy(db, current_user, update)


@router.put("/password", response_model=MessageResponse, summary="Change password")
async def change_password(
    password_data: PasswordChange,
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    """Change the current user's password."""
    await user_service.change_password(db, current_user, password_data)
    return MessageResponse(message="Password changed successfully")
