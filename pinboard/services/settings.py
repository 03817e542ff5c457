"""
User settings service.

``merge_settings`` is pure: it returns a new ``UserSettings`` where supplied
top-level scalars replace the current value, supplied nested groups
(``privacy``, ``data``) are merged field by field, and everything else is
kept. Stored settings that predate a field fall back to its default.
"""
import logging
from datetime import datetime
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from pinboard.models.user import UserSettings
from pinboard.schemas.settings import PrivacySettingsUpdate, SettingsUpdate

logger = logging.getLogger(__name__)


def load_settings(raw: Optional[dict]) -> UserSettings:
    return UserSettings.model_validate(raw or {})


def merge_settings(current: UserSettings, update: SettingsUpdate) -> UserSettings:
    merged = current.model_dump()
    changes = update.model_dump(exclude_unset=True, exclude_none=True)

    for key, value in changes.items():
        if isinstance(value, dict):
            merged[key] = {**merged.get(key, {}), **value}
        else:
            merged[key] = value

    return UserSettings.model_validate(merged)


async def _store(db: AsyncIOMotorDatabase, user: dict, new_settings: UserSettings) -> UserSettings:
    await db.users.update_one(
        {"_id": user["_id"]},
        {"$set": {"settings": new_settings.model_dump(), "updated_at": datetime.utcnow()}}
    )
    return new_settings


async def update_settings(
    db: AsyncIOMotorDatabase,
    user: dict,
    update: SettingsUpdate,
) -> UserSettings:
    merged = merge_settings(load_settings(user.get("settings")), update)
    return await _store(db, user, merged)


async def update_privacy(
    db: AsyncIOMotorDatabase,
    user: dict,
    update: PrivacySettingsUpdate,
) -> UserSettings:
    return await update_settings(db, user, SettingsUpdate(privacy=update))


async def reset_settings(db: AsyncIOMotorDatabase, user: dict) -> UserSettings:
    logger.info(f"Settings reset for user: {user['username']}")
    return await _store(db, user, UserSettings())
