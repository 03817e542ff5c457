"""
Settings Schemas.

Partial-update shapes for ``UserSettings``; every field is optional and
only supplied fields are merged (see ``pinboard.services.settings``).
"""
from typing import Optional

from pinboard.models.user import GridSize, ProfileVisibility
from pinboard.schemas.base import BaseSchema


class PrivacySettingsUpdate(BaseSchema):
    profile_visibility: Optional[ProfileVisibility] = None
    show_email: Optional[bool] = None
    show_location: Optional[bool] = None


class DataSettingsUpdate(BaseSchema):
    auto_save: Optional[bool] = None
    save_to_gallery: Optional[bool] = None
    cache_size: Optional[GridSize] = None


class SettingsUpdate(BaseSchema):
    dark_mode: Optional[bool] = None
    grid_size: Optional[GridSize] = None
    notifications: Optional[bool] = None
    email_notifications: Optional[bool] = None
    language: Optional[str] = None
    privacy: Optional[PrivacySettingsUpdate] = None
    data: Optional[DataSettingsUpdate] = None
