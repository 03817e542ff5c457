"""
User Schemas for MongoDB.

Pydantic schemas for registration, login, profiles and follow responses.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from pinboard.config import settings
from pinboard.models.user import UserSettings
from pinboard.schemas.base import BaseSchema, DocumentSchema, HTTP_URL_RE, TimestampSchema

USERNAME_PATTERN = r"^[A-Za-z0-9_]+$"


# =============================================================================
# Authentication Schemas
# =============================================================================
class RegisterRequest(BaseSchema):
    """Schema for user registration."""
    username: str = Field(..., min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    email: EmailStr
    password: str = Field(..., min_length=settings.PASSWORD_MIN_LENGTH)
    full_name: Optional[str] = Field(None, max_length=100)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()


class LoginRequest(BaseSchema):
    """Schema for login request."""
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()


class PasswordChange(BaseSchema):
    """Schema for password change."""
    current_password: str
    new_password: str = Field(..., min_length=settings.PASSWORD_MIN_LENGTH)


# =============================================================================
# Profile Update
# =============================================================================
class ProfileUpdate(BaseSchema):
    """Fields a user may change on their own profile; omitted fields are kept."""
    username: Optional[str] = Field(None, min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    email: Optional[EmailStr] = None
    full_name: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=100)
    website: Optional[str] = Field(None, max_length=200)
    avatar_url: Optional[str] = Field(None, max_length=500)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v

    @field_validator("website")
    @classmethod
    def validate_website(cls, v: Optional[str]) -> Optional[str]:
        if v and not HTTP_URL_RE.match(v):
            raise ValueError("Please provide a valid URL")
        return v


# =============================================================================
# User Response Schemas
# =============================================================================
class UserSummary(DocumentSchema):
    """Populated reference to a user (pin owner, comment author)."""
    username: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None


class UserPublic(DocumentSchema, TimestampSchema):
    """Profile as seen by other users."""
    username: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    followers_count: int = 0
    following_count: int = 0
    activity_score: float = 0.0
    segment: str = "casual"

    @model_validator(mode="before")
    @classmethod
    def count_memberships(cls, data):
        if isinstance(data, dict):
            data = dict(data)
            data.setdefault("followers_count", len(data.get("followers") or []))
            data.setdefault("following_count", len(data.get("following") or []))
        return data


class UserMe(UserPublic):
    """The authenticated user's own profile (never includes the password hash)."""
    email: str
    settings: UserSettings = Field(default_factory=UserSettings)
    followers: List[str] = Field(default_factory=list)
    following: List[str] = Field(default_factory=list)
    login_count: int = 0
    total_pins: int = 0
    total_comments: int = 0
    total_boards: int = 0
    last_login: Optional[datetime] = None


class AuthResponse(BaseSchema):
    """Returned by register and login."""
    token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token expiration in seconds")
    user: UserMe


class ProfileStats(BaseSchema):
    pins: int
    boards: int
    followers: int
    following: int


class ProfileResponse(BaseSchema):
    """Another user's profile page."""
    user: UserPublic
    is_following: bool
    stats: ProfileStats


class FollowResponse(BaseSchema):
    message: str
    followers: int

