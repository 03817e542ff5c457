"""
User Document Model for MongoDB.

Represents user accounts in the users collection, including their
typed settings and the derived activity score / segment.
"""
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from pinboard.models.base import BaseDocument, IdSet


class UserSegment(str, Enum):
    """Engagement segment derived from activity_score."""
    CASUAL = "casual"
    POWER = "power"
    CREATOR = "creator"
    INFLUENCER = "influencer"


# score weights and segment thresholds (strictly greater than)
ACTIVITY_WEIGHTS = {
    "pins": 0.3,
    "comments": 0.2,
    "boards": 0.2,
    "followers": 0.3,
}
SEGMENT_THRESHOLDS = (
    (80, UserSegment.INFLUENCER),
    (50, UserSegment.CREATOR),
    (20, UserSegment.POWER),
)


def compute_activity(
    total_pins: int,
    total_comments: int,
    total_boards: int,
    follower_count: int,
) -> Tuple[float, UserSegment]:
    """
    Derive (activity_score, segment) from engagement counters.

    >>> compute_activity(100, 50, 10, 30)
    (51.0, <UserSegment.CREATOR: 'creator'>)
    """
    score = round(
        total_pins * ACTIVITY_WEIGHTS["pins"]
        + total_comments * ACTIVITY_WEIGHTS["comments"]
        + total_boards * ACTIVITY_WEIGHTS["boards"]
        + follower_count * ACTIVITY_WEIGHTS["followers"],
        2,
    )
    for threshold, segment in SEGMENT_THRESHOLDS:
        if score > threshold:
            return score, segment
    return score, UserSegment.CASUAL


# =============================================================================
# Settings
# =============================================================================
class GridSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class ProfileVisibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class SettingsModel(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class PrivacySettings(SettingsModel):
    profile_visibility: ProfileVisibility = ProfileVisibility.PUBLIC
    show_email: bool = False
    show_location: bool = False


class DataSettings(SettingsModel):
    auto_save: bool = True
    save_to_gallery: bool = True
    cache_size: GridSize = GridSize.MEDIUM


class UserSettings(SettingsModel):
    """Per-user preferences; every field has a default."""
    dark_mode: bool = False
    grid_size: GridSize = GridSize.MEDIUM
    notifications: bool = True
    email_notifications: bool = True
    language: str = "en"
    privacy: PrivacySettings = Field(default_factory=PrivacySettings)
    data: DataSettings = Field(default_factory=DataSettings)


class UserDocument(BaseDocument):
    """
    User document for MongoDB.

    Collection: users

    Indexes:
        - email (unique)
        - username (unique)
        - created_at
    """

    # Identity
    username: str
    email: EmailStr
    hashed_password: str

    # Profile
    full_name: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: str = ""
    location: Optional[str] = None
    website: Optional[str] = None

    settings: UserSettings = Field(default_factory=UserSettings)

    # Social graph
    followers: IdSet = Field(default_factory=list)
    following: IdSet = Field(default_factory=list)

    # Engagement counters
    login_count: int = 0
    total_pins: int = 0
    total_comments: int = 0
    total_boards: int = 0
    last_login: Optional[datetime] = None
    device_type: Optional[str] = None

    # Derived
    activity_score: float = 0.0
    segment: UserSegment = UserSegment.CASUAL

    def recompute_activity(self) -> None:
        score, segment = compute_activity(
            self.total_pins,
            self.total_comments,
            self.total_boards,
            len(self.followers),
        )
        self.activity_score = score
        self.segment = segment.value
