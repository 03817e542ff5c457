"""
Pydantic Schemas.

Export all schemas for easy imports:
    from pinboard.schemas import PinCreate, PinResponse
"""
from pinboard.schemas.base import (
    BaseSchema,
    DocumentSchema,
    TimestampSchema,
    MessageResponse,
    paginate,
)
from pinboard.schemas.user import (
    RegisterRequest,
    LoginRequest,
    PasswordChange,
    ProfileUpdate,
    UserSummary,
    UserPublic,
    UserMe,
    AuthResponse,
    ProfileStats,
    ProfileResponse,
    FollowResponse,
)
from pinboard.schemas.board import (
    BoardCreate,
    BoardUpdate,
    BoardPinAdd,
    CollaboratorAdd,
    BoardSummary,
    BoardResponse,
)
from pinboard.schemas.pin import (
    PinCreate,
    PinUpdate,
    PinResponse,
    PinDetailResponse,
    PinListResponse,
    PinClickResponse,
)
from pinboard.schemas.comment import CommentCreate, CommentResponse
from pinboard.schemas.search import SearchResponse
from pinboard.schemas.settings import (
    SettingsUpdate,
    PrivacySettingsUpdate,
    DataSettingsUpdate,
)

__all__ = [
    # Base
    "BaseSchema",
    "DocumentSchema",
    "TimestampSchema",
    "MessageResponse",
    "paginate",
    # User
    "RegisterRequest",
    "LoginRequest",
    "PasswordChange",
    "ProfileUpdate",
    "UserSummary",
    "UserPublic",
    "UserMe",
    "AuthResponse",
    "ProfileStats",
    "ProfileResponse",
    "FollowResponse",
    # Board
    "BoardCreate",
    "BoardUpdate",
    "BoardPinAdd",
    "CollaboratorAdd",
    "BoardSummary",
    "BoardResponse",
    # Pin
    "PinCreate",
    "PinUpdate",
    "PinResponse",
    "PinDetailResponse",
    "PinListResponse",
    "PinClickResponse",
    # Comment
    "CommentCreate",
    "CommentResponse",
    # Search
    "SearchResponse",
    # Settings
    "SettingsUpdate",
    "PrivacySettingsUpdate",
    "DataSettingsUpdate",
]
