"""
Document Models.

Export all models from this package for easy imports:
    from pinboard.models import UserDocument, PinDocument
"""
from pinboard.models.base import BaseDocument, IdSet, PyObjectId, parse_object_id
from pinboard.models.user import (
    UserDocument,
    UserSegment,
    UserSettings,
    PrivacySettings,
    DataSettings,
    GridSize,
    ProfileVisibility,
    compute_activity,
)
from pinboard.models.board import (
    BoardDocument,
    BoardPrivacy,
    can_view_board,
    is_board_member,
    visible_boards_query,
)
from pinboard.models.pin import PinDocument, DEVICE_TYPES
from pinboard.models.comment import CommentDocument

__all__ = [
    "BaseDocument",
    "IdSet",
    "PyObjectId",
    "parse_object_id",
    "UserDocument",
    "UserSegment",
    "UserSettings",
    "PrivacySettings",
    "DataSettings",
    "GridSize",
    "ProfileVisibility",
    "compute_activity",
    "BoardDocument",
    "BoardPrivacy",
    "can_view_board",
    "is_board_member",
    "visible_boards_query",
    "PinDocument",
    "DEVICE_TYPES",
    "CommentDocument",
]
