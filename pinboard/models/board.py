"""
Board Document Model for MongoDB.

A named, privacy-scoped collection of pins owned by one user and
optionally shared with collaborators.
"""
from enum import Enum
from typing import Optional

from pydantic import Field

from pinboard.models.base import BaseDocument, IdSet


class BoardPrivacy(str, Enum):
    """Board visibility."""
    PUBLIC = "public"
    PRIVATE = "private"
    SECRET = "secret"


class BoardDocument(BaseDocument):
    """
    Board document for MongoDB.

    Collection: boards

    Indexes:
        - (owner_id, created_at) compound
        - collaborators
    """

    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)
    privacy: BoardPrivacy = BoardPrivacy.PUBLIC
    category: str = ""
    cover_image: str = ""

    owner_id: str
    pins: IdSet = Field(default_factory=list)
    collaborators: IdSet = Field(default_factory=list)


def is_board_member(board: dict, user_id: Optional[str]) -> bool:
    """Owner or listed collaborator."""
    if not user_id:
        return False
    return board.get("owner_id") == user_id or user_id in board.get("collaborators", [])


def can_view_board(board: dict, user_id: Optional[str]) -> bool:
    """Public boards are readable by anyone, others only by members."""
    if board.get("privacy", BoardPrivacy.PUBLIC.value) == BoardPrivacy.PUBLIC.value:
        return True
    return is_board_member(board, user_id)


def visible_boards_query(owner_id: str, viewer_id: Optional[str]) -> dict:
    """Filter for the boards of ``owner_id`` that ``viewer_id`` may see."""
    if viewer_id == owner_id:
        return {"owner_id": owner_id}
    visible = [{"privacy": BoardPrivacy.PUBLIC.value}]
    if viewer_id:
        visible.append({"collaborators": viewer_id})
    return {"owner_id": owner_id, "$or": visible}
