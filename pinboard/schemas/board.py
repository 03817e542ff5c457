"""
Board Schemas for MongoDB.
"""
from typing import List, Optional

from pydantic import Field, model_validator

from pinboard.models.board import BoardPrivacy
from pinboard.schemas.base import BaseSchema, DocumentSchema, TimestampSchema
from pinboard.schemas.user import UserSummary


# =============================================================================
# Board Request Schemas
# =============================================================================
class BoardCreate(BaseSchema):
    """Schema for creating a new board."""
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)
    privacy: BoardPrivacy = BoardPrivacy.PUBLIC
    category: str = Field(default="", max_length=50)
    cover_image: str = Field(default="", max_length=500)


class BoardUpdate(BaseSchema):
    """Schema for updating a board (all fields optional)."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    privacy: Optional[BoardPrivacy] = None
    category: Optional[str] = Field(None, max_length=50)
    cover_image: Optional[str] = Field(None, max_length=500)


class BoardPinAdd(BaseSchema):
    """Move one of the caller's pins onto this board."""
    pin_id: str


class CollaboratorAdd(BaseSchema):
    """Identify the collaborator by username or by id."""
    username: Optional[str] = None
    user_id: Optional[str] = None

    @model_validator(mode="after")
    def require_identifier(self):
        if not self.username and not self.user_id:
            raise ValueError("username or user_id is required")
        return self


# =============================================================================
# Board Response Schemas
# =============================================================================
class BoardSummary(DocumentSchema):
    """Populated reference to a board."""
    name: str
    privacy: str = BoardPrivacy.PUBLIC.value


class BoardResponse(DocumentSchema, TimestampSchema):
    """Schema for board response."""
    name: str
    description: str = ""
    privacy: str = BoardPrivacy.PUBLIC.value
    category: str = ""
    cover_image: str = ""
    owner_id: str
    pins: List[str] = Field(default_factory=list)
    collaborators: List[str] = Field(default_factory=list)
    pin_count: int = 0
    owner: Optional[UserSummary] = None

    @model_validator(mode="before")
    @classmethod
    def count_pins(cls, data):
        if isinstance(data, dict):
            data = dict(data)
            data.setdefault("pin_count", len(data.get("pins") or []))
        return data
