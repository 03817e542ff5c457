"""
Comment Schemas for MongoDB.
"""
from typing import Optional

from pydantic import Field

from pinboard.schemas.base import BaseSchema, DocumentSchema, TimestampSchema
from pinboard.schemas.user import UserSummary


class CommentCreate(BaseSchema):
    text: str = Field(..., min_length=1, max_length=500)


class CommentResponse(DocumentSchema, TimestampSchema):
    text: str
    author_id: str
    pin_id: str
    author: Optional[UserSummary] = None
