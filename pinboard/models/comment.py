"""
Comment Document Model for MongoDB.
"""
from pydantic import Field

from pinboard.models.base import BaseDocument


class CommentDocument(BaseDocument):
    """
    Comment document for MongoDB.

    Collection: comments

    Indexes:
        - (pin_id, created_at) compound
    """

    text: str = Field(..., min_length=1, max_length=500)
    author_id: str
    pin_id: str
