"""
Pin Document Model for MongoDB.

A single image post filed under exactly one board.
"""
from typing import Dict, List, Optional

from pydantic import Field

from pinboard.models.base import BaseDocument, IdSet


DEVICE_TYPES = ("mobile", "tablet", "desktop")


def _empty_device_counts() -> Dict[str, int]:
    return {device: 0 for device in DEVICE_TYPES}


class PinDocument(BaseDocument):
    """
    Pin document for MongoDB.

    Collection: pins

    Indexes:
        - (owner_id, created_at) compound
        - board_id
        - (save_count, created_at) compound for trending
        - (category, created_at) compound
        - saves
    """

    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)
    image_url: str
    link: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    category: Optional[str] = None

    owner_id: str
    board_id: str
    # Mirrors the board's privacy so feeds can filter without a join
    is_private: bool = False

    # Membership sets; counts change in the same update as the set
    saves: IdSet = Field(default_factory=list)
    save_count: int = 0
    likes: IdSet = Field(default_factory=list)
    like_count: int = 0
    comment_count: int = 0

    # Engagement
    views: int = 0
    clicks: int = 0
    view_duration: int = 0
    device_types: Dict[str, int] = Field(default_factory=_empty_device_counts)
    locations: Dict[str, int] = Field(default_factory=dict)
