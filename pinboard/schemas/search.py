"""
Search Schemas.
"""
from typing import List, Union

from pinboard.schemas.base import BaseSchema
from pinboard.schemas.board import BoardResponse
from pinboard.schemas.pin import PinResponse
from pinboard.schemas.user import UserPublic


class SearchResponse(BaseSchema):
    """Paginated search hits; ``items`` hold pins, boards or users per ``type``."""
    type: str
    query: str
    items: List[Union[PinResponse, BoardResponse, UserPublic]]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_prev: bool
