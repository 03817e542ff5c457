"""
Pin Schemas for MongoDB.

Pydantic schemas for Pin-related operations.
"""
from typing import Annotated, Dict, List, Optional

from pydantic import AfterValidator, Field

from pinboard.config import settings
from pinboard.schemas.base import BaseSchema, DocumentSchema, HTTP_URL_RE, TimestampSchema
from pinboard.schemas.board import BoardSummary
from pinboard.schemas.user import UserSummary

MAX_TAGS = 20


def _validate_image_url(v: str) -> str:
    if v.startswith(settings.UPLOAD_URL_PREFIX + "/") or HTTP_URL_RE.match(v):
        return v
    raise ValueError("Please provide a valid image URL")


def _validate_link(v: str) -> Optional[str]:
    if v and not HTTP_URL_RE.match(v):
        raise ValueError("Please provide a valid URL")
    return v or None


def _normalize_tags(tags: List[str]) -> List[str]:
    cleaned = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    if len(cleaned) > MAX_TAGS:
        raise ValueError(f"At most {MAX_TAGS} tags allowed")
    return cleaned


ImageUrl = Annotated[str, Field(max_length=1000), AfterValidator(_validate_image_url)]
LinkUrl = Annotated[str, Field(max_length=1000), AfterValidator(_validate_link)]
TagList = Annotated[List[str], AfterValidator(_normalize_tags)]


# =============================================================================
# Pin Request Schemas
# =============================================================================
class PinCreate(BaseSchema):
    """Schema for creating a new pin."""
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)
    image_url: ImageUrl
    link: Optional[LinkUrl] = None
    tags: TagList = Field(default_factory=list)
    category: Optional[str] = Field(None, max_length=50)
    board_id: str


class PinUpdate(BaseSchema):
    """Schema for updating a pin (all fields optional)."""
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    image_url: Optional[ImageUrl] = None
    link: Optional[LinkUrl] = None
    tags: Optional[TagList] = None
    category: Optional[str] = Field(None, max_length=50)
    board_id: Optional[str] = None


# =============================================================================
# Pin Response Schemas
# =============================================================================
class PinResponse(DocumentSchema, TimestampSchema):
    """Schema for pin response."""
    title: str
    description: str = ""
    image_url: str
    link: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    category: Optional[str] = None
    owner_id: str
    board_id: str
    is_private: bool = False
    saves: List[str] = Field(default_factory=list)
    save_count: int = 0
    likes: List[str] = Field(default_factory=list)
    like_count: int = 0
    comment_count: int = 0
    views: int = 0
    clicks: int = 0
    owner: Optional[UserSummary] = None
    board: Optional[BoardSummary] = None


class PinDetailResponse(PinResponse):
    """Single pin with its engagement breakdown."""
    view_duration: int = 0
    device_types: Dict[str, int] = Field(default_factory=dict)
    locations: Dict[str, int] = Field(default_factory=dict)


class PinListResponse(BaseSchema):
    """Response for paginated pin list."""
    items: List[PinResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_prev: bool


class PinClickResponse(BaseSchema):
    clicks: int
