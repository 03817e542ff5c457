"""
Base Schemas for MongoDB.

Common schema patterns and utilities.
"""
import re
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

HTTP_URL_RE = re.compile(r"^https?://[^\s/$.?#][^\s]*$", re.IGNORECASE)


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class DocumentSchema(BaseSchema):
    """Response schema for a stored document; exposes MongoDB's _id as a string."""
    id: str = Field(..., alias="_id")

    @field_validator("id", mode="before")
    @classmethod
    def convert_objectid(cls, v):
        return str(v) if v else None


class TimestampSchema(BaseSchema):
    """Schema with timestamp fields."""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def paginate(items: List[Any], total: int, page: int, page_size: int) -> dict:
    """Build the pagination envelope shared by every list endpoint."""
    total_pages = (total + page_size - 1) // page_size if total > 0 else 1
    return {
        "items": items,
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": total_pages,
        "has_next": page < total_pages,
        "has_prev": page > 1,
    }


class MessageResponse(BaseSchema):
    """Simple message response."""
    message: str
    success: bool = True

