"""
Shared endpoint dependencies.
"""
from typing import NamedTuple

from fastapi import Query

from pinboard.config import settings


class Page(NamedTuple):
    page: int
    page_size: int


def pagination(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(
        settings.DEFAULT_PAGE_SIZE,
        ge=1,
        le=settings.MAX_PAGE_SIZE,
        description="Items per page"
    ),
) -> Page:
    """``?page=&limit=`` query parameters."""
    return Page(page, limit)
