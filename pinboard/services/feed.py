"""
Feeds and search.

    home      own pins + non-private pins of followed users, newest first
    trending  top non-private pins by save_count, then newest
    category  non-private pins with an exact category match, newest first
    search    case-insensitive substring match (escaped regex)
"""
import re
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from pinboard.config import settings
from pinboard.core.exceptions import ValidationException
from pinboard.services import boards as board_service
from pinboard.services import pins as pin_service
from pinboard.services import users as user_service

TRENDING_SORT = [("save_count", -1), ("created_at", -1), ("_id", -1)]
SEARCH_TYPES = ("pins", "boards", "users")


def home_feed_query(user: dict) -> dict:
    user_id = str(user["_id"])
    following = [uid for uid in user.get("following", []) if uid != user_id]
    return {
        "$or": [
            {"owner_id": user_id},
            {"owner_id": {"$in": following}, "is_private": False},
        ]
    }


async def home_feed(db: AsyncIOMotorDatabase, user: dict, page: int, page_size: int) -> dict:
    return await pin_service.list_pins(db, home_feed_query(user), page, page_size)


async def trending(db: AsyncIOMotorDatabase, limit: Optional[int] = None) -> list:
    limit = min(limit or settings.TRENDING_LIMIT, settings.TRENDING_LIMIT)
    cursor = db.pins.find({"is_private": False}).sort(TRENDING_SORT).limit(limit)
    return await pin_service.populate_pins(db, await cursor.to_list(length=limit))


async def category_feed(
    db: AsyncIOMotorDatabase,
    category: str,
    page: int,
    page_size: int,
) -> dict:
    return await pin_service.list_pins(
        db, {"category": category, "is_private": False}, page, page_size
    )


def search_pattern(q: str) -> dict:
    """Literal, case-insensitive substring match for ``q``."""
    return {"$regex": re.escape(q), "$options": "i"}


async def search(
    db: AsyncIOMotorDatabase,
    q: str,
    search_type: str,
    page: int,
    page_size: int,
) -> dict:
    q = (q or "").strip()
    if not q:
        raise ValidationException("Search query is required")
    if search_type not in SEARCH_TYPES:
        raise ValidationException(f"type must be one of: {', '.join(SEARCH_TYPES)}")

    pattern = search_pattern(q)

    if search_type == "boards":
        result = await board_service.search_boards(db, pattern, page, page_size)
    elif search_type == "users":
        result = await user_service.search_users(db, pattern, page, page_size)
    else:
        query = {
            "is_private": False,
            "$or": [{"title": pattern}, {"description": pattern}, {"tags": pattern}],
        }
        result = await pin_service.list_pins(db, query, page, page_size)

    result.update({"type": search_type, "query": q})
    return result
