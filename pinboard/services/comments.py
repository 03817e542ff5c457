"""
Comment service.

Comments are standalone documents referencing their pin; the pin keeps a
``comment_count`` that moves with every create and delete.
"""
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from pinboard.core.exceptions import AccessDeniedException, CommentNotFoundException
from pinboard.models.base import parse_object_id
from pinboard.models.comment import CommentDocument
from pinboard.services import pins as pin_service
from pinboard.services import users as user_service

logger = logging.getLogger(__name__)


async def populate_comments(db: AsyncIOMotorDatabase, comments: list) -> list:
    authors = await user_service.get_user_summaries(db, [c["author_id"] for c in comments])
    for comment in comments:
        comment["author"] = authors.get(comment["author_id"])
    return comments


async def list_comments(
    db: AsyncIOMotorDatabase,
    pin_id: str,
    viewer_id: Optional[str],
) -> list:
    """Comments on a pin, oldest first."""
    pin = await pin_service.get_pin_for_viewer(db, pin_id, viewer_id)
    cursor = db.comments.find({"pin_id": str(pin["_id"])}).sort([("created_at", 1), ("_id", 1)])
    return await populate_comments(db, await cursor.to_list(length=None))


async def create_comment(db: AsyncIOMotorDatabase, pin_id: str, author: dict, text: str) -> dict:
    author_id = str(author["_id"])
    pin = await pin_service.get_pin_for_viewer(db, pin_id, author_id)

    comment_doc = CommentDocument(text=text, author_id=author_id, pin_id=str(pin["_id"])).to_insert()
    result = await db.comments.insert_one(comment_doc)
    comment_doc["_id"] = result.inserted_id

    await db.pins.update_one({"_id": pin["_id"]}, {"$inc": {"comment_count": 1}})
    await user_service.increment_counter(db, author_id, "total_comments")

    logger.info(f"Comment {result.inserted_id} added to pin {pin_id} by {author['username']}")
    return (await populate_comments(db, [comment_doc]))[0]


async def delete_comment(db: AsyncIOMotorDatabase, comment_id: str, user: dict) -> None:
    """Delete a comment; allowed for its author and for the pin's owner."""
    comment = await db.comments.find_one({"_id": parse_object_id(comment_id, "comment ID")})
    if not comment:
        raise CommentNotFoundException()

    user_id = str(user["_id"])
    pin = await db.pins.find_one({"_id": parse_object_id(comment["pin_id"], "pin ID")})

    if comment["author_id"] != user_id and (not pin or pin["owner_id"] != user_id):
        raise AccessDeniedException("You can only delete your own comments")

    await db.comments.delete_one({"_id": comment["_id"]})
    if pin:
        await db.pins.update_one(
            {"_id": pin["_id"], "comment_count": {"$gt": 0}},
            {"$inc": {"comment_count": -1}}
        )
    logger.info(f"Comment deleted: {comment_id}")
