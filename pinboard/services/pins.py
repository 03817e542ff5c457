"""
Pin service.

A pin always belongs to exactly one board (``board_id``) and is listed in
that board's ``pins`` id set. ``is_private`` mirrors the board's privacy so
feeds can filter pins without joining boards.

Saves and likes are id sets with a denormalized counter; both change in a
single conditional update so the counter always equals the set size.
"""
import logging
from datetime import datetime
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from pinboard.core.exceptions import (
    AccessDeniedException,
    AlreadyLikedException,
    AlreadySavedException,
    PinNotFoundException,
)
from pinboard.db.transactions import unit_of_work
from pinboard.models.base import parse_object_id
from pinboard.models.board import BoardPrivacy, can_view_board, is_board_member
from pinboard.models.pin import PinDocument
from pinboard.schemas.base import paginate
from pinboard.schemas.pin import PinCreate, PinUpdate
from pinboard.services import boards as board_service
from pinboard.services import users as user_service

logger = logging.getLogger(__name__)

NEWEST_FIRST = [("created_at", -1), ("_id", -1)]


# =============================================================================
# Lookups & Population
# =============================================================================
async def get_pin(db: AsyncIOMotorDatabase, pin_id: str) -> dict:
    pin = await db.pins.find_one({"_id": parse_object_id(pin_id, "pin ID")})
    if not pin:
        raise PinNotFoundException()
    return pin


async def get_pin_for_viewer(
    db: AsyncIOMotorDatabase,
    pin_id: str,
    viewer_id: Optional[str],
) -> dict:
    """Load a pin, enforcing its board's privacy for the viewer."""
    pin = await get_pin(db, pin_id)
    if pin.get("is_private") and pin["owner_id"] != viewer_id:
        board = await db.boards.find_one({"_id": parse_object_id(pin["board_id"], "board ID")})
        if not board or not can_view_board(board, viewer_id):
            raise AccessDeniedException("This pin is on a private board")
    return pin


async def populate_pins(db: AsyncIOMotorDatabase, pins: list) -> list:
    """Attach ``owner`` and ``board`` summaries to each pin."""
    if not pins:
        return pins

    owners = await user_service.get_user_summaries(db, [p["owner_id"] for p in pins])
    board_ids = [parse_object_id(bid, "board ID") for bid in {p["board_id"] for p in pins}]
    boards = {
        str(board["_id"]): board
        async for board in db.boards.find({"_id": {"$in": board_ids}}, {"name": 1, "privacy": 1})
    }

    for pin in pins:
        pin["owner"] = owners.get(pin["owner_id"])
        pin["board"] = boards.get(pin["board_id"])
    return pins


async def list_pins(
    db: AsyncIOMotorDatabase,
    query: dict,
    page: int,
    page_size: int,
    sort=None,
) -> dict:
    """Run a pin query and wrap one populated page in the pagination envelope."""
    total = await db.pins.count_documents(query)
    cursor = (
        db.pins.find(query)
        .sort(sort or NEWEST_FIRST)
        .skip((page - 1) * page_size)
        .limit(page_size)
    )
    pins = await populate_pins(db, await cursor.to_list(length=page_size))
    return paginate(pins, total, page, page_size)


async def list_public_pins(
    db: AsyncIOMotorDatabase,
    page: int,
    page_size: int,
    tag: Optional[str] = None,
) -> dict:
    query = {"is_private": False}
    if tag:
        query["tags"] = tag
    return await list_pins(db, query, page, page_size)


async def list_saved_pins(db: AsyncIOMotorDatabase, user: dict, page: int, page_size: int) -> dict:
    user_id = str(user["_id"])
    # Pins the user saved before losing access to a private board stay hidden
    query = {"saves": user_id, "$or": [{"is_private": False}, {"owner_id": user_id}]}
    return await list_pins(db, query, page, page_size)


async def list_board_pins(
    db: AsyncIOMotorDatabase,
    board: dict,
    page: int,
    page_size: int,
) -> dict:
    return await list_pins(db, {"board_id": str(board["_id"])}, page, page_size)


# =============================================================================
# CRUD
# =============================================================================
async def create_pin(db: AsyncIOMotorDatabase, owner: dict, data: PinCreate) -> dict:
    """Create a pin on a board the caller owns or collaborates on."""
    owner_id = str(owner["_id"])
    board = await board_service.get_board(db, data.board_id)
    if not is_board_member(board, owner_id):
        raise AccessDeniedException("You can only add pins to your own or shared boards")

    board_key = str(board["_id"])
    pin_doc = PinDocument(
        **data.model_dump(exclude={"board_id"}),
        owner_id=owner_id,
        board_id=board_key,
        is_private=board.get("privacy") != BoardPrivacy.PUBLIC.value,
    ).to_insert()

    async with unit_of_work(db) as uow:
        result = await db.pins.insert_one(pin_doc, **uow.options)
        pin_doc["_id"] = result.inserted_id
        uow.on_rollback(db.pins.delete_one, {"_id": result.inserted_id})

        await db.boards.update_one(
            {"_id": board["_id"]},
            {"$addToSet": {"pins": str(result.inserted_id)}, "$set": {"updated_at": datetime.utcnow()}},
            **uow.options
        )

    await user_service.increment_counter(db, owner_id, "total_pins")
    logger.info(f"Pin created: {pin_doc['_id']} on board {board_key} by {owner['username']}")
    return pin_doc


async def move_pin(db: AsyncIOMotorDatabase, pin: dict, board: dict) -> dict:
    """Move a pin onto ``board``, pulling it from its previous board."""
    pin_key = str(pin["_id"])
    old_board_id = pin["board_id"]
    new_board_id = str(board["_id"])
    if old_board_id == new_board_id:
        return pin

    now = datetime.utcnow()
    is_private = board.get("privacy") != BoardPrivacy.PUBLIC.value

    async with unit_of_work(db) as uow:
        await db.boards.update_one(
            {"_id": parse_object_id(old_board_id, "board ID")},
            {"$pull": {"pins": pin_key}, "$set": {"updated_at": now}},
            **uow.options
        )
        uow.on_rollback(
            db.boards.update_one,
            {"_id": parse_object_id(old_board_id, "board ID")},
            {"$addToSet": {"pins": pin_key}},
        )

        await db.boards.update_one(
            {"_id": board["_id"]},
            {"$addToSet": {"pins": pin_key}, "$set": {"updated_at": now}},
            **uow.options
        )
        uow.on_rollback(db.boards.update_one, {"_id": board["_id"]}, {"$pull": {"pins": pin_key}})

        pin = await db.pins.find_one_and_update(
            {"_id": pin["_id"]},
            {"$set": {"board_id": new_board_id, "is_private": is_private, "updated_at": now}},
            return_document=ReturnDocument.AFTER,
            **uow.options
        )

    logger.info(f"Pin {pin_key} moved from board {old_board_id} to {new_board_id}")
    return pin


async def add_pin_to_board(
    db: AsyncIOMotorDatabase,
    board_id: str,
    user: dict,
    pin_id: str,
) -> dict:
    """Move one of the caller's pins onto a board they can pin to."""
    user_id = str(user["_id"])
    board = await board_service.get_board(db, board_id)
    if not is_board_member(board, user_id):
        raise AccessDeniedException("You can only add pins to your own or shared boards")

    pin = await get_pin(db, pin_id)
    if pin["owner_id"] != user_id:
        raise AccessDeniedException("You can only move your own pins")

    await move_pin(db, pin, board)
    return await board_service.get_board(db, board_id)


async def remove_pin_from_board(
    db: AsyncIOMotorDatabase,
    board_id: str,
    user: dict,
    pin_id: str,
) -> None:
    """
    Take a pin off a board.

    A pin always lives on exactly one board, so removing it deletes the
    pin (owner only). Use the move endpoint to put it on another board.
    """
    board = await board_service.get_board(db, board_id)
    pin = await get_pin(db, pin_id)
    if pin["board_id"] != str(board["_id"]):
        raise PinNotFoundException("Pin is not on this board")
    await delete_pin(db, pin_id, user)


async def update_pin(
    db: AsyncIOMotorDatabase,
    pin_id: str,
    user: dict,
    data: PinUpdate,
) -> dict:
    """Owner-only partial update; a new ``board_id`` moves the pin."""
    user_id = str(user["_id"])
    pin = await get_pin(db, pin_id)
    if pin["owner_id"] != user_id:
        raise AccessDeniedException("You can only edit your own pins")

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    new_board_id = changes.pop("board_id", None)

    if new_board_id and new_board_id != pin["board_id"]:
        board = await board_service.get_board(db, new_board_id)
        if not is_board_member(board, user_id):
            raise AccessDeniedException("You can only add pins to your own or shared boards")
        pin = await move_pin(db, pin, board)

    if not changes:
        return pin

    changes["updated_at"] = datetime.utcnow()
    return await db.pins.find_one_and_update(
        {"_id": pin["_id"]},
        {"$set": changes},
        return_document=ReturnDocument.AFTER,
    )


async def delete_pin(db: AsyncIOMotorDatabase, pin_id: str, user: dict) -> None:
    """Delete a pin, its comments and its entry on the parent board."""
    pin = await get_pin(db, pin_id)
    if pin["owner_id"] != str(user["_id"]):
        raise AccessDeniedException("You can only delete your own pins")

    pin_key = str(pin["_id"])
    async with unit_of_work(db) as uow:
        await db.boards.update_one(
            {"_id": parse_object_id(pin["board_id"], "board ID")},
            {"$pull": {"pins": pin_key}},
            **uow.options
        )
        uow.on_rollback(
            db.boards.update_one,
            {"_id": parse_object_id(pin["board_id"], "board ID")},
            {"$addToSet": {"pins": pin_key}},
        )

        await db.comments.delete_many({"pin_id": pin_key}, **uow.options)
        await db.pins.delete_one({"_id": pin["_id"]}, **uow.options)

    logger.info(f"Pin deleted: {pin_key}")


# =============================================================================
# Saves & Likes
# =============================================================================
async def _add_member(
    db: AsyncIOMotorDatabase,
    pin: dict,
    members: str,
    counter: str,
    user_id: str,
) -> Optional[dict]:
    return await db.pins.find_one_and_update(
        {"_id": pin["_id"], members: {"$ne": user_id}},
        {"$addToSet": {members: user_id}, "$inc": {counter: 1}},
        return_document=ReturnDocument.AFTER,
    )


async def _remove_member(
    db: AsyncIOMotorDatabase,
    pin: dict,
    members: str,
    counter: str,
    user_id: str,
) -> dict:
    updated = await db.pins.find_one_and_update(
        {"_id": pin["_id"], members: user_id},
        {"$pull": {members: user_id}, "$inc": {counter: -1}},
        return_document=ReturnDocument.AFTER,
    )
    return updated or pin


async def save_pin(db: AsyncIOMotorDatabase, pin_id: str, user: dict) -> dict:
    user_id = str(user["_id"])
    pin = await get_pin_for_viewer(db, pin_id, user_id)
    updated = await _add_member(db, pin, "saves", "save_count", user_id)
    if updated is None:
        raise AlreadySavedException()
    logger.info(f"Pin {pin_id} saved by {user['username']}")
    return updated


async def unsave_pin(db: AsyncIOMotorDatabase, pin_id: str, user: dict) -> dict:
    pin = await get_pin(db, pin_id)
    return await _remove_member(db, pin, "saves", "save_count", str(user["_id"]))


async def like_pin(db: AsyncIOMotorDatabase, pin_id: str, user: dict) -> dict:
    user_id = str(user["_id"])
    pin = await get_pin_for_viewer(db, pin_id, user_id)
    updated = await _add_member(db, pin, "likes", "like_count", user_id)
    if updated is None:
        raise AlreadyLikedException()
    logger.info(f"Pin {pin_id} liked by {user['username']}")
    return updated


async def unlike_pin(db: AsyncIOMotorDatabase, pin_id: str, user: dict) -> dict:
    pin = await get_pin(db, pin_id)
    return await _remove_member(db, pin, "likes", "like_count", str(user["_id"]))
