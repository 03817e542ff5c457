"""
Board service.

Access rules:
    - public boards (and their pins) are readable by anyone
    - private / secret boards are readable by the owner and collaborators
    - only the owner may edit, delete or manage collaborators
    - owner and collaborators may add pins
"""
import logging
from datetime import datetime
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from pinboard.core.exceptions import (
    AccessDeniedException,
    AlreadyExistsException,
    BoardNotFoundException,
    InvalidOperationException,
)
from pinboard.db.transactions import unit_of_work
from pinboard.models.base import parse_object_id
from pinboard.models.board import (
    BoardDocument,
    BoardPrivacy,
    can_view_board,
    visible_boards_query,
)
from pinboard.schemas.base import paginate
from pinboard.schemas.board import BoardCreate, BoardUpdate, CollaboratorAdd
from pinboard.services import users as user_service

logger = logging.getLogger(__name__)

NEWEST_FIRST = [("created_at", -1), ("_id", -1)]


async def get_board(db: AsyncIOMotorDatabase, board_id: str) -> dict:
    board = await db.boards.find_one({"_id": parse_object_id(board_id, "board ID")})
    if not board:
        raise BoardNotFoundException()
    return board


async def get_board_for_viewer(
    db: AsyncIOMotorDatabase,
    board_id: str,
    viewer_id: Optional[str],
) -> dict:
    board = await get_board(db, board_id)
    if not can_view_board(board, viewer_id):
        raise AccessDeniedException("This board is private")
    return board


def require_owner(board: dict, user_id: str, action: str = "modify") -> None:
    if board["owner_id"] != user_id:
        raise AccessDeniedException(f"Only the board owner can {action} this board")


async def populate_boards(db: AsyncIOMotorDatabase, boards: list) -> list:
    """Attach an ``owner`` summary to each board."""
    owners = await user_service.get_user_summaries(db, [b["owner_id"] for b in boards])
    for board in boards:
        board["owner"] = owners.get(board["owner_id"])
    return boards


# =============================================================================
# CRUD
# =============================================================================
async def create_board(db: AsyncIOMotorDatabase, owner: dict, data: BoardCreate) -> dict:
    owner_id = str(owner["_id"])
    board_doc = BoardDocument(**data.model_dump(), owner_id=owner_id).to_insert()

    result = await db.boards.insert_one(board_doc)
    board_doc["_id"] = result.inserted_id

    await user_service.increment_counter(db, owner_id, "total_boards")
    logger.info(f"Board created: {board_doc['name']} by {owner['username']}")
    return board_doc


async def update_board(
    db: AsyncIOMotorDatabase,
    board_id: str,
    user: dict,
    data: BoardUpdate,
) -> dict:
    """Owner-only partial update; a privacy change is mirrored onto the board's pins."""
    board = await get_board(db, board_id)
    require_owner(board, str(user["_id"]), "update")

    changes = data.model_dump(exclude_unset=True, exclude_none=True, mode="json")
    if not changes:
        return board

    changes["updated_at"] = datetime.utcnow()
    updated = await db.boards.find_one_and_update(
        {"_id": board["_id"]},
        {"$set": changes},
        return_document=ReturnDocument.AFTER,
    )

    if "privacy" in changes and changes["privacy"] != board.get("privacy"):
        await db.pins.update_many(
            {"board_id": str(board["_id"])},
            {"$set": {"is_private": changes["privacy"] != BoardPrivacy.PUBLIC.value}}
        )
        logger.info(f"Board {board['_id']} privacy changed to {changes['privacy']}")

    return updated


async def delete_board(db: AsyncIOMotorDatabase, board_id: str, user: dict) -> None:
    """Delete a board together with its pins and their comments."""
    board = await get_board(db, board_id)
    require_owner(board, str(user["_id"]), "delete")

    board_key = str(board["_id"])
    pin_ids = [str(pin["_id"]) async for pin in db.pins.find({"board_id": board_key}, {"_id": 1})]

    async with unit_of_work(db) as uow:
        if pin_ids:
            await db.comments.delete_many({"pin_id": {"$in": pin_ids}}, **uow.options)
        await db.pins.delete_many({"board_id": board_key}, **uow.options)
        await db.boards.delete_one({"_id": board["_id"]}, **uow.options)

    logger.info(f"Board deleted: {board_key} ({len(pin_ids)} pins removed)")


# =============================================================================
# Listings
# =============================================================================
async def list_my_boards(db: AsyncIOMotorDatabase, user: dict) -> list:
    """Boards the user owns or collaborates on, newest first."""
    user_id = str(user["_id"])
    cursor = db.boards.find(
        {"$or": [{"owner_id": user_id}, {"collaborators": user_id}]}
    ).sort(NEWEST_FIRST)
    return await populate_boards(db, await cursor.to_list(length=None))


async def list_user_boards(
    db: AsyncIOMotorDatabase,
    owner_id: str,
    viewer_id: Optional[str],
) -> list:
    cursor = db.boards.find(visible_boards_query(owner_id, viewer_id)).sort(NEWEST_FIRST)
    return await populate_boards(db, await cursor.to_list(length=None))


async def search_boards(
    db: AsyncIOMotorDatabase,
    pattern: dict,
    page: int,
    page_size: int,
) -> dict:
    query = {
        "privacy": BoardPrivacy.PUBLIC.value,
        "$or": [{"name": pattern}, {"description": pattern}],
    }
    total = await db.boards.count_documents(query)
    cursor = (
        db.boards.find(query)
        .sort(NEWEST_FIRST)
        .skip((page - 1) * page_size)
        .limit(page_size)
    )
    boards = await populate_boards(db, await cursor.to_list(length=page_size))
    return paginate(boards, total, page, page_size)


# =============================================================================
# Collaborators
# =============================================================================
async def add_collaborator(
    db: AsyncIOMotorDatabase,
    board_id: str,
    owner: dict,
    data: CollaboratorAdd,
) -> dict:
    board = await get_board(db, board_id)
    owner_id = str(owner["_id"])
    require_owner(board, owner_id, "manage collaborators on")

    if data.username:
        collaborator = await user_service.get_user_by_username(db, data.username)
    else:
        collaborator = await user_service.get_user_by_id(db, data.user_id)
    collaborator_id = str(collaborator["_id"])

    if collaborator_id == owner_id:
        raise InvalidOperationException("You cannot add yourself as a collaborator")

    updated = await db.boards.find_one_and_update(
        {"_id": board["_id"], "collaborators": {"$ne": collaborator_id}},
        {"$addToSet": {"collaborators": collaborator_id}, "$set": {"updated_at": datetime.utcnow()}},
        return_document=ReturnDocument.AFTER,
    )
    if updated is None:
        raise AlreadyExistsException("User is already a collaborator")

    logger.info(f"Collaborator {collaborator['username']} added to board {board_id}")
    return updated


async def remove_collaborator(
    db: AsyncIOMotorDatabase,
    board_id: str,
    owner: dict,
    collaborator_id: str,
) -> dict:
    """Remove a collaborator; removing a non-member leaves the board unchanged."""
    board = await get_board(db, board_id)
    require_owner(board, str(owner["_id"]), "manage collaborators on")
    parse_object_id(collaborator_id, "user ID")

    return await db.boards.find_one_and_update(
        {"_id": board["_id"]},
        {"$pull": {"collaborators": collaborator_id}, "$set": {"updated_at": datetime.utcnow()}},
        return_document=ReturnDocument.AFTER,
    )
