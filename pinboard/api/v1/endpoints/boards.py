"""
Board endpoints: CRUD, board pins and collaborators.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from pinboard.api.v1.deps import Page, pagination
from pinboard.core.security import get_current_user, get_current_user_optional
from pinboard.db.mongodb import get_database
from pinboard.schemas.board import (
    BoardCreate,
    BoardPinAdd,
    BoardResponse,
    BoardUpdate,
    CollaboratorAdd,
)
from pinboard.schemas.pin import PinListResponse
from pinboard.services import boards as board_service
from pinboard.services import pins as pin_service

router = APIRouter(prefix="/boards", tags=["Boards"])


async def _populated(db: AsyncIOMotorDatabase, board: dict) -> dict:
    return (await board_service.populate_boards(db, [board]))[0]


@router.get(
    "",
    response_model=List[BoardResponse],
    summary="List my boards",
)
async def list_my_boards(
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    """Boards the caller owns or collaborates on."""
    return await board_service.list_my_boards(db, current_user)


@router.post(
    "",
    response_model=BoardResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create board",
)
async def create_board(
    board_data: BoardCreate,
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    board = await board_service.create_board(db, current_user, board_data)
    return await _populated(db, board)


@router.get(
    "/{board_id}",
    response_model=BoardResponse,
    summary="Get board",
)
async def get_board(
    board_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
    viewer: Optional[dict] = Depends(get_current_user_optional),
):
    viewer_id = str(viewer["_id"]) if viewer else None
    board = await board_service.get_board_for_viewer(db, board_id, viewer_id)
    return await _populated(db, board)


@router.put(
    "/{board_id}",
    response_model=BoardResponse,
    summary="Update board",
)
async def update_board(
    board_id: str,
    board_data: BoardUpdate,
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    board = await board_service.update_board(db, board_id, current_user, board_data)
    return await _populated(db, board)


@router.delete(
    "/{board_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete board",
)
async def delete_board(
    board_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    """Delete a board along with its pins and their comments."""
    await board_service.delete_board(db, board_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Board Pins
# =============================================================================
@router.get(
    "/{board_id}/pins",
    response_model=PinListResponse,
    summary="List board pins",
)
async def list_board_pins(
    board_id: str,
    paging: Page = Depends(pagination),
    db: AsyncIOMotorDatabase = Depends(get_database),
    viewer: Optional[dict] = Depends(get_current_user_optional),
):
    viewer_id = str(viewer["_id"]) if viewer else None
    board = await board_service.get_board_for_viewer(db, board_id, viewer_id)
    return await pin_service.list_board_pins(db, board, paging.page, paging.page_size)


@router.post(
    "/{board_id}/pins",
    response_model=BoardResponse,
    summary="Move pin to board",
)
async def add_pin_to_board(
    board_id: str,
    data: BoardPinAdd,
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    """Move one of the caller's pins onto this board."""
    board = await pin_service.add_pin_to_board(db, board_id, current_user, data.pin_id)
    return await _populated(db, board)


@router.delete(
    "/{board_id}/pins/{pin_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove pin from board",
)
async def remove_pin_from_board(
    board_id: str,
    pin_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    """Deletes the pin; to keep it, move it to another board instead."""
    await pin_service.remove_pin_from_board(db, board_id, current_user, pin_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Collaborators
# =============================================================================
@router.post(
    "/{board_id}/collaborators",
    response_model=BoardResponse,
    summary="Add collaborator",
)
async def add_collaborator(
    board_id: str,
    data: CollaboratorAdd,
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    board = await board_service.add_collaborator(db, board_id, current_user, data)
    return await _populated(db, board)


@router.delete(
    "/{board_id}/collaborators/{user_id}",
    response_model=BoardResponse,
    summary="Remove collaborator",
)
async def remove_collaborator(
    board_id: str,
    user_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    board = await board_service.remove_collaborator(db, board_id, current_user, user_id)
    return await _populated(db, board)
