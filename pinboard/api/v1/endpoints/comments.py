"""
Comment endpoints.
"""
from fastapi import APIRouter, Depends, Response, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from pinboard.core.security import get_current_user
from pinboard.db.mongodb import get_database
from pinboard.services import comments as comment_service

router = APIRouter(prefix="/comments", tags=["Comments"])


@router.delete(
    "/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete comment",
)
async def delete_comment(
    comment_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    """Delete a comment (its author or the pin owner)."""
    await comment_service.delete_comment(db, comment_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
