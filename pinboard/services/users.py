"""
User service: accounts, profiles and the follow graph.

Follow relationships are stored on both sides as id sets:

    follower.following  contains target id
    target.followers    contains follower id

Both writes run in one unit of work so a failure half way through never
leaves a one-sided edge behind.
"""
import logging
from datetime import datetime
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from pinboard.config import settings
from pinboard.core.exceptions import (
    AlreadyExistsException,
    ConflictException,
    EmailAlreadyExistsException,
    InvalidCredentialsException,
    InvalidOperationException,
    UserNotFoundException,
    UsernameTakenException,
    ValidationException,
)
from pinboard.core.security import create_access_token, hash_password, verify_password
from pinboard.db.transactions import unit_of_work
from pinboard.models.base import parse_object_id
from pinboard.models.board import visible_boards_query
from pinboard.models.user import ProfileVisibility, UserDocument, compute_activity
from pinboard.schemas.base import paginate
from pinboard.schemas.user import PasswordChange, ProfileUpdate, RegisterRequest
from pinboard.services.analytics import detect_device_type

logger = logging.getLogger(__name__)

SUMMARY_PROJECTION = {"username": 1, "full_name": 1, "avatar_url": 1}


# =============================================================================
# Lookups
# =============================================================================
async def get_user_by_id(db: AsyncIOMotorDatabase, user_id: str) -> dict:
    user = await db.users.find_one({"_id": parse_object_id(user_id, "user ID")})
    if not user:
        raise UserNotFoundException()
    return user


async def get_user_by_username(db: AsyncIOMotorDatabase, username: str) -> dict:
    user = await db.users.find_one({"username": username})
    if not user:
        raise UserNotFoundException()
    return user


async def get_user_summaries(db: AsyncIOMotorDatabase, user_ids) -> dict:
    """Map user id -> {_id, username, full_name, avatar_url} for populating references."""
    object_ids = [parse_object_id(uid, "user ID") for uid in set(user_ids) if uid]
    if not object_ids:
        return {}
    cursor = db.users.find({"_id": {"$in": object_ids}}, SUMMARY_PROJECTION)
    return {str(user["_id"]): user async for user in cursor}


# =============================================================================
# Activity
# =============================================================================
async def refresh_activity(db: AsyncIOMotorDatabase, user_id: str) -> Optional[dict]:
    """Recompute activity_score and segment from the stored counters."""
    user = await db.users.find_one({"_id": parse_object_id(user_id, "user ID")})
    if not user:
        return None

    score, segment = compute_activity(
        user.get("total_pins", 0),
        user.get("total_comments", 0),
        user.get("total_boards", 0),
        len(user.get("followers", [])),
    )
    await db.users.update_one(
        {"_id": user["_id"]},
        {"$set": {"activity_score": score, "segment": segment.value}}
    )
    user["activity_score"] = score
    user["segment"] = segment.value
    return user


async def increment_counter(
    db: AsyncIOMotorDatabase,
    user_id: str,
    field: str,
    amount: int = 1,
) -> Optional[dict]:
    """Bump one of the total_* counters and refresh the derived segment."""
    await db.users.update_one(
        {"_id": parse_object_id(user_id, "user ID")},
        {"$inc": {field: amount}}
    )
    return await refresh_activity(db, user_id)


# =============================================================================
# Registration & Login
# =============================================================================
async def register_user(db: AsyncIOMotorDatabase, data: RegisterRequest) -> dict:
    """Create a new account; nothing is written when a check fails."""
    if await db.users.find_one({"email": data.email}):
        raise EmailAlreadyExistsException()
    if await db.users.find_one({"username": data.username}):
        raise UsernameTakenException()

    user = UserDocument(
        username=data.username,
        email=data.email,
        hashed_password=hash_password(data.password),
        full_name=data.full_name,
    )
    user.recompute_activity()
    user_doc = user.to_insert()

    try:
        result = await db.users.insert_one(user_doc)
    except DuplicateKeyError:
        # Lost a race against a concurrent registration
        raise ConflictException("Username or email already registered")

    user_doc["_id"] = result.inserted_id
    logger.info(f"User registered: {data.username}")
    return user_doc


async def login_user(
    db: AsyncIOMotorDatabase,
    email: str,
    password: str,
    user_agent: Optional[str] = None,
) -> dict:
    """Verify credentials and record the login."""
    user = await db.users.find_one({"email": email.lower()})

    if not user or not verify_password(password, user["hashed_password"]):
        raise InvalidCredentialsException()

    now = datetime.utcnow()
    user = await db.users.find_one_and_update(
        {"_id": user["_id"]},
        {
            "$inc": {"login_count": 1},
            "$set": {
                "last_login": now,
                "device_type": detect_device_type(user_agent),
                "updated_at": now,
            },
        },
        return_document=ReturnDocument.AFTER,
    )
    logger.info(f"User logged in: {user['username']}")
    return user


def auth_payload(user: dict) -> dict:
    """Token plus the caller's own profile, as returned by register and login."""
    return {
        "token": create_access_token(user),
        "token_type": "bearer",
        "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        "user": user,
    }


async def change_password(db: AsyncIOMotorDatabase, user: dict, data: PasswordChange) -> None:
    if not verify_password(data.current_password, user["hashed_password"]):
        raise ValidationException("Current password is incorrect")

    await db.users.update_one(
        {"_id": user["_id"]},
        {"$set": {
            "hashed_password": hash_password(data.new_password),
            "updated_at": datetime.utcnow(),
        }}
    )
    logger.info(f"Password changed for user: {user['username']}")


# =============================================================================
# Profile
# =============================================================================
async def update_profile(db: AsyncIOMotorDatabase, user: dict, data: ProfileUpdate) -> dict:
    """Apply the supplied profile fields, enforcing username/email uniqueness."""
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    if "username" in changes and changes["username"] != user["username"]:
        if await db.users.find_one({"username": changes["username"]}):
            raise UsernameTakenException()
    if "email" in changes and changes["email"] != user["email"]:
        if await db.users.find_one({"email": changes["email"]}):
            raise EmailAlreadyExistsException()

    if not changes:
        return user

    changes["updated_at"] = datetime.utcnow()
    return await db.users.find_one_and_update(
        {"_id": user["_id"]},
        {"$set": changes},
        return_document=ReturnDocument.AFTER,
    )


async def set_avatar(db: AsyncIOMotorDatabase, user: dict, avatar_url: str) -> dict:
    return await db.users.find_one_and_update(
        {"_id": user["_id"]},
        {"$set": {"avatar_url": avatar_url, "updated_at": datetime.utcnow()}},
        return_document=ReturnDocument.AFTER,
    )


def _privacy(user: dict) -> dict:
    return (user.get("settings") or {}).get("privacy") or {}


def public_view(user: dict, viewer_id: Optional[str]) -> dict:
    """Copy of a user document with fields the viewer may not see removed."""
    is_self = viewer_id == str(user["_id"])
    privacy = _privacy(user)

    view = {k: v for k, v in user.items() if k != "hashed_password"}
    if not is_self and not privacy.get("show_email", False):
        view.pop("email", None)
    if not is_self and not privacy.get("show_location", False):
        view.pop("location", None)
    return view


def can_view_content(user: dict, viewer_id: Optional[str]) -> bool:
    """Private profiles show pins and boards to the owner and followers only."""
    if _privacy(user).get("profile_visibility", ProfileVisibility.PUBLIC.value) != ProfileVisibility.PRIVATE.value:
        return True
    if not viewer_id:
        return False
    return viewer_id == str(user["_id"]) or viewer_id in user.get("followers", [])


async def get_profile(db: AsyncIOMotorDatabase, username: str, viewer: Optional[dict]) -> dict:
    """Public profile with follow state and stats for the viewer."""
    user = await get_user_by_username(db, username)
    user_id = str(user["_id"])
    viewer_id = str(viewer["_id"]) if viewer else None

    pin_query = {"owner_id": user_id}
    if viewer_id != user_id:
        pin_query["is_private"] = False

    return {
        "user": public_view(user, viewer_id),
        "is_following": bool(viewer_id) and viewer_id in user.get("followers", []),
        "stats": {
            "pins": await db.pins.count_documents(pin_query),
            "boards": await db.boards.count_documents(visible_boards_query(user_id, viewer_id)),
            "followers": len(user.get("followers", [])),
            "following": len(user.get("following", [])),
        },
    }


async def search_users(
    db: AsyncIOMotorDatabase,
    pattern: dict,
    page: int,
    page_size: int,
) -> dict:
    query = {"username": pattern}
    total = await db.users.count_documents(query)
    cursor = (
        db.users.find(query)
        .sort([("username", 1)])
        .skip((page - 1) * page_size)
        .limit(page_size)
    )
    users = [public_view(user, None) async for user in cursor]
    return paginate(users, total, page, page_size)


# =============================================================================
# Follow Graph
# =============================================================================
async def follow_user(db: AsyncIOMotorDatabase, actor: dict, username: str) -> dict:
    """Make actor follow the named user; returns the updated target."""
    target = await get_user_by_username(db, username)
    actor_id = str(actor["_id"])
    target_id = str(target["_id"])

    if actor_id == target_id:
        raise InvalidOperationException("You cannot follow yourself")
    if target_id in actor.get("following", []):
        raise AlreadyExistsException("Already following this user")

    now = datetime.utcnow()
    async with unit_of_work(db) as uow:
        result = await db.users.update_one(
            {"_id": actor["_id"], "following": {"$ne": target_id}},
            {"$addToSet": {"following": target_id}, "$set": {"updated_at": now}},
            **uow.options
        )
        if result.modified_count == 0:
            raise AlreadyExistsException("Already following this user")
        uow.on_rollback(
            db.users.update_one, {"_id": actor["_id"]}, {"$pull": {"following": target_id}}
        )

        await db.users.update_one(
            {"_id": target["_id"]},
            {"$addToSet": {"followers": actor_id}, "$set": {"updated_at": now}},
            **uow.options
        )

    logger.info(f"User {actor['username']} followed {target['username']}")
    return await refresh_activity(db, target_id)


async def unfollow_user(db: AsyncIOMotorDatabase, actor: dict, username: str) -> dict:
    """Remove the follow edge in both directions; a missing edge is not an error."""
    target = await get_user_by_username(db, username)
    actor_id = str(actor["_id"])
    target_id = str(target["_id"])

    if actor_id == target_id:
        raise InvalidOperationException("You cannot unfollow yourself")

    now = datetime.utcnow()
    async with unit_of_work(db) as uow:
        await db.users.update_one(
            {"_id": actor["_id"]},
            {"$pull": {"following": target_id}, "$set": {"updated_at": now}},
            **uow.options
        )
        if target_id in actor.get("following", []):
            uow.on_rollback(
                db.users.update_one, {"_id": actor["_id"]}, {"$addToSet": {"following": target_id}}
            )

        await db.users.update_one(
            {"_id": target["_id"]},
            {"$pull": {"followers": actor_id}, "$set": {"updated_at": now}},
            **uow.options
        )

    logger.info(f"User {actor['username']} unfollowed {target['username']}")
    return await refresh_activity(db, target_id)
