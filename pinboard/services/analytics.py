"""
Pin engagement analytics.

Views and clicks are folded into counters on the pin document itself with
single ``$inc`` updates:

    views, clicks, view_duration
    device_types.<mobile|tablet|desktop>
    locations.<client key>
"""
import logging
from typing import Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

logger = logging.getLogger(__name__)


def detect_device_type(user_agent: Optional[str]) -> str:
    """Classify a User-Agent string as mobile, tablet or desktop."""
    if not user_agent:
        return "desktop"
    if "Tablet" in user_agent or "iPad" in user_agent:
        return "tablet"
    if "Mobile" in user_agent:
        return "mobile"
    return "desktop"


def location_key(client: Optional[str]) -> str:
    """Make a client address safe to use as a MongoDB field name."""
    if not client:
        return "unknown"
    return client.replace(".", "_").replace("$", "_")


async def record_pin_view(
    db: AsyncIOMotorDatabase,
    pin_id: ObjectId,
    user_agent: Optional[str] = None,
    client: Optional[str] = None,
    view_duration: Optional[int] = None,
) -> None:
    inc = {
        "views": 1,
        f"device_types.{detect_device_type(user_agent)}": 1,
        f"locations.{location_key(client)}": 1,
    }
    if view_duration and view_duration > 0:
        inc["view_duration"] = int(view_duration)

    await db.pins.update_one({"_id": pin_id}, {"$inc": inc})


async def record_pin_click(db: AsyncIOMotorDatabase, pin_id: ObjectId) -> int:
    """Count an outbound click; returns the new click total."""
    pin = await db.pins.find_one_and_update(
        {"_id": pin_id},
        {"$inc": {"clicks": 1}},
        projection={"clicks": 1},
        return_document=ReturnDocument.AFTER,
    )
    if pin is None:
        return 0
    logger.debug(f"Pin {pin_id} clicked ({pin['clicks']} total)")
    return pin["clicks"]
