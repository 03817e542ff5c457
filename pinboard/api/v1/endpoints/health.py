"""
Liveness and readiness probes.
"""
import logging
from datetime import datetime
from typing import Dict

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel, Field
from pymongo.errors import PyMongoError

from pinboard.config import settings
from pinboard.db.mongodb import get_database

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])

COLLECTIONS = ("users", "boards", "pins", "comments")
STARTED_AT = datetime.utcnow()


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    version: str = settings.APP_VERSION


class ReadinessResponse(HealthResponse):
    database: str
    uptime_seconds: float
    documents: Dict[str, int] = Field(default_factory=dict)


@router.get("", response_model=HealthResponse, summary="Liveness probe")
async def health_check():
    return HealthResponse(status="healthy")


@router.get("/ready", response_model=ReadinessResponse, summary="Readiness probe")
async def readiness_check(db: AsyncIOMotorDatabase = Depends(get_database)):
    """Ping MongoDB and report document counts per collection."""
    uptime = (datetime.utcnow() - STARTED_AT).total_seconds()
    try:
        await db.command("ping")
        counts = {name: await db[name].estimated_document_count() for name in COLLECTIONS}
    except PyMongoError as e:
        logger.warning(f"Readiness check failed: {e}")
        return ReadinessResponse(status="not_ready", database="disconnected", uptime_seconds=uptime)

    return ReadinessResponse(
        status="ready",
        database="connected",
        uptime_seconds=uptime,
        documents=counts,
    )
