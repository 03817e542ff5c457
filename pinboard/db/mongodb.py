"""
MongoDB access through Motor.

One ``MongoDB`` instance owns the client for the process: the app lifespan
connects and closes it, endpoints receive the database through the
``get_database`` dependency (overridden in tests).
"""
import logging
from typing import Dict, List, Optional, Tuple, Union

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure

from pinboard.config import settings
from pinboard.core.exceptions import DatabaseException

logger = logging.getLogger(__name__)

IndexKeys = Union[str, List[Tuple[str, int]]]

# collection -> [(keys, options)]
INDEXES: Dict[str, List[Tuple[IndexKeys, dict]]] = {
    "users": [
        ("email", {"unique": True}),
        ("username", {"unique": True}),
        ("created_at", {}),
    ],
    "boards": [
        ([("owner_id", 1), ("created_at", -1)], {}),
        ("collaborators", {}),
    ],
    "pins": [
        ([("owner_id", 1), ("created_at", -1)], {}),
        ("board_id", {}),
        ([("save_count", -1), ("created_at", -1)], {}),
        ([("category", 1), ("created_at", -1)], {}),
        ("saves", {}),
    ],
    "comments": [
        ([("pin_id", 1), ("created_at", 1)], {}),
    ],
}


class MongoDB:
    """Holds the Motor client and the application database."""

    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None

    async def connect(self) -> None:
        """Open the client, verify the server answers and ensure indexes."""
        logger.info(f"Connecting to MongoDB at {settings.MONGODB_URL}")

        self.client = AsyncIOMotorClient(
            settings.MONGODB_URL,
            minPoolSize=settings.MONGODB_MIN_POOL_SIZE,
            maxPoolSize=settings.MONGODB_MAX_POOL_SIZE,
            maxIdleTimeMS=settings.MONGODB_MAX_IDLE_TIME_MS,
        )
        try:
            await self.client.admin.command("ping")
        except ConnectionFailure as e:
            logger.error(f"MongoDB is unreachable: {e}")
            self.client.close()
            self.client = None
            raise

        self.db = self.client[settings.MONGODB_DB_NAME]
        await create_indexes(self.db)
        logger.info(f"Using MongoDB database '{settings.MONGODB_DB_NAME}'")

    async def close(self) -> None:
        if self.client:
            self.client.close()
            self.client = None
            self.db = None
            logger.info("MongoDB connection closed")

    def get_database(self) -> AsyncIOMotorDatabase:
        if self.db is None:
            raise DatabaseException("Database not connected")
        return self.db


async def create_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create every index in ``INDEXES``; existing indexes are left alone."""
    for collection, indexes in INDEXES.items():
        for keys, options in indexes:
            await db[collection].create_index(keys, **options)
    logger.info(f"Indexes ensured for: {', '.join(INDEXES)}")


mongodb = MongoDB()


async def get_database() -> AsyncIOMotorDatabase:
    """FastAPI dependency returning the connected database."""
    return mongodb.get_database()
