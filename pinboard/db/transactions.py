"""
Unit of work for writes that touch more than one document.

With ``MONGODB_USE_TRANSACTIONS`` enabled the steps run inside a MongoDB
transaction (replica set required). Otherwise each step registers an
idempotent compensating write; if a later step raises, the registered
compensations run in reverse order and the original error propagates.

Usage:
    async with unit_of_work(db) as uow:
        await db.users.update_one(..., **uow.options)
        uow.on_rollback(db.users.update_one, {...}, {"$pull": {...}})
        await db.users.update_one(..., **uow.options)
"""
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Awaitable, Callable, List, Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase

from pinboard.config import settings
from pinboard.core.exceptions import APIException

logger = logging.getLogger(__name__)


class UnitOfWork:
    """Collects compensating writes for one multi-document operation."""

    def __init__(self, db: AsyncIOMotorDatabase, session: Optional[Any] = None):
        self.db = db
        self.session = session
        self._compensations: List[Tuple[Callable[..., Awaitable[Any]], tuple, dict]] = []

    @property
    def transactional(self) -> bool:
        return self.session is not None

    @property
    def options(self) -> dict:
        """Keyword arguments to thread the session into driver calls."""
        return {"session": self.session} if self.session is not None else {}

    def on_rollback(self, func: Callable[..., Awaitable[Any]], *args, **kwargs) -> None:
        """Register a write that undoes the step just performed."""
        if self.transactional:
            return
        self._compensations.append((func, args, kwargs))

    async def compensate(self) -> None:
        """Replay registered compensations, newest first."""
        while self._compensations:
            func, args, kwargs = self._compensations.pop()
            try:
                await func(*args, **kwargs)
            except Exception:
                # The failure that triggered compensation is re-raised by the caller
                logger.exception("Compensating write failed; documents may be inconsistent")


@asynccontextmanager
async def unit_of_work(
    db: AsyncIOMotorDatabase,
    use_transactions: Optional[bool] = None,
) -> AsyncGenerator[UnitOfWork, None]:
    """Run a block of writes as a transaction or as compensated steps."""
    if use_transactions is None:
        use_transactions = settings.MONGODB_USE_TRANSACTIONS

    if use_transactions:
        async with await db.client.start_session() as session:
            async with session.start_transaction():
                yield UnitOfWork(db, session)
        return

    uow = UnitOfWork(db)
    try:
        yield uow
    except APIException:
        # Expected rejection (conflict, access), not a write failure
        await uow.compensate()
        raise
    except Exception:
        logger.warning("Multi-document write failed, running compensations")
        await uow.compensate()
        raise
