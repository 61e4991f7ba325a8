"""
Repository Pattern - Storage abstraction layer

Repositories hide storage details (PostgreSQL, in-memory) from business logic.
Services work with domain models and the Store interface, never with
connections or rows.

Backends:
- PostgresStore: asyncpg pool, one table per repository
- MemoryStore: dicts guarded by an asyncio.Lock (development, tests)
"""
import logging
from typing import Optional

from peerconnect.config import Settings, get_settings, create_postgres_pool
from .base import (
    Store,
    UserStore,
    DoubtRepository,
    AnswerRepository,
    DailyTrackingStore,
    NotificationStore,
)
from .memory_store import MemoryStore, MemoryState

logger = logging.getLogger(__name__)


async def create_store(settings: Optional[Settings] = None) -> Store:
    """Build the store selected by STORAGE_BACKEND"""
    settings = settings or get_settings()

    if settings.storage_backend == "postgres":
        from .postgres_store import PostgresStore
        pool = await create_postgres_pool(settings)
        store = PostgresStore(pool)
        await store.ensure_schema()
        logger.info("Using PostgreSQL store")
        return store

    logger.info("Using in-memory store")
    return MemoryStore()


__all__ = [
    'Store',
    'UserStore',
    'DoubtRepository',
    'AnswerRepository',
    'DailyTrackingStore',
    'NotificationStore',
    'MemoryStore',
    'MemoryState',
    'create_store',
]
