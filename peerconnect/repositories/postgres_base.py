"""
Shared plumbing for asyncpg-backed repositories
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import asyncpg

from peerconnect.errors import StoreUnavailableError

logger = logging.getLogger(__name__)

# Failures that mean "the database is not reachable right now"
STORE_FAILURES = (
    OSError,
    asyncio.TimeoutError,
    asyncpg.exceptions.PostgresConnectionError,
    asyncpg.exceptions.QueryCanceledError,
    asyncpg.exceptions.InterfaceError,
)


def rows_affected(status: str) -> int:
    """Parse asyncpg status strings like 'UPDATE 1'"""
    return int(status.split()[-1])


class PostgresRepository:
    """
    Base for repositories that run against either the pool or a connection
    already inside a transaction.
    """

    def __init__(self, db_pool: asyncpg.Pool, conn: Optional[asyncpg.Connection] = None):
        self.db_pool = db_pool
        self.conn = conn

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[asyncpg.Connection]:
        """Bound connection if in a transaction, else one from the pool"""
        try:
            if self.conn is not None:
                yield self.conn
            else:
                async with self.db_pool.acquire() as conn:
                    yield conn
        except STORE_FAILURES as e:
            logger.error(f"Database unavailable: {e!r}")
            raise StoreUnavailableError(f"Database unavailable: {e}") from e
