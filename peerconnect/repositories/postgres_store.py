"""
PostgreSQL-backed Store

Wires the asyncpg repositories to one pool, and binds them all to a single
connection inside transaction().
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import asyncpg

from .base import Store
from .postgres_base import PostgresRepository
from .user_repository import UserRepository
from .doubt_repository import DoubtRepository
from .answer_repository import AnswerRepository
from .tracking_repository import TrackingRepository
from .notification_repository import NotificationRepository

logger = logging.getLogger(__name__)


SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    user_id            TEXT PRIMARY KEY,
    username           TEXT NOT NULL UNIQUE,
    role               TEXT NOT NULL CHECK (role IN ('STUDENT', 'MENTOR', 'ADMIN')),
    credibility_score  INTEGER NOT NULL DEFAULT 0,
    created_at         TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS doubts (
    id            TEXT PRIMARY KEY,
    user_id       TEXT NOT NULL REFERENCES users(user_id),
    title         TEXT NOT NULL,
    content       TEXT NOT NULL,
    category      TEXT NOT NULL,
    is_anonymous  BOOLEAN NOT NULL DEFAULT FALSE,
    created_at    TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
CREATE INDEX IF NOT EXISTS idx_doubts_created ON doubts(created_at DESC);

CREATE TABLE IF NOT EXISTS answers (
    id           TEXT PRIMARY KEY,
    doubt_id     TEXT NOT NULL REFERENCES doubts(id),
    user_id      TEXT NOT NULL REFERENCES users(user_id),
    step1        TEXT NOT NULL,
    step2        TEXT NOT NULL DEFAULT '',
    step3        TEXT NOT NULL DEFAULT '',
    is_verified  BOOLEAN NOT NULL DEFAULT FALSE,
    created_at   TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
CREATE INDEX IF NOT EXISTS idx_answers_doubt ON answers(doubt_id, created_at);

CREATE TABLE IF NOT EXISTS daily_tracking (
    user_id        TEXT NOT NULL REFERENCES users(user_id),
    tracking_date  DATE NOT NULL,
    doubts_posted  INTEGER NOT NULL DEFAULT 0 CHECK (doubts_posted >= 0),
    bonus_limit    INTEGER NOT NULL DEFAULT 0 CHECK (bonus_limit >= 0),
    PRIMARY KEY (user_id, tracking_date)
);

CREATE TABLE IF NOT EXISTS notifications (
    id          TEXT PRIMARY KEY,
    user_id     TEXT NOT NULL REFERENCES users(user_id),
    message     TEXT NOT NULL,
    kind        TEXT NOT NULL CHECK (kind IN ('NEW_ANSWER', 'VERIFIED')),
    is_read     BOOLEAN NOT NULL DEFAULT FALSE,
    doubt_id    TEXT REFERENCES doubts(id),
    created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
CREATE INDEX IF NOT EXISTS idx_notifications_user ON notifications(user_id, created_at DESC);
"""


class PostgresStore(Store):
    """Store over an asyncpg pool"""

    def __init__(self, db_pool: asyncpg.Pool, conn: Optional[asyncpg.Connection] = None):
        self.db_pool = db_pool
        self.conn = conn
        self._users = UserRepository(db_pool, conn)
        self._doubts = DoubtRepository(db_pool, conn)
        self._answers = AnswerRepository(db_pool, conn)
        self._tracking = TrackingRepository(db_pool, conn)
        self._notifications = NotificationRepository(db_pool, conn)

    @property
    def users(self) -> UserRepository:
        return self._users

    @property
    def doubts(self) -> DoubtRepository:
        return self._doubts

    @property
    def answers(self) -> AnswerRepository:
        return self._answers

    @property
    def tracking(self) -> TrackingRepository:
        return self._tracking

    @property
    def notifications(self) -> NotificationRepository:
        return self._notifications

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator['PostgresStore']:
        """
        Run the block in one database transaction.

        Nested calls reuse the outer transaction. asyncpg rolls back when the
        block raises, including CancelledError.
        """
        if self.conn is not None:
            yield self
            return

        async with PostgresRepository(self.db_pool).connection() as conn:
            async with conn.transaction():
                yield PostgresStore(self.db_pool, conn)

    async def ensure_schema(self) -> None:
        """Create tables if they do not exist"""
        async with PostgresRepository(self.db_pool, self.conn).connection() as conn:
            await conn.execute(SCHEMA)
        logger.info("PostgreSQL schema ready")

    async def close(self) -> None:
        if self.conn is None:
            await self.db_pool.close()
