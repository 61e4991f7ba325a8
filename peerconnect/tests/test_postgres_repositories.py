"""
Tests for the asyncpg repositories against a mocked connection.

No database is needed: these check row mapping, the conditional-update
contracts and failure translation.
"""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from peerconnect.errors import StoreUnavailableError
from peerconnect.repositories.answer_repository import AnswerRepository
from peerconnect.repositories.postgres_base import rows_affected
from peerconnect.repositories.tracking_repository import TrackingRepository

DAY = date(2024, 3, 14)


@pytest.fixture
def conn():
    return AsyncMock()


def test_rows_affected():
    assert rows_affected("UPDATE 1") == 1
    assert rows_affected("UPDATE 0") == 0
    assert rows_affected("INSERT 0 1") == 1


class TestTrackingRepository:

    @pytest.mark.asyncio
    async def test_increment_posted_maps_row(self, conn):
        conn.fetchrow.return_value = {
            "user_id": "u1", "tracking_date": DAY, "doubts_posted": 3, "bonus_limit": 1,
        }
        repo = TrackingRepository(db_pool=None, conn=conn)

        record = await repo.increment_posted("u1", DAY, 5)

        assert record.doubts_posted == 3
        assert record.bonus_limit == 1
        sql, *args = conn.fetchrow.call_args.args
        assert "ON CONFLICT" in sql
        assert args == ["u1", DAY, 5]

    @pytest.mark.asyncio
    async def test_increment_posted_at_limit_returns_none(self, conn):
        conn.fetchrow.return_value = None
        repo = TrackingRepository(db_pool=None, conn=conn)

        assert await repo.increment_posted("u1", DAY, 5) is None

    @pytest.mark.asyncio
    async def test_connection_failure_becomes_store_unavailable(self, conn):
        conn.fetchrow.side_effect = OSError("connection refused")
        repo = TrackingRepository(db_pool=None, conn=conn)

        with pytest.raises(StoreUnavailableError):
            await repo.get("u1", DAY)


class TestAnswerRepository:

    @pytest.mark.asyncio
    async def test_mark_verified_first_time(self, conn):
        conn.execute.return_value = "UPDATE 1"
        assert await AnswerRepository(db_pool=None, conn=conn).mark_verified("an_12345678") is True

    @pytest.mark.asyncio
    async def test_mark_verified_already_verified(self, conn):
        conn.execute.return_value = "UPDATE 0"
        assert await AnswerRepository(db_pool=None, conn=conn).mark_verified("an_12345678") is False
