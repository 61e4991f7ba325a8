"""
Tests for the in-memory store's transaction and failure behaviour.
"""

import pytest

from peerconnect.errors import StoreUnavailableError
from peerconnect.models.domain import Doubt


def make_doubt(user_id="u1", title="Merge sort"):
    return Doubt(id="", user_id=user_id, username="someone", title=title, content="c", category="DAA")


class TestTransaction:

    @pytest.mark.asyncio
    async def test_commit(self, store, clock):
        async with store.transaction() as tx:
            doubt = await tx.doubts.insert(make_doubt())
            await tx.tracking.increment_posted("u1", clock.today(), 5)

        assert doubt.id in store.state.doubts
        assert (await store.tracking.get("u1", clock.today())).doubts_posted == 1

    @pytest.mark.asyncio
    async def test_exception_restores_every_table(self, store, clock):
        existing = await store.doubts.insert(make_doubt(title="Kept"))

        with pytest.raises(RuntimeError):
            async with store.transaction() as tx:
                await tx.doubts.insert(make_doubt(title="Dropped"))
                await tx.tracking.increment_posted("u1", clock.today(), 5)
                raise RuntimeError("boom")

        assert list(store.state.doubts) == [existing.id]
        assert await store.tracking.get("u1", clock.today()) is None

    @pytest.mark.asyncio
    async def test_nested_transaction_joins_outer(self, store):
        with pytest.raises(RuntimeError):
            async with store.transaction() as outer:
                async with outer.transaction() as inner:
                    await inner.doubts.insert(make_doubt())
                raise RuntimeError("boom")

        assert store.state.doubts == {}

    @pytest.mark.asyncio
    async def test_only_written_tables_are_copied(self, store, clock):
        await store.doubts.insert(make_doubt(title="Kept"))

        async with store.transaction() as tx:
            await tx.doubts.list_titles()
            await tx.tracking.increment_posted("u1", clock.today(), 5)
            assert set(tx.undo) == {"tracking"}

            await tx.doubts.insert(make_doubt(title="Added"))
            assert set(tx.undo) == {"tracking", "doubts"}

    @pytest.mark.asyncio
    async def test_rollback_restores_in_place_updates(self, store, users):
        bob = users["bob"]

        with pytest.raises(RuntimeError):
            async with store.transaction() as tx:
                await tx.users.mutate_credibility(bob.user_id, 50)
                raise RuntimeError("boom")

        assert (await store.users.get_by_id(bob.user_id)).credibility_score == 0


class TestConditionalUpdates:

    @pytest.mark.asyncio
    async def test_increment_posted_stops_at_limit(self, store, clock):
        day = clock.today()
        for _ in range(2):
            assert await store.tracking.increment_posted("u1", day, 2) is not None
        assert await store.tracking.increment_posted("u1", day, 2) is None

        record = await store.tracking.get("u1", day)
        assert record.doubts_posted == 2

    @pytest.mark.asyncio
    async def test_returned_records_are_copies(self, store, clock):
        record = await store.tracking.increment_bonus("u1", clock.today(), 1)
        record.bonus_limit = 99
        assert (await store.tracking.get("u1", clock.today())).bonus_limit == 1

    @pytest.mark.asyncio
    async def test_credibility_of_missing_user(self, store):
        assert await store.users.mutate_credibility("ghost", 50) is None


class TestAvailability:

    @pytest.mark.asyncio
    async def test_unavailable_store_fails_every_call(self, store):
        store.set_available(False)
        with pytest.raises(StoreUnavailableError):
            await store.doubts.list_titles()
        with pytest.raises(StoreUnavailableError):
            await store.users.get_by_username("student_alice")

        store.set_available(True)
        assert await store.doubts.list_titles() == []
