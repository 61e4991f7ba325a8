"""
Tests for the doubt posting workflow.

Covers the quota gate, the similarity gate, force/check_only options and the
guarantee that a doubt is stored if and only if its quota slot was consumed.
"""

import asyncio
import contextlib
from datetime import timedelta

import pytest

from peerconnect.errors import (
    NotFoundError,
    QuotaExceededError,
    StoreUnavailableError,
    ValidationError,
)
from peerconnect.models.domain import DoubtDraft, PostOptions, PostStatus
from peerconnect.repositories.memory_store import MemoryTrackingStore


def draft(title="Merge sort stability", content="Is merge sort stable?", category="DAA", **kwargs):
    return DoubtDraft(title=title, content=content, category=category, **kwargs)


async def post_distinct(services, user_id, count):
    """Post `count` doubts whose titles never overlap"""
    for i in range(count):
        outcome = await services.doubts.post_doubt(
            user_id, draft(title=f"Question number{i}"), PostOptions(check_similarity=False)
        )
        assert outcome.posted


# =============================================================================
# Happy path
# =============================================================================

class TestPostDoubt:

    @pytest.mark.asyncio
    async def test_posts_and_consumes_quota(self, services, users, clock):
        alice = users["alice"]
        outcome = await services.doubts.post_doubt(alice.user_id, draft())

        assert outcome.status == PostStatus.POSTED
        assert outcome.doubt.id.startswith("dt_")
        assert outcome.doubt.user_id == alice.user_id
        assert outcome.doubt.username == "student_alice"
        assert outcome.doubt.created_at == clock.now()

        allowance = await services.quota.get_allowance(alice.user_id)
        assert allowance.posted_today == 1

    @pytest.mark.asyncio
    async def test_fields_are_trimmed(self, services, users):
        outcome = await services.doubts.post_doubt(
            users["alice"].user_id, draft(title="  Merge sort stability  ", category=" DAA ")
        )
        assert outcome.doubt.title == "Merge sort stability"
        assert outcome.doubt.category == "DAA"

    @pytest.mark.asyncio
    async def test_anonymous_doubt_keeps_author(self, services, users):
        outcome = await services.doubts.post_doubt(
            users["alice"].user_id, draft(is_anonymous=True)
        )
        assert outcome.doubt.is_anonymous
        assert outcome.doubt.user_id == users["alice"].user_id
        assert outcome.doubt.display_name == "Anonymous"

    @pytest.mark.asyncio
    async def test_missing_fields_rejected_before_store(self, services, users, store):
        with pytest.raises(ValidationError) as exc_info:
            await services.doubts.post_doubt(users["alice"].user_id, draft(title="  ", content=""))

        assert "title" in exc_info.value.message
        assert "content" in exc_info.value.message
        assert store.state.doubts == {}

    @pytest.mark.asyncio
    async def test_unknown_user(self, services):
        with pytest.raises(NotFoundError):
            await services.doubts.post_doubt("no-such-user", draft())


# =============================================================================
# Quota gate
# =============================================================================

class TestQuotaGate:

    @pytest.mark.asyncio
    async def test_sixth_post_rejected(self, services, users, store):
        alice = users["alice"]
        await post_distinct(services, alice.user_id, 5)

        with pytest.raises(QuotaExceededError):
            await services.doubts.post_doubt(alice.user_id, draft(title="One more thing"))

        assert len(store.state.doubts) == 5
        allowance = await services.quota.get_allowance(alice.user_id)
        assert allowance.posted_today == 5

    @pytest.mark.asyncio
    async def test_bonus_slot_allows_another_post(self, services, users):
        alice = users["alice"]
        await post_distinct(services, alice.user_id, 5)
        await services.quota.grant_bonus(alice.user_id)

        outcome = await services.doubts.post_doubt(alice.user_id, draft(title="One more thing"))
        assert outcome.posted

    @pytest.mark.asyncio
    async def test_quota_resets_next_utc_day(self, services, users, clock):
        alice = users["alice"]
        await post_distinct(services, alice.user_id, 5)

        clock.advance(timedelta(days=1))
        outcome = await services.doubts.post_doubt(alice.user_id, draft(title="Fresh day question"))
        assert outcome.posted

    @pytest.mark.asyncio
    async def test_concurrent_posts_for_last_slot(self, services, users, store):
        """Both pass the pre-check; only one may be stored"""
        alice = users["alice"]
        await post_distinct(services, alice.user_id, 4)
        store.set_latency(0.01)

        results = await asyncio.gather(
            services.doubts.post_doubt(alice.user_id, draft(title="Racing alpha"), PostOptions(force=True)),
            services.doubts.post_doubt(alice.user_id, draft(title="Racing omega"), PostOptions(force=True)),
            return_exceptions=True,
        )

        posted = [r for r in results if not isinstance(r, Exception)]
        rejected = [r for r in results if isinstance(r, QuotaExceededError)]
        assert len(posted) == 1
        assert len(rejected) == 1
        assert len(store.state.doubts) == 5

        allowance = await services.quota.get_allowance(alice.user_id)
        assert allowance.posted_today == 5


# =============================================================================
# Similarity gate
# =============================================================================

class TestSimilarityGate:

    @pytest.mark.asyncio
    async def test_conflict_persists_nothing_and_uses_no_quota(self, services, users, store):
        john = users["john"]
        alice = users["alice"]
        await services.doubts.post_doubt(john.user_id, draft(title="Newton-Raphson Convergence"))

        outcome = await services.doubts.post_doubt(
            alice.user_id, draft(title="Newton-Raphson Convergence Proof")
        )

        assert outcome.status == PostStatus.CONFLICT
        assert outcome.doubt is None
        assert [d.title for d in outcome.candidates] == ["Newton-Raphson Convergence"]
        assert len(store.state.doubts) == 1
        allowance = await services.quota.get_allowance(alice.user_id)
        assert allowance.posted_today == 0

    @pytest.mark.asyncio
    async def test_force_bypasses_similarity(self, services, users):
        await services.doubts.post_doubt(users["john"].user_id, draft(title="Newton-Raphson Convergence"))

        outcome = await services.doubts.post_doubt(
            users["alice"].user_id,
            draft(title="Newton-Raphson Convergence Proof"),
            PostOptions(force=True),
        )
        assert outcome.posted

    @pytest.mark.asyncio
    async def test_force_does_not_bypass_quota(self, services, users):
        alice = users["alice"]
        await post_distinct(services, alice.user_id, 5)

        with pytest.raises(QuotaExceededError):
            await services.doubts.post_doubt(alice.user_id, draft(), PostOptions(force=True))

    @pytest.mark.asyncio
    async def test_check_only_never_posts(self, services, users, store):
        alice = users["alice"]
        outcome = await services.doubts.post_doubt(
            alice.user_id, draft(), PostOptions(check_only=True)
        )

        assert outcome.status == PostStatus.CLEAR
        assert store.state.doubts == {}

    @pytest.mark.asyncio
    async def test_check_only_ignores_exhausted_quota(self, services, users):
        alice = users["alice"]
        await post_distinct(services, alice.user_id, 5)

        outcome = await services.doubts.post_doubt(
            alice.user_id, draft(title="Question number1"), PostOptions(check_only=True)
        )
        assert outcome.conflict


# =============================================================================
# Atomicity
# =============================================================================

class TestAtomicity:

    @pytest.mark.asyncio
    async def test_failed_quota_write_rolls_back_insert(self, services, users, store, monkeypatch):
        async def broken_increment(self, user_id, day, base_limit):
            raise StoreUnavailableError("tracking write timed out")

        monkeypatch.setattr(MemoryTrackingStore, "increment_posted", broken_increment)

        with pytest.raises(StoreUnavailableError):
            await services.doubts.post_doubt(users["alice"].user_id, draft())

        assert store.state.doubts == {}

    @pytest.mark.asyncio
    async def test_cancelled_post_leaves_no_trace(self, services, users, store):
        alice = users["alice"]
        store.set_latency(0.1)

        task = asyncio.ensure_future(services.doubts.post_doubt(alice.user_id, draft()))
        # three reads precede the transaction
        await asyncio.sleep(0.35)
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

        store.set_latency(0)
        doubts = list(store.state.doubts.values())
        allowance = await services.quota.get_allowance(alice.user_id)
        assert len(doubts) == allowance.posted_today

    @pytest.mark.asyncio
    async def test_store_down(self, services, users, store):
        store.set_available(False)
        with pytest.raises(StoreUnavailableError):
            await services.doubts.post_doubt(users["alice"].user_id, draft())


# =============================================================================
# Queries
# =============================================================================

class TestQueries:

    @pytest.mark.asyncio
    async def test_list_newest_first_with_search(self, services, users, clock):
        alice = users["alice"]
        for title in ("Merge sort stability", "Heap sort in place", "Binary trees basics"):
            await services.doubts.post_doubt(alice.user_id, draft(title=title), PostOptions(force=True))
            clock.advance(timedelta(minutes=1))

        titles = [d.title for d in await services.doubts.list_doubts()]
        assert titles == ["Binary trees basics", "Heap sort in place", "Merge sort stability"]

        titles = [d.title for d in await services.doubts.list_doubts(search="SORT")]
        assert titles == ["Heap sort in place", "Merge sort stability"]

    @pytest.mark.asyncio
    async def test_get_unknown_doubt(self, services):
        with pytest.raises(NotFoundError):
            await services.doubts.get_doubt("dt_missing0")
