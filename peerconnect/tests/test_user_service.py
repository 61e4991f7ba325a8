"""
Tests for login, profiles, leaderboard and demo seeding.
"""

import pytest

from peerconnect.errors import NotFoundError, ValidationError
from peerconnect.models.domain import UserRole
from peerconnect.services.seed import DEMO_USERS, seed_demo_data


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_returns_profile_with_quota(self, services, users):
        await services.quota.record_post(users["alice"].user_id)

        profile = await services.users.login(" student_alice ")

        assert profile.user.user_id == users["alice"].user_id
        assert profile.daily_limit == 5
        assert profile.doubts_posted_today == 1
        assert profile.remaining_today == 4

    @pytest.mark.asyncio
    async def test_unknown_username(self, services, users):
        with pytest.raises(NotFoundError):
            await services.users.login("student_carol")

    @pytest.mark.asyncio
    async def test_blank_username(self, services):
        with pytest.raises(ValidationError):
            await services.users.login("")


class TestAccounts:

    @pytest.mark.asyncio
    async def test_register_and_find(self, services, store):
        user = await services.users.register("student_carol", UserRole.STUDENT)

        assert (await store.users.find(user.user_id)).username == "student_carol"
        assert (await store.users.find("student_carol")).user_id == user.user_id
        assert await store.users.find("nobody") is None

    @pytest.mark.asyncio
    async def test_duplicate_username_rejected(self, services, users):
        with pytest.raises(ValueError):
            await services.users.register("student_alice")

    @pytest.mark.asyncio
    async def test_leaderboard_orders_by_credibility_then_name(self, services, store, users):
        await store.users.mutate_credibility(users["bob"].user_id, 50)
        await store.users.mutate_credibility(users["john"].user_id, 50)

        board = await services.users.leaderboard(limit=3)
        assert [u.username for u in board] == ["mentor_john", "student_bob", "admin"]


class TestSeed:

    @pytest.mark.asyncio
    async def test_seed_once(self, store, clock):
        assert await seed_demo_data(store, clock) is True
        assert await seed_demo_data(store, clock) is False

        assert len(store.state.users) == len(DEMO_USERS)
        assert len(store.state.doubts) == 2
        john = await store.users.get_by_username("mentor_john")
        assert john.role == UserRole.MENTOR
        assert john.credibility_score == 250
