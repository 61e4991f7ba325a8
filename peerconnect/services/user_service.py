"""
User Service - login lookup, profiles and leaderboard
"""
import logging
from typing import List, Optional

from peerconnect.errors import NotFoundError, ValidationError
from peerconnect.models.domain import User, UserProfile, UserRole
from peerconnect.repositories.base import Store
from .quota_tracker import QuotaTracker

logger = logging.getLogger(__name__)


class UserService:

    def __init__(self, store: Store, quota: Optional[QuotaTracker] = None):
        self.store = store
        self.quota = quota or QuotaTracker(store.tracking)

    async def login(self, username: str) -> UserProfile:
        """
        Resolve a username to a profile. There are no passwords; identity is
        the username.
        """
        username = (username or "").strip()
        if not username:
            raise ValidationError("Missing required field(s): username")

        user = await self.store.users.get_by_username(username)
        if user is None:
            raise NotFoundError("User", username)

        logger.info(f"Login: {user.username} ({user.role.value})")
        return await self._profile(user)

    async def get_profile(self, user_id: str) -> UserProfile:
        user = await self.get_user(user_id)
        return await self._profile(user)

    async def get_user(self, user_id: str) -> User:
        user = await self.store.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    async def register(self, username: str, role: UserRole = UserRole.STUDENT, credibility_score: int = 0) -> User:
        """Create an account (used by seeding and admin scripts)"""
        username = (username or "").strip()
        if not username:
            raise ValidationError("Missing required field(s): username")
        return await self.store.users.create(
            User(user_id="", username=username, role=role, credibility_score=credibility_score)
        )

    async def leaderboard(self, limit: int = 10) -> List[User]:
        return await self.store.users.list_top(limit)

    async def _profile(self, user: User) -> UserProfile:
        allowance = await self.quota.get_allowance(user.user_id)
        return UserProfile(
            user=user,
            daily_limit=allowance.max_allowed,
            doubts_posted_today=allowance.posted_today,
        )
