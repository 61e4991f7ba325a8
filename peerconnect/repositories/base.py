"""
Repository base classes - define the storage interface.

Services depend only on these. Two backends implement them:
- PostgresStore (asyncpg) for deployments
- MemoryStore for development and tests
"""
from abc import ABC, abstractmethod
from datetime import date
from typing import AsyncContextManager, List, Optional, Sequence, Tuple

from peerconnect.models.domain import (
    User,
    Doubt,
    Answer,
    DailyTrackingRecord,
    Notification,
)


class UserStore(ABC):
    """Account records."""

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID."""

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username (case-sensitive)."""

    async def find(self, username_or_id: str) -> Optional[User]:
        """Look up by ID first, then by username."""
        user = await self.get_by_id(username_or_id)
        if user is None:
            user = await self.get_by_username(username_or_id)
        return user

    @abstractmethod
    async def create(self, user: User) -> User:
        """Insert a new user."""

    @abstractmethod
    async def mutate_credibility(self, user_id: str, delta: int) -> Optional[int]:
        """Add delta to credibility. Returns new score, or None if user missing."""

    @abstractmethod
    async def list_top(self, limit: int = 10) -> List[User]:
        """Users by credibility descending, then username."""


class DoubtRepository(ABC):
    """Doubt persistence."""

    @abstractmethod
    async def insert(self, doubt: Doubt) -> Doubt:
        """Persist a new doubt. Sets created_at if missing."""

    @abstractmethod
    async def get_by_id(self, doubt_id: str) -> Optional[Doubt]:
        """Get doubt by ID."""

    @abstractmethod
    async def get_many(self, doubt_ids: Sequence[str]) -> List[Doubt]:
        """Get doubts by ID, preserving the order of doubt_ids."""

    @abstractmethod
    async def list_titles(self) -> List[Tuple[str, str]]:
        """(id, title) for every doubt, oldest first."""

    @abstractmethod
    async def list_recent(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        user_id: Optional[str] = None,
        limit: int = 100,
    ) -> List[Doubt]:
        """Newest first. search matches title or category, case-insensitive."""


class AnswerRepository(ABC):
    """Answer persistence."""

    @abstractmethod
    async def insert(self, answer: Answer) -> Answer:
        """Persist a new answer."""

    @abstractmethod
    async def get_by_id(self, answer_id: str) -> Optional[Answer]:
        """Get answer by ID."""

    @abstractmethod
    async def mark_verified(self, answer_id: str) -> bool:
        """
        Flip is_verified to True if it is currently False.

        Returns True only for the call that made the change.
        """

    @abstractmethod
    async def list_for_doubt(self, doubt_id: str) -> List[Answer]:
        """Answers for a doubt, oldest first."""


class DailyTrackingStore(ABC):
    """Per (user, day) counters. All increments are atomic."""

    @abstractmethod
    async def get(self, user_id: str, day: date) -> Optional[DailyTrackingRecord]:
        """Current record or None if nothing happened that day."""

    @abstractmethod
    async def increment_posted(
        self, user_id: str, day: date, base_limit: int
    ) -> Optional[DailyTrackingRecord]:
        """
        Get-or-create the record and increment doubts_posted, but only while
        doubts_posted < base_limit + bonus_limit.

        Returns the updated record, or None when no slot is left (unchanged).
        """

    @abstractmethod
    async def increment_bonus(self, user_id: str, day: date, amount: int) -> DailyTrackingRecord:
        """Get-or-create the record and add amount to bonus_limit."""


class NotificationStore(ABC):
    """Read/unread alerts."""

    @abstractmethod
    async def enqueue(self, notification: Notification) -> Notification:
        """Persist a new notification."""

    @abstractmethod
    async def list_for_user(self, user_id: str, limit: int = 50) -> List[Notification]:
        """Newest first."""

    @abstractmethod
    async def count_unread(self, user_id: str) -> int:
        """Number of unread notifications."""

    @abstractmethod
    async def mark_all_read(self, user_id: str) -> int:
        """Mark every notification of the user read. Returns number changed."""


class Store(ABC):
    """
    Aggregate store - provides access to all repositories.

    This is what services use. transaction() yields a Store whose repositories
    share one unit of work: everything written inside commits together or not
    at all (including when the awaiting task is cancelled).
    """

    @property
    @abstractmethod
    def users(self) -> UserStore:
        """Access user store."""

    @property
    @abstractmethod
    def doubts(self) -> DoubtRepository:
        """Access doubt repository."""

    @property
    @abstractmethod
    def answers(self) -> AnswerRepository:
        """Access answer repository."""

    @property
    @abstractmethod
    def tracking(self) -> DailyTrackingStore:
        """Access daily tracking store."""

    @property
    @abstractmethod
    def notifications(self) -> NotificationStore:
        """Access notification store."""

    @abstractmethod
    def transaction(self) -> AsyncContextManager['Store']:
        """Unit of work over all repositories."""

    async def close(self) -> None:
        """Release backend resources."""
