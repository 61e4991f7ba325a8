"""
In-memory Store

Used for development (STORAGE_BACKEND=memory) and tests. Behaves like the
PostgreSQL store where it matters:
- one asyncio.Lock serializes every operation, so increments are atomic
- transaction() holds the lock for the whole block. The first write to a
  table inside it copies that table, and the copies are restored if the
  block raises (CancelledError included)
- set_available(False) makes every call fail with StoreUnavailableError
- latency adds an await point to each call, like a network round trip
"""
import asyncio
import copy
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from datetime import date
from typing import AsyncIterator, Dict, List, Optional, Sequence, Tuple

from peerconnect.errors import StoreUnavailableError
from peerconnect.models.domain import (
    User,
    Doubt,
    Answer,
    DailyTrackingRecord,
    Notification,
)
from .base import (
    Store,
    UserStore,
    DoubtRepository,
    AnswerRepository,
    DailyTrackingStore,
    NotificationStore,
)

logger = logging.getLogger(__name__)


@dataclass
class MemoryState:
    """All tables. Dicts keep insertion order, which stands in for created_at ties."""
    users: Dict[str, User] = field(default_factory=dict)
    doubts: Dict[str, Doubt] = field(default_factory=dict)
    answers: Dict[str, Answer] = field(default_factory=dict)
    tracking: Dict[Tuple[str, date], DailyTrackingRecord] = field(default_factory=dict)
    notifications: Dict[str, Notification] = field(default_factory=dict)
    available: bool = True
    latency: float = 0.0


class _MemoryRepository:
    """Shared guard logic for the in-memory repositories"""
    table = ''

    def __init__(self, store: 'MemoryStore'):
        self.store = store

    @property
    def state(self) -> MemoryState:
        return self.store.state

    @asynccontextmanager
    async def guard(self, writes: bool = False) -> AsyncIterator[MemoryState]:
        if self.state.latency:
            await asyncio.sleep(self.state.latency)
        if not self.state.available:
            raise StoreUnavailableError("In-memory store marked unavailable")

        if self.store.in_transaction:
            if writes:
                self.store.remember(self.table)
            yield self.state
        else:
            async with self.store.lock:
                yield self.state


# =============================================================================
# REPOSITORIES
# =============================================================================

class MemoryUserStore(_MemoryRepository, UserStore):
    table = 'users'

    async def get_by_id(self, user_id: str) -> Optional[User]:
        async with self.guard() as state:
            user = state.users.get(user_id)
            return replace(user) if user else None

    async def get_by_username(self, username: str) -> Optional[User]:
        async with self.guard() as state:
            for user in state.users.values():
                if user.username == username:
                    return replace(user)
            return None

    async def create(self, user: User) -> User:
        async with self.guard(writes=True) as state:
            if user.user_id in state.users:
                raise ValueError(f"User {user.user_id} already exists")
            if any(u.username == user.username for u in state.users.values()):
                raise ValueError(f"Username {user.username} already taken")
            state.users[user.user_id] = replace(user)
            logger.info(f"Created user {user.user_id} ({user.username}, {user.role.value})")
            return user

    async def mutate_credibility(self, user_id: str, delta: int) -> Optional[int]:
        async with self.guard(writes=True) as state:
            user = state.users.get(user_id)
            if user is None:
                return None
            user.credibility_score += delta
            logger.info(f"Credibility of {user_id} changed by {delta:+d} -> {user.credibility_score}")
            return user.credibility_score

    async def list_top(self, limit: int = 10) -> List[User]:
        async with self.guard() as state:
            ranked = sorted(state.users.values(), key=lambda u: (-u.credibility_score, u.username))
            return [replace(u) for u in ranked[:limit]]


class MemoryDoubtRepository(_MemoryRepository, DoubtRepository):
    table = 'doubts'

    def _with_username(self, state: MemoryState, doubt: Doubt) -> Doubt:
        author = state.users.get(doubt.user_id)
        return replace(doubt, username=author.username if author else doubt.username)

    async def insert(self, doubt: Doubt) -> Doubt:
        async with self.guard(writes=True) as state:
            if doubt.id in state.doubts:
                raise ValueError(f"Doubt {doubt.id} already exists")
            state.doubts[doubt.id] = replace(doubt)
            logger.info(f"Created doubt {doubt.id} by user {doubt.user_id}")
            return doubt

    async def get_by_id(self, doubt_id: str) -> Optional[Doubt]:
        async with self.guard() as state:
            doubt = state.doubts.get(doubt_id)
            return self._with_username(state, doubt) if doubt else None

    async def get_many(self, doubt_ids: Sequence[str]) -> List[Doubt]:
        async with self.guard() as state:
            return [self._with_username(state, state.doubts[i]) for i in doubt_ids if i in state.doubts]

    async def list_titles(self) -> List[Tuple[str, str]]:
        async with self.guard() as state:
            return [(d.id, d.title) for d in state.doubts.values()]

    async def list_recent(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        user_id: Optional[str] = None,
        limit: int = 100,
    ) -> List[Doubt]:
        async with self.guard() as state:
            doubts = list(state.doubts.values())
            if search:
                needle = search.lower()
                doubts = [d for d in doubts
                          if needle in d.title.lower() or needle in d.category.lower()]
            if category:
                doubts = [d for d in doubts if d.category == category]
            if user_id:
                doubts = [d for d in doubts if d.user_id == user_id]

            # Newest first; later inserts win ties
            ordered = sorted(
                enumerate(doubts),
                key=lambda pair: (pair[1].created_at.timestamp() if pair[1].created_at else 0, pair[0]),
                reverse=True,
            )
            return [self._with_username(state, d) for _, d in ordered[:limit]]


class MemoryAnswerRepository(_MemoryRepository, AnswerRepository):
    table = 'answers'

    async def insert(self, answer: Answer) -> Answer:
        async with self.guard(writes=True) as state:
            if answer.id in state.answers:
                raise ValueError(f"Answer {answer.id} already exists")
            state.answers[answer.id] = replace(answer)
            logger.info(f"Created answer {answer.id} on doubt {answer.doubt_id} by user {answer.user_id}")
            return answer

    async def get_by_id(self, answer_id: str) -> Optional[Answer]:
        async with self.guard() as state:
            answer = state.answers.get(answer_id)
            return replace(answer) if answer else None

    async def mark_verified(self, answer_id: str) -> bool:
        async with self.guard(writes=True) as state:
            answer = state.answers.get(answer_id)
            if answer is None or answer.is_verified:
                return False
            answer.is_verified = True
            logger.info(f"Marked answer {answer_id} verified")
            return True

    async def list_for_doubt(self, doubt_id: str) -> List[Answer]:
        async with self.guard() as state:
            return [replace(a) for a in state.answers.values() if a.doubt_id == doubt_id]


class MemoryTrackingStore(_MemoryRepository, DailyTrackingStore):
    table = 'tracking'

    async def get(self, user_id: str, day: date) -> Optional[DailyTrackingRecord]:
        async with self.guard() as state:
            record = state.tracking.get((user_id, day))
            return replace(record) if record else None

    async def increment_posted(
        self, user_id: str, day: date, base_limit: int
    ) -> Optional[DailyTrackingRecord]:
        async with self.guard(writes=True) as state:
            record = state.tracking.get((user_id, day)) or DailyTrackingRecord(user_id, day)
            if record.doubts_posted >= base_limit + record.bonus_limit:
                return None
            record.doubts_posted += 1
            state.tracking[(user_id, day)] = record
            return replace(record)

    async def increment_bonus(self, user_id: str, day: date, amount: int) -> DailyTrackingRecord:
        async with self.guard(writes=True) as state:
            record = state.tracking.setdefault((user_id, day), DailyTrackingRecord(user_id, day))
            record.bonus_limit += amount
            return replace(record)


class MemoryNotificationStore(_MemoryRepository, NotificationStore):
    table = 'notifications'

    async def enqueue(self, notification: Notification) -> Notification:
        async with self.guard(writes=True) as state:
            state.notifications[notification.id] = replace(notification)
            logger.debug(f"Queued {notification.kind.value} notification for {notification.user_id}")
            return notification

    async def list_for_user(self, user_id: str, limit: int = 50) -> List[Notification]:
        async with self.guard() as state:
            mine = [n for n in state.notifications.values() if n.user_id == user_id]
            return [replace(n) for n in reversed(mine)][:limit]

    async def count_unread(self, user_id: str) -> int:
        async with self.guard() as state:
            return sum(1 for n in state.notifications.values()
                       if n.user_id == user_id and not n.is_read)

    async def mark_all_read(self, user_id: str) -> int:
        async with self.guard(writes=True) as state:
            changed = 0
            for n in state.notifications.values():
                if n.user_id == user_id and not n.is_read:
                    n.is_read = True
                    changed += 1
            return changed


# =============================================================================
# STORE
# =============================================================================

class MemoryStore(Store):
    """Store over plain dicts"""

    def __init__(
        self,
        state: Optional[MemoryState] = None,
        lock: Optional[asyncio.Lock] = None,
        in_transaction: bool = False,
    ):
        self.state = state or MemoryState()
        self.lock = lock or asyncio.Lock()
        self.in_transaction = in_transaction
        # table name -> contents before the first write in this transaction
        self.undo: Dict[str, dict] = {}
        self._users = MemoryUserStore(self)
        self._doubts = MemoryDoubtRepository(self)
        self._answers = MemoryAnswerRepository(self)
        self._tracking = MemoryTrackingStore(self)
        self._notifications = MemoryNotificationStore(self)

    @property
    def users(self) -> MemoryUserStore:
        return self._users

    @property
    def doubts(self) -> MemoryDoubtRepository:
        return self._doubts

    @property
    def answers(self) -> MemoryAnswerRepository:
        return self._answers

    @property
    def tracking(self) -> MemoryTrackingStore:
        return self._tracking

    @property
    def notifications(self) -> MemoryNotificationStore:
        return self._notifications

    def set_available(self, available: bool) -> None:
        self.state.available = available

    def set_latency(self, seconds: float) -> None:
        self.state.latency = seconds

    def remember(self, table: str) -> None:
        if table not in self.undo:
            self.undo[table] = copy.deepcopy(getattr(self.state, table))

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator['MemoryStore']:
        if self.in_transaction:
            yield self
            return

        async with self.lock:
            tx = MemoryStore(self.state, self.lock, in_transaction=True)
            try:
                yield tx
            except BaseException:
                for name, table in tx.undo.items():
                    setattr(self.state, name, table)
                logger.debug(f"Rolled back in-memory transaction ({', '.join(tx.undo) or 'no writes'})")
                raise
