"""
Quota Tracker - daily posting allowance

allowance = base limit (5) + bonus earned that day by contributing answers.

The tracker is the only writer of DailyTrackingRecord. record_post() is a
single conditional increment in the store, so it can never push a user past
their limit even when two posts race for the last slot.
"""
import logging
from datetime import date
from typing import Optional

from peerconnect.errors import QuotaExceededError
from peerconnect.models.domain import Allowance
from peerconnect.repositories.base import DailyTrackingStore
from peerconnect.utils.datetime_utils import Clock

logger = logging.getLogger(__name__)

BASE_DAILY_LIMIT = 5


class QuotaTracker:
    """
    Computes and enforces the daily post allowance.

    Args:
        tracking: Daily tracking store (pass a transaction-bound one to make
            the quota write part of a larger unit of work)
        base_limit: Posts allowed per day before bonuses
        clock: Source of "today" (UTC calendar date)
    """

    def __init__(
        self,
        tracking: DailyTrackingStore,
        base_limit: int = BASE_DAILY_LIMIT,
        clock: Optional[Clock] = None,
    ):
        if base_limit < 1:
            raise ValueError("base_limit must be >= 1")
        self.tracking = tracking
        self.base_limit = base_limit
        self.clock = clock or Clock()

    def within(self, tracking: DailyTrackingStore) -> 'QuotaTracker':
        """Same rules, different (e.g. transaction-bound) store"""
        return QuotaTracker(tracking, self.base_limit, self.clock)

    def today(self) -> date:
        return self.clock.today()

    async def get_allowance(self, user_id: str, day: Optional[date] = None) -> Allowance:
        """
        Posted count and maximum for a user's day. No record means nothing
        posted and no bonus.
        """
        record = await self.tracking.get(user_id, day or self.today())
        if record is None:
            return Allowance(posted_today=0, max_allowed=self.base_limit)
        return Allowance(
            posted_today=record.doubts_posted,
            max_allowed=self.base_limit + record.bonus_limit,
        )

    async def record_post(self, user_id: str, day: Optional[date] = None) -> Allowance:
        """
        Consume one posting slot.

        Raises:
            QuotaExceededError: no slot left (counter unchanged)
        """
        day = day or self.today()
        record = await self.tracking.increment_posted(user_id, day, self.base_limit)
        if record is None:
            allowance = await self.get_allowance(user_id, day)
            logger.info(f"Quota exhausted for {user_id} on {day} "
                        f"({allowance.posted_today}/{allowance.max_allowed})")
            raise QuotaExceededError(allowance.posted_today, allowance.max_allowed)

        return Allowance(
            posted_today=record.doubts_posted,
            max_allowed=self.base_limit + record.bonus_limit,
        )

    async def grant_bonus(self, user_id: str, day: Optional[date] = None, amount: int = 1) -> Allowance:
        """Permanently raise the day's allowance by amount"""
        if amount <= 0:
            raise ValueError("bonus amount must be positive")

        day = day or self.today()
        record = await self.tracking.increment_bonus(user_id, day, amount)
        logger.info(f"Granted {amount} bonus slot(s) to {user_id} on {day} "
                    f"(limit now {self.base_limit + record.bonus_limit})")
        return Allowance(
            posted_today=record.doubts_posted,
            max_allowed=self.base_limit + record.bonus_limit,
        )
