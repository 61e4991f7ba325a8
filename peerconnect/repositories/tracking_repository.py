"""
Daily Tracking Repository - PostgreSQL storage for per-day quota counters

Storage: PostgreSQL (daily_tracking table, primary key (user_id, tracking_date))

Every write is a single upsert statement, so concurrent posts by the same user
on the same day serialize on the row lock instead of racing on a
read-then-write.
"""
import logging
from datetime import date
from typing import Optional

from peerconnect.models.domain.tracking import DailyTrackingRecord
from .base import DailyTrackingStore
from .postgres_base import PostgresRepository

logger = logging.getLogger(__name__)


class TrackingRepository(PostgresRepository, DailyTrackingStore):
    """Repository for DailyTrackingRecord"""

    @staticmethod
    def _row_to_record(row) -> DailyTrackingRecord:
        return DailyTrackingRecord(
            user_id=str(row['user_id']),
            tracking_date=row['tracking_date'],
            doubts_posted=row['doubts_posted'],
            bonus_limit=row['bonus_limit'],
        )

    async def get(self, user_id: str, day: date) -> Optional[DailyTrackingRecord]:
        async with self.connection() as conn:
            row = await conn.fetchrow("""
                SELECT user_id, tracking_date, doubts_posted, bonus_limit
                FROM daily_tracking
                WHERE user_id = $1 AND tracking_date = $2
            """, user_id, day)

            return self._row_to_record(row) if row else None

    async def increment_posted(
        self, user_id: str, day: date, base_limit: int
    ) -> Optional[DailyTrackingRecord]:
        """
        Consume one posting slot if one is left.

        Args:
            user_id: User UUID
            day: Tracking date (UTC)
            base_limit: Daily allowance before bonuses (>= 1)

        Returns:
            Updated record, or None if the limit was already reached
        """
        async with self.connection() as conn:
            row = await conn.fetchrow("""
                INSERT INTO daily_tracking (user_id, tracking_date, doubts_posted, bonus_limit)
                VALUES ($1, $2, 1, 0)
                ON CONFLICT (user_id, tracking_date) DO UPDATE
                SET doubts_posted = daily_tracking.doubts_posted + 1
                WHERE daily_tracking.doubts_posted < $3 + daily_tracking.bonus_limit
                RETURNING user_id, tracking_date, doubts_posted, bonus_limit
            """, user_id, day, base_limit)

            return self._row_to_record(row) if row else None

    async def increment_bonus(self, user_id: str, day: date, amount: int) -> DailyTrackingRecord:
        """
        Raise the day's allowance.

        Args:
            user_id: User UUID
            day: Tracking date (UTC)
            amount: Extra slots (> 0)
        """
        async with self.connection() as conn:
            row = await conn.fetchrow("""
                INSERT INTO daily_tracking (user_id, tracking_date, doubts_posted, bonus_limit)
                VALUES ($1, $2, 0, $3)
                ON CONFLICT (user_id, tracking_date) DO UPDATE
                SET bonus_limit = daily_tracking.bonus_limit + $3
                RETURNING user_id, tracking_date, doubts_posted, bonus_limit
            """, user_id, day, amount)

            return self._row_to_record(row)
