"""
Daily tracking domain models
"""
from dataclasses import dataclass
from datetime import date


@dataclass
class DailyTrackingRecord:
    """
    Per-user, per-day posting counters.

    Storage: PostgreSQL (daily_tracking table), key (user_id, tracking_date)

    Created lazily on the first post or answer of the day, never deleted.
    Only the QuotaTracker writes these.
    """
    user_id: str
    tracking_date: date
    doubts_posted: int = 0
    bonus_limit: int = 0


@dataclass(frozen=True)
class Allowance:
    """How many doubts a user has posted today and may post in total."""
    posted_today: int
    max_allowed: int

    @property
    def remaining(self) -> int:
        return max(0, self.max_allowed - self.posted_today)

    @property
    def exhausted(self) -> bool:
        return self.posted_today >= self.max_allowed
