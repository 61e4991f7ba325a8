"""
Datetime helpers

The day boundary for quota tracking is the UTC calendar date. Everything that
needs "now" or "today" goes through a Clock so tests can pin the time.
"""
from datetime import date, datetime, timezone
from typing import Callable, Optional


def utc_now() -> datetime:
    """Timezone-aware current time in UTC"""
    return datetime.now(timezone.utc)


class Clock:
    """
    Source of the current time.

    Args:
        now_fn: Callable returning an aware datetime (defaults to utc_now)
    """

    def __init__(self, now_fn: Optional[Callable[[], datetime]] = None):
        self._now_fn = now_fn or utc_now

    def now(self) -> datetime:
        value = self._now_fn()
        if value.tzinfo is None:
            # Naive datetimes are treated as UTC
            value = value.replace(tzinfo=timezone.utc)
        return value

    def today(self) -> date:
        """UTC calendar date of now()"""
        return self.now().astimezone(timezone.utc).date()


class FrozenClock(Clock):
    """Clock pinned to a fixed instant; advance() moves it forward."""

    def __init__(self, instant: datetime):
        super().__init__(lambda: self.instant)
        self.instant = instant if instant.tzinfo else instant.replace(tzinfo=timezone.utc)

    def advance(self, delta) -> None:
        self.instant = self.instant + delta
