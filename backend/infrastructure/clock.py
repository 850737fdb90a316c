"""
Clock abstraction for time operations.
Allows faking time in tests.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone

from utils.datetime import to_epoch_ms, to_iso


class Clock(ABC):
    """Abstract clock interface."""

    @abstractmethod
    def now(self) -> datetime:
        """Get current UTC datetime."""
        pass

    def now_ms(self) -> int:
        """Get current time as Unix epoch milliseconds."""
        return to_epoch_ms(self.now())

    def now_iso(self) -> str:
        """Get current time as an ISO-8601 loot timestamp."""
        return to_iso(self.now())


class SystemClock(Clock):
    """Real system clock implementation."""

    def now(self) -> datetime:
        return datetime.now(tz=timezone.utc)


class FakeClock(Clock):
    """
    Fake clock for testing.
    Time can be set and advanced manually.
    """

    def __init__(self, initial: datetime = None):
        if initial is None:
            initial = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
        self._current = initial

    def now(self) -> datetime:
        return self._current

    def set(self, dt: datetime) -> None:
        """Set current time."""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        self._current = dt

    def advance_seconds(self, seconds: float) -> None:
        """Advance time by seconds."""
        self._current += timedelta(seconds=seconds)
