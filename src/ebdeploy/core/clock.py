"""Clock abstraction so waits can be driven without real time passing."""

import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone


class Clock(ABC):
    """Source of wall time, elapsed time and sleeping."""

    @abstractmethod
    def now(self) -> datetime:
        """Current wall time, timezone-aware UTC."""
        pass

    @abstractmethod
    def monotonic(self) -> float:
        """Seconds from an arbitrary, never-decreasing origin."""
        pass

    @abstractmethod
    def sleep(self, seconds: float) -> None:
        """Block for the given number of seconds."""
        pass


class SystemClock(Clock):
    """Clock backed by the operating system."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def monotonic(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)
