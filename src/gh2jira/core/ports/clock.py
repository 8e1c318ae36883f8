"""
Clock Port - Injectable source of the current time.

Passed into constructors instead of calling datetime.now() directly, so tests
can pin "now" and skip real sleeps.
"""

import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone


class Clock(ABC):
    """Source of time for sync timestamps, backoff and the daemon loop."""

    @abstractmethod
    def now(self) -> datetime:
        """Current time, timezone-aware."""
        ...

    @abstractmethod
    def monotonic(self) -> float:
        """Seconds from an arbitrary, never-decreasing origin."""
        ...

    @abstractmethod
    def sleep(self, seconds: float) -> None:
        """Block for the given number of seconds."""
        ...


class SystemClock(Clock):
    """The real clock."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc).astimezone()

    def monotonic(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)


class FrozenClock(Clock):
    """
    A clock stuck at a fixed instant.

    `sleep` advances the monotonic counter without blocking and records the
    requested durations, which makes retry and daemon timing testable.
    """

    def __init__(self, instant: datetime):
        self.instant = instant
        self.elapsed = 0.0
        self.sleeps: list[float] = []

    def now(self) -> datetime:
        return self.instant

    def monotonic(self) -> float:
        return self.elapsed

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.elapsed += seconds
