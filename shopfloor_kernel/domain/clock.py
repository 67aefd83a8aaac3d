"""
Clock -- injectable time source.

Import timestamps (work order ``imported_date``, nest sheet ``created_date``)
and the timestamp suffixes of duplicate-resolution suggestions all come from
a ``Clock`` passed in by the caller, so the pipeline never reads the system
time directly and tests can pin it.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone


class Clock(ABC):
    """Abstract clock interface. ``now()`` is always timezone-aware."""

    @abstractmethod
    def now(self) -> datetime:
        """Get the current time."""
        ...


class SystemClock(Clock):
    """Production clock returning the actual UTC system time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Test clock with controlled time.

    ``now()`` always returns the fixed time it was built with.
    """

    def __init__(self, fixed_time: datetime | None = None):
        self._fixed_time = fixed_time or datetime(
            2025, 7, 1, 9, 30, 0, tzinfo=timezone.utc
        )

    def now(self) -> datetime:
        return self._fixed_time
