"""
Clock sources for FM Dashboard.

Scoring and aggregation never read the system time themselves; callers pass
``now`` explicitly. A clock is how the outer layers decide what ``now`` is.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone


class ClockSource(ABC):
    """Supplies the current instant."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current instant as a timezone-aware datetime."""


class SystemClock(ClockSource):
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(ClockSource):
    """Clock pinned to one instant (tests, replays, ``--now``)."""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self._instant = instant

    def now(self) -> datetime:
        return self._instant
