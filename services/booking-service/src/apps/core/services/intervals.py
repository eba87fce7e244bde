# services/booking-service/src/apps/core/services/intervals.py
"""
Interval Model

Half-open time intervals ``[start, end)`` and the overlap predicates shared
by availability, booking validation and maintenance scheduling.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional


@dataclass(frozen=True)
class TimeInterval:
    """
    Half-open interval between two aware datetimes.

    An interval whose end is not after its start is *empty*: it has zero
    (or negative) length, contains no instant and overlaps nothing. Empty
    intervals can be built so that callers can reject them explicitly.
    """

    start: datetime
    end: datetime

    @classmethod
    def for_day(cls, target_date: date, tz: tzinfo) -> 'TimeInterval':
        """Local midnight to the following local midnight."""
        start = datetime.combine(target_date, time.min, tzinfo=tz)
        end = datetime.combine(target_date + timedelta(days=1), time.min, tzinfo=tz)
        return cls(start, end)

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps(self, other: 'TimeInterval') -> bool:
        return overlaps(self, other)

    def contains(self, instant: datetime) -> bool:
        return contains(self, instant)

    def intersection(self, other: 'TimeInterval') -> Optional['TimeInterval']:
        if not overlaps(self, other):
            return None
        return TimeInterval(max(self.start, other.start), min(self.end, other.end))

    def __str__(self):
        return f"[{self.start.isoformat()}, {self.end.isoformat()})"


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    """True iff the intervals share at least one instant; touching endpoints do not."""
    if a.is_empty or b.is_empty:
        return False
    return a.start < b.end and b.start < a.end


def contains(a: TimeInterval, instant: datetime) -> bool:
    return a.start <= instant < a.end


def duration_hours(a: TimeInterval) -> float:
    return a.duration.total_seconds() / 3600
