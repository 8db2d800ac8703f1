"""
Common Value Objects

- TimeRange: a half-open interval of time [start, end), used for booking
  periods and availability windows.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from shared.domain.base import ValueObject


@dataclass(frozen=True)
class TimeRange(ValueObject):
    """
    Time range value object

    Represents the interval from start (inclusive) to end (exclusive).
    Both bounds must be timezone-aware so that ranges coming from different
    clients compare correctly.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("TimeRange bounds must be timezone-aware")
        if self.start >= self.end:
            raise ValueError(f"Start ({self.start.isoformat()}) must be before end ({self.end.isoformat()})")

    def overlaps_with(self, other: 'TimeRange') -> bool:
        """
        Check if this range overlaps with another

        The end bound is exclusive, so a range ending at 11:00 does not
        overlap a range starting at 11:00.

        Examples:
            - [09:00, 11:01) overlaps with [11:00, 13:00) -> True
            - [09:00, 11:00) overlaps with [11:00, 13:00) -> False (adjacent)
        """
        if not isinstance(other, TimeRange):
            raise TypeError("Can only check overlap with another TimeRange")

        return self.start < other.end and self.end > other.start

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def __str__(self):
        return f"{self.start.isoformat()} - {self.end.isoformat()}"

    def __repr__(self):
        return f"TimeRange({self.start.isoformat()}, {self.end.isoformat()})"
