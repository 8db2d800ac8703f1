"""
Booking Rules

Time limits applied to booking requests. Defaults are fixed; deployments
can override them through the Django ``BOOKING_RULES`` setting, which is
read outside the domain and passed in with ``BookingRules.from_mapping``.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Mapping

from apps.bookings.domain.exceptions import (
    DurationOutOfBounds,
    StartInPast,
    TooFarInAdvance,
    TooLateToCancel,
)
from shared.domain.base import ValueObject
from shared.domain.value_objects import TimeRange


@dataclass(frozen=True)
class BookingRules(ValueObject):
    min_duration: timedelta = timedelta(hours=1)
    max_duration: timedelta = timedelta(hours=24)
    max_advance: timedelta = timedelta(days=30)
    cancellation_grace: timedelta = timedelta(hours=1)
    past_grace: timedelta = timedelta(hours=1)

    def __post_init__(self):
        if self.min_duration <= timedelta(0):
            raise ValueError("Minimum duration must be positive")
        if self.max_duration < self.min_duration:
            raise ValueError("Maximum duration must not be shorter than minimum duration")

    @classmethod
    def from_mapping(cls, values: Mapping[str, int] | None) -> 'BookingRules':
        """
        Build rules from a settings-style mapping

        Recognised keys: MIN_DURATION_HOURS, MAX_DURATION_HOURS,
        MAX_ADVANCE_DAYS, CANCELLATION_GRACE_HOURS, PAST_GRACE_HOURS.
        Missing keys keep their defaults.
        """
        values = values or {}
        defaults = cls()
        return cls(
            min_duration=_hours(values, 'MIN_DURATION_HOURS', defaults.min_duration),
            max_duration=_hours(values, 'MAX_DURATION_HOURS', defaults.max_duration),
            max_advance=(
                timedelta(days=values['MAX_ADVANCE_DAYS'])
                if 'MAX_ADVANCE_DAYS' in values else defaults.max_advance
            ),
            cancellation_grace=_hours(values, 'CANCELLATION_GRACE_HOURS', defaults.cancellation_grace),
            past_grace=_hours(values, 'PAST_GRACE_HOURS', defaults.past_grace),
        )

    def check_duration(self, period: TimeRange):
        """Both bounds are inclusive"""
        if not self.min_duration <= period.duration <= self.max_duration:
            raise DurationOutOfBounds(period.duration, self.min_duration, self.max_duration)

    def check_advance(self, period: TimeRange, now: datetime):
        if period.start - now > self.max_advance:
            raise TooFarInAdvance(period.start, self.max_advance)

    def check_not_in_past(self, period: TimeRange, now: datetime):
        if period.start < now - self.past_grace:
            raise StartInPast(period.start, self.past_grace)

    def check_cancellation(self, booking_id, period: TimeRange, now: datetime):
        """Cancelling is allowed until `cancellation_grace` after the start"""
        if now - period.start > self.cancellation_grace:
            raise TooLateToCancel(booking_id, period.start, self.cancellation_grace)


def _hours(values: Mapping[str, int], key: str, default: timedelta) -> timedelta:
    if key not in values:
        return default
    return timedelta(hours=values[key])


DEFAULT_RULES = BookingRules()
