"""
Booking price

A booking costs the slot's hourly rate times its duration in (fractional)
hours, rounded to cents. The price is always computed on the server.
"""

from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal

from shared.domain.value_objects import TimeRange

CENT = Decimal('0.01')
SECONDS_PER_HOUR = Decimal(3600)


def hours_in(duration: timedelta) -> Decimal:
    return Decimal(int(duration.total_seconds())) / SECONDS_PER_HOUR


def booking_price(price_per_hour: Decimal, period: TimeRange) -> Decimal:
    return (Decimal(price_per_hour) * hours_in(period.duration)).quantize(CENT, rounding=ROUND_HALF_UP)
