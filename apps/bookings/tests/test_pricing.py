"""Tests for booking price calculation."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.test import SimpleTestCase

from apps.bookings.domain.pricing import booking_price, hours_in
from shared.domain.value_objects import TimeRange

from .fakes import utc

START = utc(2024, 1, 15, 9, 0)


def period(**delta) -> TimeRange:
    return TimeRange(START, START + timedelta(**delta))


class BookingPriceTests(SimpleTestCase):
    def test_whole_hours(self) -> None:
        self.assertEqual(booking_price(Decimal("2.50"), period(hours=1)), Decimal("2.50"))
        self.assertEqual(booking_price(Decimal("2.50"), period(hours=4)), Decimal("10.00"))

    def test_partial_hours_are_charged_pro_rata(self) -> None:
        self.assertEqual(booking_price(Decimal("3.00"), period(minutes=90)), Decimal("4.50"))

    def test_rounds_half_up_to_cents(self) -> None:
        # 1.00 * 80/60 = 1.333...
        self.assertEqual(booking_price(Decimal("1.00"), period(minutes=80)), Decimal("1.33"))
        # 0.10 * 75/60 = 0.125
        self.assertEqual(booking_price(Decimal("0.10"), period(minutes=75)), Decimal("0.13"))

    def test_full_day(self) -> None:
        self.assertEqual(booking_price(Decimal("2.50"), period(hours=24)), Decimal("60.00"))

    def test_hours_in(self) -> None:
        self.assertEqual(hours_in(timedelta(minutes=45)), Decimal("0.75"))
