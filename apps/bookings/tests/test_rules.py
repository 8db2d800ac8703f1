"""Tests for booking time limits and authorization predicates."""

from __future__ import annotations

from datetime import timedelta

from django.test import SimpleTestCase

from apps.bookings.domain.entities import Requester, Role, Slot, SlotStatus, SlotType
from apps.bookings.domain.exceptions import (
    DurationOutOfBounds,
    StartInPast,
    TooFarInAdvance,
    TooLateToCancel,
)
from apps.bookings.domain.policies import can_book_slot, is_admin, is_owner_or_admin
from apps.bookings.domain.rules import BookingRules
from shared.domain.value_objects import TimeRange

from .fakes import RATE, utc

NOW = utc(2024, 1, 15, 8, 0)


class BookingRulesTests(SimpleTestCase):
    def setUp(self) -> None:
        self.rules = BookingRules()

    def test_duration_bounds_are_inclusive(self) -> None:
        start = utc(2024, 1, 15, 9, 0)
        self.rules.check_duration(TimeRange(start, start + timedelta(hours=1)))
        self.rules.check_duration(TimeRange(start, start + timedelta(hours=24)))

    def test_too_short_booking_is_rejected(self) -> None:
        start = utc(2024, 1, 15, 9, 0)
        with self.assertRaises(DurationOutOfBounds) as ctx:
            self.rules.check_duration(TimeRange(start, start + timedelta(minutes=59)))
        self.assertIn("Minimum", ctx.exception.message)

    def test_too_long_booking_is_rejected(self) -> None:
        start = utc(2024, 1, 15, 9, 0)
        with self.assertRaises(DurationOutOfBounds) as ctx:
            self.rules.check_duration(TimeRange(start, start + timedelta(hours=24, seconds=1)))
        self.assertIn("Maximum", ctx.exception.message)

    def test_advance_limit(self) -> None:
        start = NOW + timedelta(days=30)
        self.rules.check_advance(TimeRange(start, start + timedelta(hours=1)), NOW)

        start += timedelta(seconds=1)
        with self.assertRaises(TooFarInAdvance):
            self.rules.check_advance(TimeRange(start, start + timedelta(hours=1)), NOW)

    def test_start_in_past_beyond_grace(self) -> None:
        start = NOW - timedelta(hours=1)
        self.rules.check_not_in_past(TimeRange(start, NOW), NOW)

        start -= timedelta(minutes=1)
        with self.assertRaises(StartInPast):
            self.rules.check_not_in_past(TimeRange(start, NOW), NOW)

    def test_cancellation_grace(self) -> None:
        period = TimeRange(NOW - timedelta(hours=1), NOW + timedelta(hours=1))
        self.rules.check_cancellation("b1", period, NOW)

        late = TimeRange(NOW - timedelta(hours=1, seconds=1), NOW + timedelta(hours=1))
        with self.assertRaises(TooLateToCancel):
            self.rules.check_cancellation("b1", late, NOW)

    def test_from_mapping_overrides_only_given_keys(self) -> None:
        rules = BookingRules.from_mapping({"MAX_DURATION_HOURS": 12, "MAX_ADVANCE_DAYS": 7})
        self.assertEqual(rules.max_duration, timedelta(hours=12))
        self.assertEqual(rules.max_advance, timedelta(days=7))
        self.assertEqual(rules.min_duration, timedelta(hours=1))
        self.assertEqual(BookingRules.from_mapping(None), BookingRules())

    def test_inconsistent_limits_are_refused(self) -> None:
        with self.assertRaises(ValueError):
            BookingRules(min_duration=timedelta(hours=3), max_duration=timedelta(hours=2))


class PolicyTests(SimpleTestCase):
    def setUp(self) -> None:
        self.owner = Requester(id=1)
        self.neighbour = Requester(id=2)
        self.admin = Requester(id=3, role=Role.ADMIN)
        self.owned = Slot(id=10, slot_number="A-10", slot_type=SlotType.COVERED,
                          status=SlotStatus.AVAILABLE, price_per_hour=RATE, owner_id=1)
        self.shared = Slot(id=11, slot_number="V-1", slot_type=SlotType.VISITOR,
                           status=SlotStatus.AVAILABLE, price_per_hour=RATE)

    def test_is_admin(self) -> None:
        self.assertTrue(is_admin(self.admin))
        self.assertFalse(is_admin(self.owner))
        self.assertFalse(is_admin(None))

    def test_owned_slot(self) -> None:
        self.assertTrue(is_owner_or_admin(self.owner, self.owned))
        self.assertTrue(is_owner_or_admin(self.admin, self.owned))
        self.assertFalse(is_owner_or_admin(self.neighbour, self.owned))
        self.assertFalse(can_book_slot(self.neighbour, self.owned))

    def test_shared_slot_is_open_to_everyone(self) -> None:
        self.assertTrue(can_book_slot(self.neighbour, self.shared))
        self.assertFalse(is_owner_or_admin(self.neighbour, self.shared))
