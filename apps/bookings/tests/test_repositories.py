"""Tests for the Django booking repositories."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.db import IntegrityError
from django.test import TestCase
from django.utils import timezone

from apps.bookings.application.command_handlers import CreateBookingCommand, CreateBookingHandler
from apps.bookings.domain.entities import Booking, BookingStatus, Requester
from apps.bookings.domain.exceptions import SlotAlreadyBooked, StartInPast, StorageFailure
from apps.bookings.infrastructure.repositories import DjangoBookingRepository, DjangoSlotRepository
from apps.bookings.models import Booking as BookingModel
from apps.parking.models import Slot
from apps.users.models import User
from shared.application.message_bus import message_bus
from shared.domain.value_objects import TimeRange


class RepositoryTests(TestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(email="resident@example.com", password="ResidentPass123")
        self.slot = Slot.objects.create(slot_number="B-12", price_per_hour=Decimal("2.50"))
        self.requester = Requester(id=self.user.pk)
        self.slots = DjangoSlotRepository()
        self.repo = DjangoBookingRepository()
        self.day = (timezone.now() + timedelta(days=2)).replace(hour=0, minute=0, second=0, microsecond=0)

    def at(self, hour: int, minute: int = 0):
        return self.day + timedelta(hours=hour, minutes=minute)

    def add(self, start, end) -> Booking:
        booking = Booking.admit(self.requester, self.slot.to_domain(), TimeRange(start, end))
        self.repo.add(booking)
        return booking

    def test_slot_lookup(self) -> None:
        slot = self.slots.get(self.slot.pk)
        self.assertEqual(slot.slot_number, "B-12")
        self.assertIsNone(slot.owner_id)
        self.assertIsNone(self.slots.get(self.slot.pk + 1))
        self.assertIsNone(self.slots.get("not-a-number"))

    def test_add_and_load(self) -> None:
        booking = self.add(self.at(9), self.at(11))

        loaded = self.repo.get_by_id(booking.id)
        self.assertEqual(loaded, booking)
        self.assertEqual(loaded.period, TimeRange(self.at(9), self.at(11)))
        self.assertEqual(loaded.status, BookingStatus.CONFIRMED)
        self.assertIsNone(self.repo.get_by_id("not-a-uuid"))

    def test_overlap_query_is_half_open(self) -> None:
        booking = self.add(self.at(9), self.at(11))

        self.assertEqual(self.repo.find_overlapping(self.slot.pk, TimeRange(self.at(11), self.at(13))), [])
        self.assertEqual(self.repo.find_overlapping(self.slot.pk, TimeRange(self.at(7), self.at(9))), [])
        self.assertEqual(
            self.repo.find_overlapping(self.slot.pk, TimeRange(self.at(10, 59), self.at(13))),
            [booking],
        )

    def test_cancelled_bookings_do_not_overlap(self) -> None:
        booking = self.add(self.at(9), self.at(11))
        booking.cancel(at=timezone.now(), cancelled_by=self.user.pk)
        self.repo.save(booking)

        self.assertEqual(self.repo.find_overlapping(self.slot.pk, TimeRange(self.at(9), self.at(11))), [])
        self.assertIsNone(self.repo.get_confirmed_for_requester(booking.id, self.user.pk))
        self.assertEqual(BookingModel.objects.get(pk=booking.id).status, "cancelled")

    def test_confirmed_lookup_is_scoped_to_requester(self) -> None:
        booking = self.add(self.at(9), self.at(11))
        self.assertEqual(self.repo.get_confirmed_for_requester(booking.id, self.user.pk), booking)
        self.assertIsNone(self.repo.get_confirmed_for_requester(booking.id, self.user.pk + 1))

    def test_start_in_past_is_refused_on_insert(self) -> None:
        start = timezone.now() - timedelta(hours=2)
        with self.assertRaises(StartInPast):
            self.add(start, start + timedelta(hours=1))
        self.assertFalse(BookingModel.objects.exists())

    def test_start_within_past_grace_is_accepted(self) -> None:
        start = timezone.now() - timedelta(minutes=30)
        self.add(start, start + timedelta(hours=1))
        self.assertEqual(BookingModel.objects.count(), 1)

    def test_exclusion_violation_maps_to_slot_already_booked(self) -> None:
        error = IntegrityError(
            'conflicting key value violates exclusion constraint "booking_no_overlap_per_slot"'
        )
        with mock.patch.object(BookingModel, "save", side_effect=error):
            with self.assertRaises(SlotAlreadyBooked):
                self.add(self.at(9), self.at(11))

    def test_other_integrity_errors_are_storage_failures(self) -> None:
        with mock.patch.object(BookingModel, "save", side_effect=IntegrityError("FOREIGN KEY constraint failed")):
            with self.assertRaises(StorageFailure):
                self.add(self.at(9), self.at(11))

    def test_updating_missing_booking_is_storage_failure(self) -> None:
        booking = Booking.admit(self.requester, self.slot.to_domain(), TimeRange(self.at(9), self.at(11)))
        with self.assertRaises(StorageFailure):
            self.repo.save(booking)


class CreateBookingTransactionTests(TestCase):
    """The create handler against the real unit of work and repositories."""

    def setUp(self) -> None:
        self.user = User.objects.create_user(email="resident@example.com", password="ResidentPass123")
        self.slot = Slot.objects.create(slot_number="B-12", price_per_hour=Decimal("2.50"))
        self.handler = CreateBookingHandler(DjangoSlotRepository(), DjangoBookingRepository())
        start = (timezone.now() + timedelta(days=1)).replace(hour=9, minute=0, second=0, microsecond=0)
        self.command = CreateBookingCommand(
            requester=Requester(id=self.user.pk),
            slot_id=self.slot.pk,
            start_time=start,
            end_time=start + timedelta(hours=2),
        )

    def test_accepted_booking_publishes_after_commit(self) -> None:
        with mock.patch.object(message_bus, "publish_events") as publish:
            with self.captureOnCommitCallbacks(execute=True) as callbacks:
                admission = self.handler.handle(self.command)

        self.assertEqual(len(callbacks), 1)
        [events] = publish.call_args.args
        self.assertEqual([event.booking_id for event in events], [admission.booking.id])
        self.assertEqual(BookingModel.objects.get().total_price, Decimal("5.00"))

    def test_exclusion_violation_rolls_back_without_events(self) -> None:
        error = IntegrityError(
            'conflicting key value violates exclusion constraint "booking_no_overlap_per_slot"'
        )
        with mock.patch.object(message_bus, "publish_events") as publish:
            with self.captureOnCommitCallbacks(execute=True) as callbacks:
                with mock.patch.object(BookingModel, "save", side_effect=error):
                    with self.assertRaises(SlotAlreadyBooked):
                        self.handler.handle(self.command)

        self.assertEqual(callbacks, [])
        publish.assert_not_called()
        self.assertFalse(BookingModel.objects.exists())
