"""Integration tests for booking API endpoints."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.test import override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.parking.models import Slot
from apps.users.models import User


class BookingAPITests(APITestCase):
    """Covers booking, conflicts, cancellation and the admin override."""

    def setUp(self) -> None:
        self.resident = User.objects.create_user(
            email="resident@example.com",
            password="ResidentPass123",
            unit_number="4B",
        )
        self.neighbour = User.objects.create_user(
            email="neighbour@example.com",
            password="NeighbourPass123",
            unit_number="7A",
        )
        self.admin = User.objects.create_user(
            email="manager@example.com",
            password="ManagerPass123",
            role="admin",
        )
        self.shared_slot = Slot.objects.create(
            slot_number="V-01", price_per_hour=Decimal("2.50"), slot_type="visitor"
        )
        self.owned_slot = Slot.objects.create(
            slot_number="C-07", price_per_hour=Decimal("4.00"), slot_type="covered", owner=self.neighbour
        )
        self.client.force_authenticate(self.resident)
        self.list_url = reverse("booking-list")
        self.day = (timezone.now() + timedelta(days=1)).replace(hour=0, minute=0, second=0, microsecond=0)

    def _payload(self, slot: Slot, start_hour: int, end_hour: int, **extra) -> dict:
        payload = {
            "slot_id": slot.pk,
            "start_time": (self.day + timedelta(hours=start_hour)).isoformat(),
            "end_time": (self.day + timedelta(hours=end_hour)).isoformat(),
        }
        payload.update(extra)
        return payload

    def _existing_booking(self, slot: Slot, user: User, start, hours: int = 2) -> Booking:
        return Booking.objects.create(slot=slot, requester=user, start_time=start, end_time=start + timedelta(hours=hours))

    def test_resident_can_book_shared_slot(self) -> None:
        response = self.client.post(self.list_url, self._payload(self.shared_slot, 9, 13, notes="Guest car"), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["status"], "confirmed")
        self.assertEqual(response.data["slot_number"], "V-01")
        self.assertEqual(response.data["slot_type"], "visitor")
        booking = Booking.objects.get()
        self.assertEqual(booking.requester, self.resident)
        self.assertEqual(booking.notes, "Guest car")

    def test_total_price_is_computed_from_slot_rate(self) -> None:
        payload = self._payload(self.shared_slot, 9, 13, total_price="0.01")
        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["total_price"], "10.00")
        self.assertEqual(Booking.objects.get().total_price, Decimal("10.00"))

        self.client.force_authenticate(self.admin)
        owned = self.client.post(self.list_url, self._payload(self.owned_slot, 9, 10), format="json")
        self.assertEqual(owned.data["total_price"], "4.00")

    def test_prevent_double_booking_on_overlap(self) -> None:
        first = self.client.post(self.list_url, self._payload(self.shared_slot, 9, 13), format="json")
        self.assertEqual(first.status_code, status.HTTP_201_CREATED, first.data)

        self.client.force_authenticate(self.neighbour)
        conflict = self.client.post(self.list_url, self._payload(self.shared_slot, 12, 14), format="json")
        self.assertEqual(conflict.status_code, status.HTTP_409_CONFLICT, conflict.data)
        self.assertEqual(conflict.data["code"], "slot_already_booked")

        adjacent = self.client.post(self.list_url, self._payload(self.shared_slot, 13, 15), format="json")
        self.assertEqual(adjacent.status_code, status.HTTP_201_CREATED, adjacent.data)

    def test_slot_owned_by_neighbour_is_forbidden(self) -> None:
        response = self.client.post(self.list_url, self._payload(self.owned_slot, 9, 10), format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)
        self.assertEqual(response.data["code"], "slot_reserved_for_other")
        self.assertFalse(Booking.objects.exists())

    def test_admin_can_book_owned_slot(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.post(self.list_url, self._payload(self.owned_slot, 9, 10), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

    def test_rejections_are_reported_with_codes(self) -> None:
        cases = [
            (self._payload(self.shared_slot, 9, 9), status.HTTP_400_BAD_REQUEST, "invalid_range"),
            (self._payload(self.shared_slot, 9, 34), status.HTTP_400_BAD_REQUEST, "duration_out_of_bounds"),
            (
                {"slot_id": self.shared_slot.pk, "start_time": "soon", "end_time": "later"},
                status.HTTP_400_BAD_REQUEST,
                "invalid_range",
            ),
            ({**self._payload(self.shared_slot, 9, 10), "slot_id": 9999}, status.HTTP_404_NOT_FOUND, "slot_not_found"),
        ]
        for payload, expected_status, code in cases:
            with self.subTest(code=code):
                response = self.client.post(self.list_url, payload, format="json")
                self.assertEqual(response.status_code, expected_status, response.data)
                self.assertEqual(response.data["code"], code)
                self.assertIn("detail", response.data)

    def test_too_far_in_advance(self) -> None:
        start = timezone.now() + timedelta(days=31)
        payload = {
            "slot_id": self.shared_slot.pk,
            "start_time": start.isoformat(),
            "end_time": (start + timedelta(hours=1)).isoformat(),
        }
        response = self.client.post(self.list_url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "too_far_in_advance")

    def test_start_in_past_is_rejected(self) -> None:
        start = timezone.now() - timedelta(hours=3)
        payload = {
            "slot_id": self.shared_slot.pk,
            "start_time": start.isoformat(),
            "end_time": (start + timedelta(hours=2)).isoformat(),
        }
        response = self.client.post(self.list_url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "start_in_past")

    def test_slot_under_maintenance(self) -> None:
        self.shared_slot.status = "maintenance"
        self.shared_slot.save()

        response = self.client.post(self.list_url, self._payload(self.shared_slot, 9, 10), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "slot_unavailable")
        self.assertIn("maintenance", response.data["detail"])

    def test_missing_fields_fail_validation(self) -> None:
        response = self.client.post(self.list_url, {"slot_id": self.shared_slot.pk}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("start_time", response.data)

    @override_settings(BOOKING_RULES={"MAX_DURATION_HOURS": 2})
    def test_rules_follow_settings(self) -> None:
        response = self.client.post(self.list_url, self._payload(self.shared_slot, 9, 12), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "duration_out_of_bounds")

    def test_resident_sees_only_own_bookings(self) -> None:
        mine = self._existing_booking(self.shared_slot, self.resident, self.day + timedelta(hours=8))
        theirs = self._existing_booking(self.owned_slot, self.neighbour, self.day + timedelta(hours=8))

        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        ids = [item["id"] for item in response.data["results"]]
        self.assertEqual(ids, [str(mine.id)])

        detail = self.client.get(reverse("booking-detail", args=[theirs.id]))
        self.assertEqual(detail.status_code, status.HTTP_404_NOT_FOUND)

        self.client.force_authenticate(self.admin)
        response = self.client.get(self.list_url, {"slot": self.owned_slot.pk})
        self.assertEqual([item["id"] for item in response.data["results"]], [str(theirs.id)])

    def test_cancel_booking(self) -> None:
        booking = self._existing_booking(self.shared_slot, self.resident, self.day + timedelta(hours=8))

        response = self.client.post(reverse("booking-cancel", args=[booking.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "cancelled")
        booking.refresh_from_db()
        self.assertEqual(booking.status, "cancelled")
        self.assertIsNotNone(booking.cancelled_at)

        again = self.client.post(reverse("booking-cancel", args=[booking.id]))
        self.assertEqual(again.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(again.data["code"], "not_found")

    def test_cannot_cancel_neighbours_booking(self) -> None:
        booking = self._existing_booking(self.shared_slot, self.neighbour, self.day + timedelta(hours=8))
        response = self.client.post(reverse("booking-cancel", args=[booking.id]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_cancel_too_late(self) -> None:
        booking = self._existing_booking(self.shared_slot, self.resident, self.day + timedelta(hours=8))
        # Move it into the past without going through model validation
        started = timezone.now() - timedelta(hours=2)
        Booking.objects.filter(pk=booking.pk).update(start_time=started, end_time=started + timedelta(hours=3))

        response = self.client.post(reverse("booking-cancel", args=[booking.id]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "too_late_to_cancel")

    def test_admin_overrides_status(self) -> None:
        booking = self._existing_booking(self.shared_slot, self.resident, self.day + timedelta(hours=8))
        url = reverse("booking-set-status", args=[booking.id])

        forbidden = self.client.post(url, {"status": "no_show"}, format="json")
        self.assertEqual(forbidden.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.admin)
        response = self.client.post(url, {"status": "no_show"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "no_show")

        invalid = self.client.post(url, {"status": "confirmed"}, format="json")
        self.assertEqual(invalid.status_code, status.HTTP_400_BAD_REQUEST)

    def test_anonymous_requests_are_rejected(self) -> None:
        self.client.force_authenticate(None)
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
