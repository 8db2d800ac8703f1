"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin, messages

from apps.bookings.application.command_handlers import (
    AdminRequired,
    OverrideBookingStatusCommand,
    OverrideBookingStatusHandler,
)
from apps.bookings.domain.entities import BookingStatus
from apps.bookings.domain.exceptions import BookingRejected, StorageFailure
from apps.bookings.infrastructure.repositories import DjangoBookingRepository

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "slot",
        "requester",
        "status",
        "start_time",
        "end_time",
        "total_price",
        "created_at",
    )
    list_filter = ("status", "slot__slot_type", "start_time")
    search_fields = ("slot__slot_number", "requester__email", "requester__unit_number")
    readonly_fields = (
        "slot",
        "requester",
        "start_time",
        "end_time",
        "status",
        "total_price",
        "notes",
        "cancelled_at",
        "created_at",
        "updated_at",
    )
    actions = ["cancel_bookings", "mark_completed", "mark_no_show"]

    def has_add_permission(self, request):
        # Bookings are only created through the admission rules of the API
        return False

    def _override(self, request, queryset, status: BookingStatus) -> None:
        handler = OverrideBookingStatusHandler(DjangoBookingRepository())
        requester = request.user.as_requester()
        changed = 0
        for pk in queryset.values_list("pk", flat=True):
            command = OverrideBookingStatusCommand(requester=requester, booking_id=pk, status=status)
            try:
                handler.handle(command)
            except AdminRequired as exc:
                self.message_user(request, str(exc), messages.ERROR)
                return
            except (BookingRejected, StorageFailure) as exc:
                self.message_user(request, f"Booking {pk}: {exc}", messages.WARNING)
                continue
            changed += 1
        self.message_user(request, f"{changed} booking(s) set to {status.value}.", messages.SUCCESS)

    @admin.action(description="Cancel selected bookings")
    def cancel_bookings(self, request, queryset):
        self._override(request, queryset, BookingStatus.CANCELLED)

    @admin.action(description="Mark selected bookings as completed")
    def mark_completed(self, request, queryset):
        self._override(request, queryset, BookingStatus.COMPLETED)

    @admin.action(description="Mark selected bookings as no-show")
    def mark_no_show(self, request, queryset):
        self._override(request, queryset, BookingStatus.NO_SHOW)
