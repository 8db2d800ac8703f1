"""API views for the booking domain."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.application.command_handlers import (
    AdminRequired,
    CancelBookingCommand,
    CancelBookingHandler,
    CreateBookingCommand,
    CreateBookingHandler,
    OverrideBookingStatusCommand,
    OverrideBookingStatusHandler,
)
from apps.bookings.domain.exceptions import (
    BookingRejected,
    NotFound,
    SlotAlreadyBooked,
    SlotNotFound,
    SlotReservedForOther,
    StorageFailure,
)
from apps.bookings.domain.policies import is_admin
from apps.bookings.domain.rules import BookingRules
from apps.bookings.infrastructure.repositories import DjangoBookingRepository, DjangoSlotRepository
from apps.users.permissions import IsPlatformAdmin, requester_for

from .filters import BookingFilterSet
from .models import Booking
from .serializers import BookingCreateSerializer, BookingSerializer, BookingStatusSerializer

# Rejections not listed here are plain 400s
REJECTION_STATUS = {
    SlotReservedForOther: status.HTTP_403_FORBIDDEN,
    SlotNotFound: status.HTTP_404_NOT_FOUND,
    NotFound: status.HTTP_404_NOT_FOUND,
    SlotAlreadyBooked: status.HTTP_409_CONFLICT,
}


def booking_rules() -> BookingRules:
    return BookingRules.from_mapping(getattr(settings, "BOOKING_RULES", None))


def rejection_response(exc: BookingRejected | StorageFailure) -> Response:
    """Render a rejection or storage failure as ``{"code", "detail"}``."""
    if isinstance(exc, StorageFailure):
        return Response(exc.to_dict(), status=status.HTTP_503_SERVICE_UNAVAILABLE)
    return Response(exc.to_dict(), status=REJECTION_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST))


class BookingViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """Viewset for booking, cancelling and administering bookings.

    Residents see and cancel their own bookings; administrators see all of
    them and may overwrite any booking's status.
    """

    queryset = Booking.objects.select_related("slot", "requester").all()
    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = BookingFilterSet
    ordering_fields = ["start_time", "created_at"]

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BookingCreateSerializer
        if self.action == "set_status":
            return BookingStatusSerializer
        return BookingSerializer

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        requester = requester_for(self.request.user)
        if requester is None:
            return qs.none()
        if is_admin(requester):
            return qs
        return qs.filter(requester=self.request.user)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        handler = CreateBookingHandler(
            DjangoSlotRepository(),
            DjangoBookingRepository(),
            rules=booking_rules(),
        )
        command = CreateBookingCommand(
            requester=request.user.as_requester(),
            slot_id=data["slot_id"],
            start_time=data["start_time"],
            end_time=data["end_time"],
            notes=data.get("notes", ""),
        )
        try:
            admission = handler.handle(command)
        except (BookingRejected, StorageFailure) as exc:
            return rejection_response(exc)

        booking = self.get_queryset().get(pk=admission.booking.id)
        read_serializer = BookingSerializer(booking, context=self.get_serializer_context())
        return Response(read_serializer.data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        handler = CancelBookingHandler(DjangoBookingRepository(), rules=booking_rules())
        try:
            booking = handler.handle(
                CancelBookingCommand(requester=request.user.as_requester(), booking_id=pk)
            )
        except (BookingRejected, StorageFailure) as exc:
            return rejection_response(exc)

        return Response(
            BookingSerializer(self.get_queryset().get(pk=booking.id)).data,
            status=status.HTTP_200_OK,
        )

    @action(detail=True, methods=["post"], url_path="status", permission_classes=[IsPlatformAdmin])
    def set_status(self, request, pk=None):  # type: ignore
        """Administrative overwrite to cancelled, completed or no_show."""
        serializer = BookingStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        handler = OverrideBookingStatusHandler(DjangoBookingRepository())
        command = OverrideBookingStatusCommand(
            requester=request.user.as_requester(),
            booking_id=pk,
            status=serializer.validated_status(),
        )
        try:
            booking = handler.handle(command)
        except AdminRequired as exc:
            return Response({"code": "admin_required", "detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)
        except (BookingRejected, StorageFailure) as exc:
            return rejection_response(exc)

        return Response(BookingSerializer(Booking.objects.select_related("slot").get(pk=booking.id)).data)
