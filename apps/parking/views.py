"""Parking slot API views."""

from __future__ import annotations

import logging

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.permissions import IsAdminOrReadOnly, IsPlatformAdmin

from .filters import SlotFilterSet
from .models import Slot
from .serializers import AvailabilityQuerySerializer, OwnerAssignmentSerializer, SlotSerializer
from .services import available_slots

logger = logging.getLogger(__name__)


class SlotViewSet(viewsets.ModelViewSet):
    """Slot inventory: everyone signed in can read, administrators manage."""

    queryset = Slot.objects.select_related("owner").all()
    serializer_class = SlotSerializer
    permission_classes = [IsAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = SlotFilterSet
    ordering_fields = ["slot_number", "slot_type", "status"]

    def perform_create(self, serializer):  # type: ignore
        slot = serializer.save()
        logger.info(f"Slot {slot.slot_number} created by {self.request.user.pk}")

    def perform_destroy(self, instance):  # type: ignore
        logger.info(f"Slot {instance.slot_number} deleted by {self.request.user.pk}")
        instance.delete()

    @action(
        detail=True,
        methods=["post"],
        url_path="owner",
        permission_classes=[IsPlatformAdmin],
        serializer_class=OwnerAssignmentSerializer,
    )
    def assign_owner(self, request, pk=None):
        """Assign the slot to a resident, or clear the owner with `null`."""
        slot = self.get_object()
        serializer = OwnerAssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        slot.owner = serializer.validated_data["owner"]
        slot.save(update_fields=["owner", "updated_at"])
        logger.info(f"Slot {slot.slot_number} owner set to {slot.owner_id}")
        return Response(SlotSerializer(slot).data)

    @action(detail=False, methods=["get"])
    def available(self, request):
        """Slots free for the `start`/`end` window given as query parameters."""
        query = AvailabilityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        queryset = available_slots(
            query.validated_data["period"],
            self.filter_queryset(self.get_queryset()),
        )
        return Response(SlotSerializer(queryset, many=True).data)
