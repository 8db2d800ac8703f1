"""Profile API views."""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import mixins, permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from .permissions import IsPlatformAdmin
from .serializers import ProfileSerializer, RoleUpdateSerializer

logger = logging.getLogger(__name__)

User = get_user_model()


class ProfileViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """Resident profiles.

    - `me` returns or updates the current user's own profile
    - listing, retrieval and role changes are for administrators only
    """

    serializer_class = ProfileSerializer
    queryset = User.objects.all()
    permission_classes = [IsPlatformAdmin]
    filterset_fields = ["role"]

    def get_permissions(self):  # type: ignore
        if self.action == "me":
            return [permissions.IsAuthenticated()]
        return super().get_permissions()

    @action(detail=False, methods=["get", "patch"])
    def me(self, request):
        """Current user's profile; email and role cannot be changed here."""
        if request.method == "GET":
            return Response(self.get_serializer(request.user).data)

        serializer = self.get_serializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    @action(detail=True, methods=["post"], url_path="role", serializer_class=RoleUpdateSerializer)
    def set_role(self, request, pk=None):
        user = self.get_object()
        serializer = RoleUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        role = serializer.validated_role()
        user.set_role(role)
        logger.info(f"Admin {request.user.pk} set role of user {user.pk} to {role.value}")
        return Response(ProfileSerializer(user).data)
