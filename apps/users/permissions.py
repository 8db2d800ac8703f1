"""DRF permission classes built on the booking authorization predicates."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore

from apps.bookings.domain.policies import is_admin


def requester_for(user):
    """Requester value for an authenticated user, ``None`` otherwise."""
    if user is None or not user.is_authenticated:
        return None
    return user.as_requester()


class IsPlatformAdmin(permissions.BasePermission):
    """Only users with the admin role (or superusers) are allowed."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        return is_admin(requester_for(request.user))


class IsAdminOrReadOnly(permissions.BasePermission):
    """
    Any authenticated user can read, writes require the admin role.
    """

    def has_permission(self, request, view) -> bool:  # type: ignore
        requester = requester_for(request.user)
        if requester is None:
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return is_admin(requester)
