"""URL declarations for the users app."""

from __future__ import annotations

from django.urls import path, include  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import ProfileViewSet

router = DefaultRouter()
router.register(r'', ProfileViewSet, basename='user')

urlpatterns = [
    path('', include(router.urls)),
]
