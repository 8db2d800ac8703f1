"""URL configuration for the condo parking project.

The `urlpatterns` list routes URLs to views. It includes the Django admin,
the JWT token endpoints and the application-level routers of each app.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView  # type: ignore
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView  # type: ignore

from shared.infrastructure.health import healthz

# API versioning. v1 is our initial version; future versions can be added here.

urlpatterns = [
    path('admin/', admin.site.urls),
    path('healthz/', healthz, name='healthz'),
    # Token issuance is delegated to SimpleJWT
    path('api/v1/auth/token/', TokenObtainPairView.as_view(), name='token-obtain'),
    path('api/v1/auth/token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),
    # Application URLs
    path('api/v1/users/', include('apps.users.urls')),
    path('api/v1/slots/', include('apps.parking.urls')),
    path('api/v1/bookings/', include('apps.bookings.urls')),
    path('api/v1/schema/', SpectacularAPIView.as_view(), name='schema'),
]
