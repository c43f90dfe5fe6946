"""
URL configuration for the clinic API.
"""
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)
from apps.core.observability.health import HealthzView, ReadyzView
from apps.core.urls import auth_urlpatterns

urlpatterns = [
    # Health checks (no auth required)
    path('healthz', HealthzView.as_view(), name='healthz'),
    path('readyz', ReadyzView.as_view(), name='readyz'),

    # Admin
    path('admin/', admin.site.urls),

    # JWT sessions
    path('api/', include(auth_urlpatterns)),

    # API (authentication required unless the view says otherwise)
    path('api/v1/', include('apps.core.urls')),  # Clinics
    path('api/v1/', include('apps.authz.urls')),  # Users, roles, permissions
    path('api/v1/', include('apps.catalog.urls')),  # Specialties, medicines, exams...
    path('api/v1/', include('apps.documents.urls')),  # Files
    path('api/v1/', include('apps.scheduling.urls')),  # Timetables, consultations
    path('api/v1/', include('apps.clinical.urls')),  # Diagnostics, prescriptions, exams

    # API Schema
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/schema/swagger-ui/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/schema/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),
]
