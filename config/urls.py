"""
URL configuration for the Storefront API
"""
from django.conf import settings
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from api.views import health

urlpatterns = [
    # API endpoints
    path(f"api/{settings.API_VERSION}/", include('api.urls')),

    # Health probes
    path('api/health/', health.HealthCheckView.as_view(), name='health'),
    path('api/health/detailed/', health.DetailedHealthCheckView.as_view(), name='health-detailed'),
    path('api/health/ready/', health.ReadinessView.as_view(), name='health-ready'),
    path('api/health/live/', health.LivenessView.as_view(), name='health-live'),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]

handler404 = 'api.exceptions.not_found_handler'
handler500 = 'api.exceptions.server_error_handler'
