"""
Health endpoints for load balancers and container orchestration
"""
import logging
import os
import resource
import time

from django.conf import settings
from django.db import DatabaseError, connection
from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()


def uptime_seconds() -> float:
    return round(time.monotonic() - STARTED_AT, 3)


def check_database() -> bool:
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        return True
    except DatabaseError as e:
        logger.error(f"Database health check failed: {e}")
        return False


def environment_name() -> str:
    return 'development' if settings.DEBUG else 'production'


class HealthView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]
    throttle_classes = []


class HealthCheckView(HealthView):

    def get(self, request):
        return Response({
            'success': True,
            'message': 'Service is healthy',
            'timestamp': timezone.now().isoformat(),
            'uptime': uptime_seconds(),
            'environment': environment_name(),
            'version': settings.API_VERSION,
        })


class DetailedHealthCheckView(HealthView):
    """
    Database round trip plus process resource usage. 503 when the database is down.
    """

    def get(self, request):
        started = time.monotonic()
        db_healthy = check_database()
        db_response_ms = int((time.monotonic() - started) * 1000)

        usage = resource.getrusage(resource.RUSAGE_SELF)
        cpu = os.times()

        health = {
            'status': 'healthy' if db_healthy else 'unhealthy',
            'timestamp': timezone.now().isoformat(),
            'uptime': uptime_seconds(),
            'environment': environment_name(),
            'version': settings.API_VERSION,
            'services': {
                'database': {
                    'status': 'healthy' if db_healthy else 'unhealthy',
                    'response_time': f"{db_response_ms}ms",
                },
            },
            'system': {
                # ru_maxrss is reported in kilobytes on Linux
                'memory': {'max_rss': f"{round(usage.ru_maxrss / 1024)}MB"},
                'cpu': {'user': cpu.user, 'system': cpu.system},
            },
        }
        code = status.HTTP_200_OK if db_healthy else status.HTTP_503_SERVICE_UNAVAILABLE
        return Response({'success': db_healthy, 'data': health}, status=code)


class ReadinessView(HealthView):

    def get(self, request):
        if check_database():
            return Response({
                'success': True,
                'message': 'Service is ready',
                'timestamp': timezone.now().isoformat(),
            })
        return Response(
            {
                'success': False,
                'message': 'Service is not ready',
                'timestamp': timezone.now().isoformat(),
            },
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )


class LivenessView(HealthView):

    def get(self, request):
        return Response({
            'success': True,
            'message': 'Service is alive',
            'timestamp': timezone.now().isoformat(),
        })
