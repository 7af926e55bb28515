from django.core.cache import cache
from django.db import connection
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from courses.catalog import CourseCatalog


def _check_database():
    connection.ensure_connection()
    return "ok"


def _check_cache():
    cache.set("health_check", "ok", 10)
    if cache.get("health_check") != "ok":
        raise RuntimeError("cache read/write failed")
    return "ok"


def _check_catalog():
    catalog = CourseCatalog.from_settings()
    if not len(catalog):
        raise RuntimeError("course catalog is empty")
    return f"ok ({len(catalog)} courses)"


HEALTH_CHECKS = {
    "database": _check_database,
    "cache": _check_cache,
    "course_catalog": _check_catalog,
}


class HealthCheckView(APIView):
    """
    Health check endpoint for monitoring service status.
    Checks database and cache connectivity and that the course catalog loads.
    """

    permission_classes = []  # Public endpoint
    authentication_classes = []

    def get(self, request):
        health_status = {"status": "healthy", "service": "skillvergence-core", "checks": {}}

        for name, check in HEALTH_CHECKS.items():
            try:
                health_status["checks"][name] = check()
            except Exception as e:
                health_status["status"] = "unhealthy"
                health_status["checks"][name] = f"error: {str(e)}"

        status_code = (
            status.HTTP_200_OK
            if health_status["status"] == "healthy"
            else status.HTTP_503_SERVICE_UNAVAILABLE
        )
        return Response(health_status, status=status_code)
