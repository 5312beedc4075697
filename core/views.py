"""
Core views for service status and health checks.
"""

from asgiref.sync import async_to_sync
from django.conf import settings
from django.http import JsonResponse
from django.utils import timezone
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from core.domain.exceptions import StoreUnavailableError
from core.infrastructure.store_calls import call_store
from licenses.infrastructure.store import build_license_repository


async def _ping_store() -> None:
    """Ping the configured license store, raising StoreUnavailableError on failure."""
    repository = build_license_repository()
    await call_store(repository.ping(), "ping")


@method_decorator(csrf_exempt, name="dispatch")
class ServiceStatusView(View):
    """Root endpoint reporting that the service is up."""

    def get(self, _request):
        """Return service status with the current server time."""
        return JsonResponse(
            {
                "status": "ok",
                "message": "License service is running",
                "timestamp": timezone.now().isoformat(),
            }
        )


@method_decorator(csrf_exempt, name="dispatch")
class HealthView(View):
    """Health check endpoint."""

    def get(self, _request):
        """Return service health status."""
        return JsonResponse({"status": "healthy", "service": "license-service"})


@method_decorator(csrf_exempt, name="dispatch")
class HealthStoreView(View):
    """License store health check endpoint."""

    def get(self, _request):
        """Check license store connectivity."""
        backend = getattr(settings, "LICENSE_STORE_BACKEND", "database")
        try:
            async_to_sync(_ping_store)()
        except StoreUnavailableError as e:
            return JsonResponse(
                {
                    "status": "unhealthy",
                    "store": backend,
                    "connected": False,
                    "error": e.message,
                },
                status=503,
            )
        return JsonResponse({"status": "healthy", "store": backend, "connected": True})


@method_decorator(csrf_exempt, name="dispatch")
class ReadyView(View):
    """Readiness check endpoint."""

    def get(self, _request):
        """Check if service is ready to accept traffic."""
        checks = {
            "store": self._check_store(),
        }

        all_healthy = all(checks.values())
        status_code = 200 if all_healthy else 503

        return JsonResponse(
            {
                "status": "ready" if all_healthy else "not_ready",
                "checks": checks,
            },
            status=status_code,
        )

    def _check_store(self) -> bool:
        """Check license store connectivity."""
        try:
            async_to_sync(_ping_store)()
            return True
        except StoreUnavailableError:
            return False
