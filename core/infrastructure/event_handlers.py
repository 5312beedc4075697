"""
Event handlers for domain events.

These handlers process domain events for side effects
like audit logging and business metrics.
"""

import logging

from activations.domain.events import LicenseActivated
from core.domain.events import DomainEvent, EventHandler
from core.metrics import licenses_activated_total, licenses_issued_total
from licenses.domain.events import LicenseIssued

logger = logging.getLogger(__name__)


def mask_license_key(license_key: str) -> str:
    """Return a loggable form of a license key."""
    return f"{license_key[:8]}..." if license_key else ""


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Writes one structured log line per domain event.
    """

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        extra = {
            "event_id": str(event.event_id),
            "event_type": event.event_type,
            "license_key": mask_license_key(event.aggregate_id),
            "occurred_at": event.occurred_at.isoformat(),
        }
        if isinstance(event, LicenseActivated):
            extra["device_id"] = event.device_id
        if isinstance(event, LicenseIssued):
            extra["persisted"] = event.persisted

        logger.info(
            "Audit log: %s - %s",
            event.event_type,
            mask_license_key(event.aggregate_id),
            extra=extra,
        )


class LicenseMetricsEventHandler(EventHandler):
    """Event handler that feeds the Prometheus business counters."""

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for metrics.

        Args:
            event: Domain event
        """
        if isinstance(event, LicenseIssued):
            licenses_issued_total.labels(
                product=event.product,
                persisted=str(event.persisted).lower(),
            ).inc()
        elif isinstance(event, LicenseActivated):
            licenses_activated_total.labels(product=event.product).inc()


def register_event_handlers():
    """Register all event handlers with the event bus."""
    from core.infrastructure.events import event_bus

    audit_handler = AuditLogEventHandler()
    metrics_handler = LicenseMetricsEventHandler()

    for event_type in (LicenseIssued, LicenseActivated):
        event_bus.subscribe(event_type, audit_handler)
        event_bus.subscribe(event_type, metrics_handler)

    logger.info("Event handlers registered")
