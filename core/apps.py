"""
App configuration for the core app.
"""

import logging
import sys

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)

# Management commands that never serve requests
SKIP_SETUP_COMMANDS = {
    "migrate",
    "makemigrations",
    "collectstatic",
    "shell",
    "check",
    "createsuperuser",
    "showmigrations",
    "issue_license",
}


class CoreConfig(AppConfig):
    """App configuration for core."""

    name = "core"
    verbose_name = "Core"

    def ready(self):
        """Called when Django starts."""
        from core.infrastructure.event_handlers import register_event_handlers

        register_event_handlers()

        if not getattr(settings, "OBSERVABILITY_ENABLED", True):
            return
        if len(sys.argv) > 1 and sys.argv[1] in SKIP_SETUP_COMMANDS:
            return

        self.setup_observability()

    def setup_observability(self):
        """Setup tracing and the metrics endpoint."""
        from core.instrumentation import setup_opentelemetry

        logger.info("Setting up observability...")
        setup_opentelemetry()
        logger.info("Observability setup complete")
