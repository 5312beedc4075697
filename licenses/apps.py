"""
App configuration for the licenses app.
"""

from django.apps import AppConfig


class LicensesConfig(AppConfig):
    """App configuration for licenses."""

    name = "licenses"
    verbose_name = "Licenses"

    def ready(self):
        """Load ORM models kept under infrastructure/."""
        from licenses.infrastructure import models  # noqa: F401
