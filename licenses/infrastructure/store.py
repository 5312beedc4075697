"""
License store selection.

LICENSE_STORE_BACKEND picks the adapter: "database" (Django ORM, default)
or "file" (single JSON document at LICENSE_STORE_FILE).
"""
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from licenses.infrastructure.repositories.django_license_repository import (
    DjangoLicenseRepository,
)
from licenses.infrastructure.repositories.json_file_license_repository import (
    JsonFileLicenseRepository,
)
from licenses.ports.license_repository import LicenseRepository

DATABASE_BACKEND = "database"
FILE_BACKEND = "file"


def build_license_repository() -> LicenseRepository:
    """
    Build the repository configured in settings.

    Returns:
        LicenseRepository implementation

    Raises:
        ImproperlyConfigured: For an unknown backend name
    """
    backend = getattr(settings, "LICENSE_STORE_BACKEND", DATABASE_BACKEND).lower()

    if backend == DATABASE_BACKEND:
        return DjangoLicenseRepository()
    if backend == FILE_BACKEND:
        return JsonFileLicenseRepository(settings.LICENSE_STORE_FILE)

    raise ImproperlyConfigured(
        f"LICENSE_STORE_BACKEND must be '{DATABASE_BACKEND}' or '{FILE_BACKEND}', got {backend!r}"
    )
