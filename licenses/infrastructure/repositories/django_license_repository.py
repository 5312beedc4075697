"""
Django implementation of LicenseRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import contextlib
from datetime import datetime
from typing import Iterator, List, Optional

from asgiref.sync import sync_to_async
from django.db import IntegrityError, InterfaceError, OperationalError, transaction

from core.domain.exceptions import StoreUnavailableError
from core.domain.value_objects import LicenseStatus
from licenses.domain.license import License
from licenses.infrastructure.models import License as LicenseModel
from licenses.ports.license_repository import LicenseRepository


@contextlib.contextmanager
def _store_errors() -> Iterator[None]:
    """Translate connectivity failures into StoreUnavailableError."""
    try:
        yield
    except (OperationalError, InterfaceError) as e:
        raise StoreUnavailableError(f"Database unavailable: {e}") from e


class DjangoLicenseRepository(LicenseRepository):
    """
    Django ORM implementation of LicenseRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to Django model fields
    3. Implements activation as a single conditional UPDATE
    """

    def _to_domain(self, model: LicenseModel) -> License:
        """
        Convert Django model to domain entity.

        Args:
            model: Django License model

        Returns:
            License domain entity
        """
        return License(
            license_key=model.license_key,
            product=model.product,
            device_id=model.device_id,
            activated=model.activated,
            activation_date=model.activation_date,
            expiry_date=model.expiry_date,
            status=LicenseStatus(model.status),
            created_at=model.created_at,
        )

    def _to_fields(self, license: License) -> dict:
        """
        Convert domain entity to Django model fields.

        Args:
            license: License domain entity

        Returns:
            Field values for the License model
        """
        return {
            "license_key": license.license_key,
            "product": license.product,
            "device_id": license.device_id,
            "activated": license.activated,
            "activation_date": license.activation_date,
            "expiry_date": license.expiry_date,
            "status": license.status.value,
            "created_at": license.created_at,
        }

    @sync_to_async
    def find_by_key(self, license_key: str) -> Optional[License]:
        """
        Find a license by key string.

        Args:
            license_key: License key string

        Returns:
            License entity or None if not found
        """
        with _store_errors():
            try:
                # pylint: disable=no-member
                model = LicenseModel.objects.get(license_key=license_key)
            except LicenseModel.DoesNotExist:  # pylint: disable=no-member
                return None
        return self._to_domain(model)

    @sync_to_async
    def insert_if_absent(self, license: License) -> bool:
        """
        Insert a new license unless its key is already taken.

        Args:
            license: License entity to insert

        Returns:
            True if inserted, False if the key already exists
        """
        with _store_errors():
            try:
                with transaction.atomic():
                    # pylint: disable=no-member
                    LicenseModel.objects.create(**self._to_fields(license))
            except IntegrityError:
                return False
        return True

    @sync_to_async
    def compare_and_activate(
        self,
        license_key: str,
        device_id: str,
        activated_at: datetime,
    ) -> Optional[License]:
        """
        Bind a device to a license only if it is still not activated.

        Args:
            license_key: License key string
            device_id: Device to bind
            activated_at: Activation timestamp

        Returns:
            The activated License, or None if the precondition failed
        """
        with _store_errors(), transaction.atomic():
            # pylint: disable=no-member
            updated = LicenseModel.objects.filter(
                license_key=license_key, activated=False
            ).update(
                activated=True,
                device_id=device_id,
                activation_date=activated_at,
                status=LicenseStatus.ACTIVE.value,
            )
            if updated == 0:
                return None
            model = LicenseModel.objects.get(license_key=license_key)
        return self._to_domain(model)

    @sync_to_async
    def list_all(self) -> List[License]:
        """
        List every stored license.

        Returns:
            List of License entities, newest first
        """
        with _store_errors():
            # pylint: disable=no-member
            models = list(LicenseModel.objects.all())
        return [self._to_domain(model) for model in models]

    @sync_to_async
    def ping(self) -> bool:
        """
        Check that the database answers.

        Returns:
            True if the query ran
        """
        with _store_errors():
            # pylint: disable=no-member
            LicenseModel.objects.exists()
        return True
