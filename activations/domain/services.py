"""
Activation domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""

import enum
from datetime import datetime
from typing import Optional, Tuple

from core.domain.events import utcnow
from core.domain.exceptions import (
    DeviceConflictError,
    DeviceMismatchError,
    LicenseNotActivatedError,
    LicenseNotFoundError,
)
from core.infrastructure.store_calls import call_store
from licenses.domain.license import License
from licenses.domain.services import LicenseValidator
from licenses.ports.license_repository import LicenseRepository


class ActivationOutcome(enum.Enum):
    """Result of an activation request."""

    ACTIVATED = "activated"
    ALREADY_ACTIVE_SAME_DEVICE = "already_active_same_device"


class DeviceBindingService:
    """Domain service for binding licenses to devices."""

    @staticmethod
    async def _load(license_key: str, repository: LicenseRepository) -> License:
        license = await call_store(repository.find_by_key(license_key), "find_by_key")
        if license is None:
            raise LicenseNotFoundError()
        return license

    @staticmethod
    async def activate(
        license_key: str,
        device_id: str,
        repository: LicenseRepository,
        current_time: Optional[datetime] = None,
    ) -> Tuple[License, ActivationOutcome]:
        """
        Bind a pending license to a device.

        Activating again from the bound device is a no-op success.

        Args:
            license_key: License key string
            device_id: Device identifier
            repository: License repository
            current_time: Activation time (defaults to now)

        Returns:
            Tuple of the stored License and the outcome

        Raises:
            LicenseNotFoundError: If the key is unknown
            LicenseRevokedError: If the license was revoked
            LicenseExpiredError: If the license has expired
            DeviceConflictError: If bound to another device
        """
        now = current_time or utcnow()
        license = await DeviceBindingService._load(license_key, repository)
        LicenseValidator.ensure_usable(license, now)

        if license.activated:
            if license.is_bound_to(device_id):
                return license, ActivationOutcome.ALREADY_ACTIVE_SAME_DEVICE
            raise DeviceConflictError()

        activated = await call_store(
            repository.compare_and_activate(license_key, device_id, now),
            "compare_and_activate",
        )
        if activated is not None:
            return activated, ActivationOutcome.ACTIVATED

        # Lost the race to another activation
        current = await DeviceBindingService._load(license_key, repository)
        if current.is_bound_to(device_id):
            return current, ActivationOutcome.ALREADY_ACTIVE_SAME_DEVICE
        raise DeviceConflictError()

    @staticmethod
    async def verify(
        license_key: str,
        device_id: str,
        repository: LicenseRepository,
        current_time: Optional[datetime] = None,
    ) -> License:
        """
        Check that a license is activated for a device. Never writes.

        Args:
            license_key: License key string
            device_id: Device identifier
            repository: License repository
            current_time: Current time (defaults to now)

        Returns:
            The valid License

        Raises:
            LicenseNotFoundError: If the key is unknown
            LicenseRevokedError: If the license was revoked
            LicenseExpiredError: If the license has expired
            LicenseNotActivatedError: If no device is bound yet
            DeviceMismatchError: If bound to another device
        """
        license = await DeviceBindingService._load(license_key, repository)
        LicenseValidator.ensure_usable(license, current_time)

        if not license.activated:
            raise LicenseNotActivatedError()
        if not license.is_bound_to(device_id):
            raise DeviceMismatchError()
        return license
