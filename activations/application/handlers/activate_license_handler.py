"""
ActivateLicenseHandler.

Handler for activating a license.
"""

import logging

from activations.application.commands.activate_license import ActivateLicenseCommand
from activations.application.dto.activation_dto import ActivateLicenseResponseDTO
from activations.domain.events import LicenseActivated
from activations.domain.services import ActivationOutcome, DeviceBindingService
from core.domain.exceptions import InvalidInputError
from core.domain.value_objects import DeviceId
from core.infrastructure.event_handlers import mask_license_key
from core.infrastructure.events import event_bus
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class ActivateLicenseHandler:
    """Handler for ActivateLicenseCommand."""

    def __init__(self, license_repository: LicenseRepository):
        """Initialize handler with repository."""
        self.license_repository = license_repository

    async def handle(self, command: ActivateLicenseCommand) -> ActivateLicenseResponseDTO:
        """
        Handle activate license command.

        Args:
            command: ActivateLicenseCommand

        Returns:
            ActivateLicenseResponseDTO with activation details

        Raises:
            InvalidInputError: If key or device is missing
            LicenseNotFoundError: If the key is unknown
            DeviceConflictError: If bound to another device
        """
        if not command.license_key or not command.device_id:
            raise InvalidInputError("License key and device ID are required")
        try:
            DeviceId(command.device_id)
        except ValueError as e:
            raise InvalidInputError(str(e)) from e

        license, outcome = await DeviceBindingService.activate(
            license_key=command.license_key,
            device_id=command.device_id,
            repository=self.license_repository,
        )

        if outcome is ActivationOutcome.ALREADY_ACTIVE_SAME_DEVICE:
            logger.info(
                "License %s already active on this device", mask_license_key(license.license_key)
            )
            return ActivateLicenseResponseDTO(
                license_key=license.license_key,
                device_id=license.device_id,
                activation_date=license.activation_date,
                already_activated=True,
                message="License is already activated on this device",
            )

        await event_bus.publish(
            LicenseActivated(
                license_key=license.license_key,
                product=license.product,
                device_id=license.device_id,
                occurred_at=license.activation_date,
            )
        )

        return ActivateLicenseResponseDTO(
            license_key=license.license_key,
            device_id=license.device_id,
            activation_date=license.activation_date,
            already_activated=False,
            message="License activated successfully",
        )
