"""
IssueLicenseHandler.

Handles the issue license command.
"""

import logging
from typing import Callable, Optional

from django.conf import settings

from core.domain.exceptions import (
    InvalidInputError,
    LicenseKeyCollisionError,
    StoreUnavailableError,
)
from core.infrastructure.event_handlers import mask_license_key
from core.infrastructure.events import event_bus
from core.infrastructure.store_calls import call_store
from core.metrics import license_key_collisions_total
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.dto.license_dto import IssuedLicenseDTO
from licenses.domain.events import LicenseIssued
from licenses.domain.license import License
from licenses.domain.license_key import generate_license_key
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


class IssueLicenseHandler:
    """Handler for IssueLicenseCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        key_generator: Callable[[str], str] = generate_license_key,
        max_attempts: Optional[int] = None,
    ):
        """Initialize handler with repository and key generator."""
        self.license_repository = license_repository
        self.key_generator = key_generator
        if max_attempts is None:
            max_attempts = getattr(settings, "LICENSE_KEY_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS)
        # At least one retry after the first collision
        self.max_attempts = max(2, int(max_attempts))

    def _generate(self, prefix: str) -> str:
        try:
            return self.key_generator(prefix)
        except ValueError as e:
            raise InvalidInputError(str(e)) from e

    async def handle(self, command: IssueLicenseCommand) -> IssuedLicenseDTO:
        """
        Handle issue license command.

        Args:
            command: IssueLicenseCommand

        Returns:
            IssuedLicenseDTO with the new key

        Raises:
            InvalidInputError: If the prefix is malformed
            KeyGenerationError: If the secure random source fails
            LicenseKeyCollisionError: If every attempt collided
            StoreUnavailableError: If the store failed and temporary keys are off
        """
        for attempt in range(1, self.max_attempts + 1):
            license_key = self._generate(command.prefix)
            license = License.create(
                license_key=license_key,
                product=command.product,
                expiry_date=command.expiry_date,
            )

            try:
                inserted = await call_store(
                    self.license_repository.insert_if_absent(license), "insert_if_absent"
                )
            except StoreUnavailableError:
                if not command.allow_temporary:
                    raise
                # A timed-out insert may still land, so the submitted key is never handed out
                temporary_key = self._generate(command.prefix)
                logger.warning(
                    "License store unavailable, returning temporary key %s",
                    mask_license_key(temporary_key),
                )
                await event_bus.publish(
                    LicenseIssued(
                        license_key=temporary_key, product=license.product, persisted=False
                    )
                )
                return IssuedLicenseDTO(
                    license_key=temporary_key,
                    product=license.product,
                    persisted=False,
                    attempts=attempt,
                )

            if inserted:
                await event_bus.publish(
                    LicenseIssued(license_key=license_key, product=license.product)
                )
                return IssuedLicenseDTO(
                    license_key=license_key,
                    product=license.product,
                    persisted=True,
                    attempts=attempt,
                )

            license_key_collisions_total.inc()
            logger.warning(
                "License key collision on %s (attempt %d of %d)",
                mask_license_key(license_key),
                attempt,
                self.max_attempts,
            )

        raise LicenseKeyCollisionError(
            f"Could not generate a unique license key after {self.max_attempts} attempts"
        )
