"""
VerifyLicenseHandler.

Handler for verifying a license on a device.
"""

from activations.application.dto.activation_dto import VerifyLicenseResponseDTO
from activations.application.queries.verify_license import VerifyLicenseQuery
from activations.domain.services import DeviceBindingService
from core.domain.exceptions import DomainException, InvalidInputError
from core.metrics import license_verifications_total
from licenses.ports.license_repository import LicenseRepository


class VerifyLicenseHandler:
    """Handler for VerifyLicenseQuery."""

    def __init__(self, license_repository: LicenseRepository):
        """Initialize handler with repository."""
        self.license_repository = license_repository

    async def handle(self, query: VerifyLicenseQuery) -> VerifyLicenseResponseDTO:
        """
        Handle verify license query.

        Args:
            query: VerifyLicenseQuery

        Returns:
            VerifyLicenseResponseDTO if the license is valid for the device

        Raises:
            InvalidInputError: If key or device is missing
            LicenseNotFoundError: If the key is unknown
            LicenseNotActivatedError: If no device is bound yet
            DeviceMismatchError: If bound to another device
        """
        if not query.license_key or not query.device_id:
            raise InvalidInputError("License key and device ID are required")

        try:
            license = await DeviceBindingService.verify(
                license_key=query.license_key,
                device_id=query.device_id,
                repository=self.license_repository,
            )
        except DomainException as e:
            license_verifications_total.labels(result=e.code.lower()).inc()
            raise

        license_verifications_total.labels(result="valid").inc()
        return VerifyLicenseResponseDTO(
            license_key=license.license_key,
            device_id=license.device_id,
            product=license.product,
            message="License is valid",
        )
