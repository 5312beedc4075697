"""
License DTOs for API responses.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from licenses.domain.license import License


@dataclass
class LicenseRecordDTO:
    """DTO for a stored license record."""

    license_key: str
    product: str
    device_id: Optional[str]
    activated: bool
    activation_date: Optional[datetime]
    expiry_date: Optional[datetime]
    status: str
    created_at: datetime

    @classmethod
    def from_entity(cls, license: License) -> "LicenseRecordDTO":
        """Build the DTO from a License entity."""
        return cls(
            license_key=license.license_key,
            product=license.product,
            device_id=license.device_id,
            activated=license.activated,
            activation_date=license.activation_date,
            expiry_date=license.expiry_date,
            status=license.status.value,
            created_at=license.created_at,
        )


@dataclass
class IssuedLicenseDTO:
    """DTO for issue license response."""

    license_key: str
    product: str
    persisted: bool
    attempts: int
