"""
Activation DTOs for API responses.
"""
from dataclasses import dataclass
from datetime import datetime


@dataclass
class ActivateLicenseResponseDTO:
    """DTO for activate license response."""

    license_key: str
    device_id: str
    activation_date: datetime
    already_activated: bool
    message: str


@dataclass
class VerifyLicenseResponseDTO:
    """DTO for verify license response."""

    license_key: str
    device_id: str
    product: str
    message: str
