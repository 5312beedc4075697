"""
VerifyLicenseQuery.

Query to check that a license is activated for a device.
"""
from dataclasses import dataclass


@dataclass
class VerifyLicenseQuery:
    """Query to verify a license for a device."""

    license_key: str
    device_id: str
