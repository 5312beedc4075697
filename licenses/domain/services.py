"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
from datetime import datetime
from typing import Optional

from core.domain.exceptions import LicenseExpiredError, LicenseRevokedError
from licenses.domain.license import License


class LicenseValidator:
    """Domain service for license validation."""

    @staticmethod
    def ensure_usable(license: License, current_time: Optional[datetime] = None) -> None:
        """
        Reject licenses an operator revoked or that ran past their expiry.

        Args:
            license: License entity to validate
            current_time: Current time (defaults to now)

        Raises:
            LicenseRevokedError: If the license is revoked
            LicenseExpiredError: If the license is expired
        """
        if license.is_revoked:
            raise LicenseRevokedError()
        if license.is_expired(current_time):
            raise LicenseExpiredError()
