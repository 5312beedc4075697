"""
License domain entity.

This is the core domain entity representing a license record.
It contains business logic and is independent of infrastructure.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from core.domain.events import utcnow
from core.domain.value_objects import DeviceId, LicenseStatus
from licenses.domain.license_key import is_well_formed

DEFAULT_PRODUCT = "default_product"


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    A license is either pending (no device) or activated (bound to exactly
    one device for the rest of its life). This is an immutable value object;
    transitions return a new instance.
    """

    license_key: str
    product: str
    device_id: Optional[str]
    activated: bool
    activation_date: Optional[datetime]
    expiry_date: Optional[datetime]
    status: LicenseStatus
    created_at: datetime

    def __post_init__(self):
        """Validate license entity."""
        if not self.license_key or len(self.license_key.strip()) == 0:
            raise ValueError("License key cannot be empty")
        if len(self.license_key) > 100:
            raise ValueError("License key too long")
        if not self.product:
            raise ValueError("Product is required")
        if self.activated and not self.device_id:
            raise ValueError("Activated license must be bound to a device")
        if not self.activated and self.device_id is not None:
            raise ValueError("Pending license cannot be bound to a device")
        if self.activated and self.activation_date is None:
            raise ValueError("Activated license must have an activation date")
        if not self.activated and self.activation_date is not None:
            raise ValueError("Pending license cannot have an activation date")

    @classmethod
    def create(
        cls,
        license_key: str,
        product: Optional[str] = None,
        expiry_date: Optional[datetime] = None,
    ) -> "License":
        """
        Create a new pending License entity.

        Args:
            license_key: Freshly generated license key
            product: Product name (defaults to DEFAULT_PRODUCT)
            expiry_date: Optional expiration datetime

        Returns:
            License entity instance
        """
        if not is_well_formed(license_key):
            raise ValueError(f"Malformed license key: {license_key!r}")
        return cls(
            license_key=license_key,
            product=product or DEFAULT_PRODUCT,
            device_id=None,
            activated=False,
            activation_date=None,
            expiry_date=expiry_date,
            status=LicenseStatus.PENDING,
            created_at=utcnow(),
        )

    @property
    def is_pending(self) -> bool:
        """True while no device has been bound."""
        return not self.activated

    def is_bound_to(self, device_id: str) -> bool:
        """
        Check whether the license is activated for a device.

        Args:
            device_id: Device identifier

        Returns:
            True if activated and bound to device_id
        """
        return self.activated and self.device_id == device_id

    def is_expired(self, current_time: Optional[datetime] = None) -> bool:
        """
        Check whether the license has expired.

        Args:
            current_time: Current time (defaults to now)

        Returns:
            True if marked expired or past its expiry date
        """
        if self.status == LicenseStatus.EXPIRED:
            return True
        if self.expiry_date:
            return self.expiry_date < (current_time or utcnow())
        return False

    @property
    def is_revoked(self) -> bool:
        """True if an operator revoked the license."""
        return self.status == LicenseStatus.REVOKED

    def activate(self, device_id: str, activated_at: Optional[datetime] = None) -> "License":
        """
        Create a new License instance bound to a device.

        Args:
            device_id: Device to bind
            activated_at: Activation timestamp (defaults to now)

        Returns:
            New License instance with activated status

        Raises:
            ValueError: If the license is already activated
        """
        if self.activated:
            raise ValueError("License is already activated")

        return replace(
            self,
            device_id=str(DeviceId(device_id)),
            activated=True,
            activation_date=activated_at or utcnow(),
            status=LicenseStatus.ACTIVE,
        )
