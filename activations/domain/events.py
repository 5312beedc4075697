"""
Activation domain events.

Domain events represent something that happened in the activation domain.
"""
import uuid
from datetime import datetime
from typing import Optional

from core.domain.events import DomainEvent, utcnow


class LicenseActivated(DomainEvent):
    """Event raised when a license is bound to a device."""

    def __init__(
        self,
        license_key: str,
        product: str,
        device_id: str,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseActivated event.

        Args:
            license_key: License key that was activated
            product: Product of the license
            device_id: Device the license is now bound to
            occurred_at: When the event occurred
        """
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or utcnow(),
            aggregate_id=license_key,
            event_type="LicenseActivated",
        )
        self.license_key = license_key
        self.product = product
        self.device_id = device_id
