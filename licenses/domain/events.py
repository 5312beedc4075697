"""
License domain events.

Domain events represent something that happened in the license domain.
"""

import uuid
from datetime import datetime
from typing import Optional

from core.domain.events import DomainEvent, utcnow


class LicenseIssued(DomainEvent):
    """Event raised when a license key is issued."""

    def __init__(
        self,
        license_key: str,
        product: str,
        persisted: bool = True,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseIssued event.

        Args:
            license_key: The issued license key
            product: Product the key was issued for
            persisted: False for temporary keys that never reached the store
            occurred_at: When the event occurred
        """
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or utcnow(),
            aggregate_id=license_key,
            event_type="LicenseIssued",
        )
        self.license_key = license_key
        self.product = product
        self.persisted = persisted
