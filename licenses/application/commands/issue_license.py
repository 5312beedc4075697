"""
IssueLicenseCommand.

Command to issue a new pending license key.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class IssueLicenseCommand:
    """Command to issue a license key for a product."""

    product: str
    prefix: str
    expiry_date: Optional[datetime] = None
    allow_temporary: bool = False  # Return a non-persisted key if the store is down
