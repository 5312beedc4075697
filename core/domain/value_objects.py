"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
import re
from abc import ABC
from dataclasses import dataclass
from enum import Enum

KEY_PREFIX_PATTERN = re.compile(r"^[A-Z0-9]{1,16}$")


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True)
class KeyPrefix(ValueObject):
    """License key prefix value object (e.g. 'TEST', 'PRO')."""

    value: str

    def __post_init__(self):
        """Normalize to upper case and validate format."""
        normalized = (self.value or "").strip().upper()
        if not KEY_PREFIX_PATTERN.match(normalized):
            raise ValueError(f"Invalid license key prefix: {self.value!r}")
        object.__setattr__(self, "value", normalized)

    def __str__(self) -> str:
        """Return prefix as string."""
        return self.value


@dataclass(frozen=True)
class DeviceId(ValueObject):
    """Device identifier value object."""

    value: str

    def __post_init__(self):
        """Validate device identifier."""
        if not self.value or len(self.value.strip()) == 0:
            raise ValueError("Device identifier cannot be empty")
        if len(self.value) > 500:
            raise ValueError("Device identifier too long")

    def __str__(self) -> str:
        """Return identifier as string."""
        return self.value


class LicenseStatus(Enum):
    """License status value object."""

    PENDING = "pending"
    ACTIVE = "active"
    EXPIRED = "expired"
    REVOKED = "revoked"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value
