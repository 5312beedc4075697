"""
License repository port (interface).

This defines the contract for license persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from licenses.domain.license import License


class LicenseRepository(ABC):
    """
    Abstract repository for License entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    Implementations raise StoreUnavailableError when the backend
    cannot be reached.
    """

    @abstractmethod
    async def find_by_key(self, license_key: str) -> Optional[License]:
        """
        Find a license by key string.

        Args:
            license_key: License key string

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def insert_if_absent(self, license: License) -> bool:
        """
        Insert a new license unless its key is already taken.

        Args:
            license: License entity to insert

        Returns:
            True if inserted, False if the key already exists
        """
        pass

    @abstractmethod
    async def compare_and_activate(
        self,
        license_key: str,
        device_id: str,
        activated_at: datetime,
    ) -> Optional[License]:
        """
        Bind a device to a license only if it is still not activated.

        The check and the update happen atomically with respect to
        every other call on the same key.

        Args:
            license_key: License key string
            device_id: Device to bind
            activated_at: Activation timestamp

        Returns:
            The activated License, or None if the key is unknown or
            was already activated
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[License]:
        """
        List every stored license.

        Returns:
            List of License entities, newest first
        """
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """
        Check that the store is reachable.

        Returns:
            True if the store answered
        """
        pass
