"""
Flat-file implementation of LicenseRepository port.

All licenses live in a single JSON object keyed by license key:

    {
        "TEST-AABBCCDD-11223344-55667788": {
            "licenseKey": "TEST-AABBCCDD-11223344-55667788",
            "product": "test_product",
            "deviceId": null,
            "activated": false,
            "activationDate": null,
            "expiryDate": null,
            "status": "pending",
            "createdAt": "2024-01-01T00:00:00+00:00"
        }
    }

Every read-modify-write of the document runs under a lock shared by all
repositories pointing at the same file, and each write replaces the file
atomically. The lock is per process; run a single worker on this backend.
"""
import contextlib
import json
import os
import tempfile
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Union

from asgiref.sync import sync_to_async

from core.domain.exceptions import StoreUnavailableError
from core.domain.value_objects import LicenseStatus
from licenses.domain.license import License
from licenses.ports.license_repository import LicenseRepository

_locks: Dict[Path, threading.RLock] = {}
_locks_guard = threading.Lock()

# File calls never run on the request thread, so a caller that times out
# is released while a hung read or write is still in progress.
_file_executor = ThreadPoolExecutor(max_workers=8, thread_name_prefix="license-file-store")


def _off_request_thread(func):
    """Wrap a blocking repository method as a coroutine on the file executor."""
    return sync_to_async(func, thread_sensitive=False, executor=_file_executor)


def _lock_for(path: Path) -> threading.RLock:
    """Return the process-wide lock for a store file."""
    with _locks_guard:
        return _locks.setdefault(path, threading.RLock())


def _format_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        raise ValueError(f"Timestamp without timezone: {value!r}")
    return parsed


class JsonFileLicenseRepository(LicenseRepository):
    """
    JSON file implementation of LicenseRepository.

    Args:
        path: Location of the JSON document; created on first write
    """

    def __init__(self, path: Union[str, Path]):
        """Initialize repository for a store file."""
        self.path = Path(path).resolve()
        self._lock = _lock_for(self.path)

    def _to_domain(self, record: dict) -> License:
        """
        Convert a stored record to a domain entity.

        Args:
            record: Decoded JSON record

        Returns:
            License domain entity

        Raises:
            StoreUnavailableError: If the record is malformed
        """
        try:
            if not record.get("createdAt"):
                raise ValueError("Record has no creation timestamp")
            return License(
                license_key=record["licenseKey"],
                product=record.get("product") or "default_product",
                device_id=record.get("deviceId"),
                activated=bool(record.get("activated", False)),
                activation_date=_parse_datetime(record.get("activationDate")),
                expiry_date=_parse_datetime(record.get("expiryDate")),
                status=LicenseStatus(record.get("status", LicenseStatus.PENDING.value)),
                created_at=_parse_datetime(record["createdAt"]),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise StoreUnavailableError(f"License file holds a corrupt record: {e!r}") from e

    def _to_record(self, license: License) -> dict:
        """
        Convert a domain entity to a JSON record.

        Args:
            license: License domain entity

        Returns:
            JSON-serializable dictionary
        """
        return {
            "licenseKey": license.license_key,
            "product": license.product,
            "deviceId": license.device_id,
            "activated": license.activated,
            "activationDate": _format_datetime(license.activation_date),
            "expiryDate": _format_datetime(license.expiry_date),
            "status": license.status.value,
            "createdAt": _format_datetime(license.created_at),
        }

    def _read(self) -> Dict[str, dict]:
        """Load the whole document; a missing file is an empty store."""
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StoreUnavailableError(f"Cannot read license file: {e}") from e
        except ValueError as e:
            raise StoreUnavailableError(f"License file is corrupt: {e}") from e

        if not isinstance(data, dict):
            raise StoreUnavailableError("License file must contain a JSON object")
        return data

    def _write(self, data: Dict[str, dict]) -> None:
        """Replace the document atomically."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, self.path)
            except BaseException:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise StoreUnavailableError(f"Cannot write license file: {e}") from e

    @_off_request_thread
    def find_by_key(self, license_key: str) -> Optional[License]:
        """
        Find a license by key string.

        Args:
            license_key: License key string

        Returns:
            License entity or None if not found
        """
        with self._lock:
            record = self._read().get(license_key)
        return self._to_domain(record) if record else None

    @_off_request_thread
    def insert_if_absent(self, license: License) -> bool:
        """
        Insert a new license unless its key is already taken.

        Args:
            license: License entity to insert

        Returns:
            True if inserted, False if the key already exists
        """
        with self._lock:
            data = self._read()
            if license.license_key in data:
                return False
            data[license.license_key] = self._to_record(license)
            self._write(data)
        return True

    @_off_request_thread
    def compare_and_activate(
        self,
        license_key: str,
        device_id: str,
        activated_at: datetime,
    ) -> Optional[License]:
        """
        Bind a device to a license only if it is still not activated.

        Args:
            license_key: License key string
            device_id: Device to bind
            activated_at: Activation timestamp

        Returns:
            The activated License, or None if the precondition failed
        """
        with self._lock:
            data = self._read()
            record = data.get(license_key)
            if not record:
                return None
            current = self._to_domain(record)
            if current.activated:
                return None
            activated = current.activate(device_id, activated_at)
            data[license_key] = self._to_record(activated)
            self._write(data)
        return activated

    @_off_request_thread
    def list_all(self) -> List[License]:
        """
        List every stored license.

        Returns:
            List of License entities, newest first
        """
        with self._lock:
            records = list(self._read().values())
        licenses = [self._to_domain(record) for record in records]
        return sorted(licenses, key=lambda license: license.created_at, reverse=True)

    @_off_request_thread
    def ping(self) -> bool:
        """
        Check that the store file is readable and its directory writable.

        Returns:
            True if the store is usable
        """
        with self._lock:
            self._read()
        directory = self.path.parent
        while not directory.exists() and directory != directory.parent:
            directory = directory.parent
        if not os.access(directory, os.W_OK):
            raise StoreUnavailableError(f"License directory is not writable: {directory}")
        return True
