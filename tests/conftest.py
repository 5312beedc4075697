"""
Pytest configuration and shared fixtures.
"""

import asyncio
import threading
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import pytest
from asgiref.sync import async_to_sync
from django.db import connections

from core.domain.exceptions import StoreUnavailableError
from licenses.domain.license import License
from licenses.domain.license_key import generate_license_key
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from licenses.infrastructure.repositories.json_file_license_repository import (
    JsonFileLicenseRepository,
)
from licenses.ports.license_repository import LicenseRepository


class InMemoryLicenseRepository(LicenseRepository):
    """
    Dict-backed LicenseRepository for handler tests.

    Args:
        fail_with: Exception raised by every call, to simulate an outage
        delay: Seconds each call sleeps before answering
    """

    def __init__(self, fail_with: Optional[Exception] = None, delay: float = 0.0):
        self.licenses: Dict[str, License] = {}
        self.fail_with = fail_with
        self.delay = delay
        self.insert_calls: List[str] = []

    async def _enter(self):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with

    async def find_by_key(self, license_key: str) -> Optional[License]:
        await self._enter()
        return self.licenses.get(license_key)

    async def insert_if_absent(self, license: License) -> bool:
        await self._enter()
        self.insert_calls.append(license.license_key)
        if license.license_key in self.licenses:
            return False
        self.licenses[license.license_key] = license
        return True

    async def compare_and_activate(
        self, license_key: str, device_id: str, activated_at: datetime
    ) -> Optional[License]:
        await self._enter()
        current = self.licenses.get(license_key)
        if current is None or current.activated:
            return None
        self.licenses[license_key] = current.activate(device_id, activated_at)
        return self.licenses[license_key]

    async def list_all(self) -> List[License]:
        await self._enter()
        return sorted(self.licenses.values(), key=lambda license: license.created_at, reverse=True)

    async def ping(self) -> bool:
        await self._enter()
        return True


class LateInsertRepository(InMemoryLicenseRepository):
    """
    Repository whose inserts land after the caller stopped waiting.

    Args:
        insert_delay: Seconds before each insert reaches the dict
    """

    def __init__(self, insert_delay: float):
        super().__init__()
        self.insert_delay = insert_delay
        self.inserts: List[asyncio.Future] = []

    async def _insert_later(self, license: License) -> bool:
        await asyncio.sleep(self.insert_delay)
        return await InMemoryLicenseRepository.insert_if_absent(self, license)

    async def insert_if_absent(self, license: License) -> bool:
        task = asyncio.ensure_future(self._insert_later(license))
        self.inserts.append(task)
        return await asyncio.shield(task)


@pytest.fixture
def memory_repository():
    """Fixture for an empty in-memory LicenseRepository."""
    return InMemoryLicenseRepository()


@pytest.fixture
def unavailable_repository():
    """Fixture for a LicenseRepository whose backend is down."""
    return InMemoryLicenseRepository(fail_with=StoreUnavailableError("connection refused"))


@pytest.fixture
def slow_repository():
    """Fixture for a LicenseRepository that answers after one second."""
    return InMemoryLicenseRepository(delay=1.0)


@pytest.fixture
def late_insert_repository():
    """Fixture for a LicenseRepository whose inserts finish after 0.2 seconds."""
    return LateInsertRepository(insert_delay=0.2)


@pytest.fixture
def json_store_path(tmp_path):
    """Fixture for a license file path inside a temp directory."""
    return tmp_path / "licenses.json"


@pytest.fixture
def json_repository(json_store_path):
    """Fixture for JsonFileLicenseRepository."""
    return JsonFileLicenseRepository(json_store_path)


@pytest.fixture
def license_repository():
    """Fixture for the Django LicenseRepository."""
    return DjangoLicenseRepository()


@pytest.fixture
def pending_license():
    """Fixture for a freshly created pending License entity."""
    return License.create(generate_license_key("TEST"), product="test_product")


@pytest.fixture
def file_store_settings(settings, json_store_path):
    """Point the application at the JSON file store."""
    settings.LICENSE_STORE_BACKEND = "file"
    settings.LICENSE_STORE_FILE = str(json_store_path)
    return settings


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


async def _await_call(func: Callable, *args: Any) -> Any:
    return await func(*args)


def run_racing_threads(
    calls: Sequence[Tuple[Callable, tuple]], timeout: float = 10.0
) -> List[Any]:
    """
    Run async calls from real threads released together by a barrier.

    Args:
        calls: (coroutine function, args) pairs, one thread each
        timeout: Seconds to wait for every thread

    Returns:
        Each call's result, or the exception it raised, in call order
    """
    barrier = threading.Barrier(len(calls))
    results: List[Any] = [None] * len(calls)

    def worker(index: int, func: Callable, args: tuple) -> None:
        try:
            barrier.wait(timeout)
            results[index] = async_to_sync(_await_call)(func, *args)
        except Exception as e:  # pylint: disable=broad-except
            results[index] = e
        finally:
            connections.close_all()

    threads = [
        threading.Thread(target=worker, args=(index, func, args))
        for index, (func, args) in enumerate(calls)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout)
    assert not any(thread.is_alive() for thread in threads)
    return results


@pytest.fixture
def race():
    """Fixture running async calls from concurrent threads."""
    return run_racing_threads
