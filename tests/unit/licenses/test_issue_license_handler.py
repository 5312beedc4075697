"""
Unit tests for IssueLicenseHandler.
"""
import asyncio

import pytest

from activations.application.handlers.verify_license_handler import VerifyLicenseHandler
from activations.application.queries.verify_license import VerifyLicenseQuery
from core.domain.events import EventHandler
from core.domain.exceptions import (
    InvalidInputError,
    KeyGenerationError,
    LicenseKeyCollisionError,
    LicenseNotFoundError,
    StoreUnavailableError,
)
from core.infrastructure.events import InMemoryEventBus
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.domain.events import LicenseIssued
from licenses.domain.license import License
from licenses.domain.license_key import LICENSE_KEY_PATTERN

EXISTING_KEY = "TEST-00000000-00000000-00000001"
FRESH_KEY = "TEST-00000000-00000000-00000002"


class RecordingHandler(EventHandler):
    """Handler that keeps every event it sees."""

    def __init__(self):
        self.events = []

    async def handle(self, event):
        self.events.append(event)


@pytest.fixture
def issued_events(monkeypatch):
    """Capture LicenseIssued events on a private bus."""
    bus = InMemoryEventBus()
    recorder = RecordingHandler()
    bus.subscribe(LicenseIssued, recorder)
    monkeypatch.setattr(
        "licenses.application.handlers.issue_license_handler.event_bus", bus
    )
    return recorder.events


def _keys(*keys):
    """Key generator returning the given keys in order."""
    sequence = iter(keys)
    return lambda prefix: next(sequence)


@pytest.mark.asyncio
class TestIssueLicenseHandler:
    """Tests for IssueLicenseHandler."""

    async def test_issue_persists_pending_license(self, memory_repository, issued_events):
        """Test a key is generated and stored as pending."""
        handler = IssueLicenseHandler(license_repository=memory_repository)

        result = await handler.handle(IssueLicenseCommand(product="test_product", prefix="TEST"))

        assert LICENSE_KEY_PATTERN.match(result.license_key)
        assert result.persisted
        assert result.attempts == 1
        stored = memory_repository.licenses[result.license_key]
        assert stored.is_pending
        assert stored.product == "test_product"
        assert [e.license_key for e in issued_events] == [result.license_key]
        assert issued_events[0].persisted

    async def test_two_issues_are_distinct(self, memory_repository, issued_events):
        """Test two issuances yield two stored keys."""
        handler = IssueLicenseHandler(license_repository=memory_repository)
        command = IssueLicenseCommand(product="test_product", prefix="TEST")

        first = await handler.handle(command)
        second = await handler.handle(command)

        assert first.license_key != second.license_key
        assert len(memory_repository.licenses) == 2

    async def test_collision_retries_with_fresh_key(self, memory_repository, issued_events):
        """Test a duplicate key triggers a retry with a new key."""
        memory_repository.licenses[EXISTING_KEY] = License.create(EXISTING_KEY)
        handler = IssueLicenseHandler(
            license_repository=memory_repository,
            key_generator=_keys(EXISTING_KEY, FRESH_KEY),
        )

        result = await handler.handle(IssueLicenseCommand(product="p", prefix="TEST"))

        assert result.license_key == FRESH_KEY
        assert result.persisted
        assert result.attempts == 2
        assert memory_repository.insert_calls == [EXISTING_KEY, FRESH_KEY]
        assert memory_repository.licenses[FRESH_KEY].is_pending

    async def test_collision_exhaustion(self, memory_repository, issued_events):
        """Test every attempt colliding raises LicenseKeyCollisionError."""
        memory_repository.licenses[EXISTING_KEY] = License.create(EXISTING_KEY)
        handler = IssueLicenseHandler(
            license_repository=memory_repository,
            key_generator=lambda prefix: EXISTING_KEY,
            max_attempts=3,
        )

        with pytest.raises(LicenseKeyCollisionError):
            await handler.handle(IssueLicenseCommand(product="p", prefix="TEST"))

        assert len(memory_repository.insert_calls) == 3
        assert issued_events == []

    async def test_at_least_one_retry(self, memory_repository, issued_events):
        """Test max_attempts below two still retries once."""
        memory_repository.licenses[EXISTING_KEY] = License.create(EXISTING_KEY)
        handler = IssueLicenseHandler(
            license_repository=memory_repository,
            key_generator=_keys(EXISTING_KEY, FRESH_KEY),
            max_attempts=1,
        )

        result = await handler.handle(IssueLicenseCommand(product="p", prefix="TEST"))

        assert result.license_key == FRESH_KEY

    async def test_invalid_prefix(self, memory_repository, issued_events):
        """Test a malformed prefix raises InvalidInputError."""
        handler = IssueLicenseHandler(license_repository=memory_repository)

        with pytest.raises(InvalidInputError):
            await handler.handle(IssueLicenseCommand(product="p", prefix="NOT VALID"))

        assert memory_repository.insert_calls == []

    async def test_entropy_failure(self, memory_repository, issued_events):
        """Test a random source failure surfaces as KeyGenerationError."""

        def broken(prefix):
            raise KeyGenerationError()

        handler = IssueLicenseHandler(license_repository=memory_repository, key_generator=broken)

        with pytest.raises(KeyGenerationError):
            await handler.handle(IssueLicenseCommand(product="p", prefix="TEST"))

    async def test_store_unavailable(self, unavailable_repository, issued_events):
        """Test a store outage raises StoreUnavailableError."""
        handler = IssueLicenseHandler(license_repository=unavailable_repository)

        with pytest.raises(StoreUnavailableError):
            await handler.handle(IssueLicenseCommand(product="p", prefix="TEST"))

        assert issued_events == []

    async def test_store_unavailable_temporary_key(self, unavailable_repository, issued_events):
        """Test temporary keys are returned unsaved and never verify."""
        handler = IssueLicenseHandler(license_repository=unavailable_repository)

        result = await handler.handle(
            IssueLicenseCommand(product="p", prefix="TEST", allow_temporary=True)
        )

        assert LICENSE_KEY_PATTERN.match(result.license_key)
        assert not result.persisted
        assert not issued_events[0].persisted

        # Store comes back; the temporary key was never saved
        unavailable_repository.fail_with = None
        verify = VerifyLicenseHandler(license_repository=unavailable_repository)
        with pytest.raises(LicenseNotFoundError):
            await verify.handle(
                VerifyLicenseQuery(license_key=result.license_key, device_id="device-1")
            )

    async def test_store_timeout(self, settings, slow_repository, issued_events):
        """Test a store slower than the timeout raises StoreUnavailableError."""
        settings.LICENSE_STORE_TIMEOUT_SECONDS = 0.05
        handler = IssueLicenseHandler(license_repository=slow_repository)

        with pytest.raises(StoreUnavailableError):
            await handler.handle(IssueLicenseCommand(product="p", prefix="TEST"))

    async def test_timed_out_insert_is_not_returned(
        self, settings, late_insert_repository, issued_events
    ):
        """Test a key whose insert landed late is never handed out as temporary."""
        settings.LICENSE_STORE_TIMEOUT_SECONDS = 0.05
        repository = late_insert_repository
        handler = IssueLicenseHandler(
            license_repository=repository,
            key_generator=_keys(EXISTING_KEY, FRESH_KEY),
        )

        result = await handler.handle(
            IssueLicenseCommand(product="p", prefix="TEST", allow_temporary=True)
        )
        await asyncio.gather(*repository.inserts)

        assert not result.persisted
        assert result.license_key == FRESH_KEY
        assert repository.insert_calls == [EXISTING_KEY]
        assert EXISTING_KEY in repository.licenses
        assert issued_events[0].license_key == FRESH_KEY

        verify = VerifyLicenseHandler(license_repository=repository)
        with pytest.raises(LicenseNotFoundError):
            await verify.handle(VerifyLicenseQuery(license_key=FRESH_KEY, device_id="device-1"))
