"""
Integration tests for license API endpoints.
"""

import json
import threading
import time

import pytest
from django.urls import reverse

from licenses.domain.license_key import LICENSE_KEY_PATTERN
from licenses.infrastructure.models import License
from licenses.infrastructure.repositories.json_file_license_repository import (
    JsonFileLicenseRepository,
)


def _issue(api_client, **params):
    response = api_client.get(reverse("generate-test-license"), params)
    assert response.status_code == 201
    return response.json()["licenseKey"]


def _activate(api_client, license_key, device_id):
    return api_client.post(
        reverse("activate-license"),
        {"licenseKey": license_key, "deviceId": device_id},
        format="json",
    )


def _verify(api_client, license_key, device_id):
    return api_client.post(
        reverse("verify-license"),
        {"licenseKey": license_key, "deviceId": device_id},
        format="json",
    )


@pytest.mark.django_db
@pytest.mark.integration
class TestServiceStatus:
    """Integration tests for status and health endpoints."""

    def test_root(self, api_client):
        """Test the root endpoint reports the service is up."""
        response = api_client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["message"]
        assert data["timestamp"]

    def test_health_store(self, api_client):
        """Test the store health check against the database."""
        response = api_client.get(reverse("health-store"))

        assert response.status_code == 200
        assert response.json()["connected"] is True

    def test_ready(self, api_client):
        """Test readiness reports the store check."""
        response = api_client.get(reverse("ready"))

        assert response.status_code == 200
        assert response.json()["checks"] == {"store": True}

    def test_observability_headers(self, api_client):
        """Test responses carry the correlation headers."""
        response = api_client.get("/")

        assert response["X-Correlation-ID"]
        assert response["X-Request-Status"] == "success"


@pytest.mark.django_db
@pytest.mark.integration
class TestGenerateTestLicense:
    """Integration tests for key generation."""

    def test_generate_default(self, api_client):
        """Test a TEST key is issued and stored as pending."""
        response = api_client.get(reverse("generate-test-license"))

        assert response.status_code == 201
        data = response.json()
        assert set(data) == {"licenseKey"}
        assert LICENSE_KEY_PATTERN.match(data["licenseKey"])
        assert data["licenseKey"].startswith("TEST-")
        stored = License.objects.get(license_key=data["licenseKey"])
        assert stored.product == "test_product"
        assert stored.activated is False
        assert stored.device_id is None
        assert stored.status == "pending"

    def test_generate_with_product_and_prefix(self, api_client):
        """Test product and prefix query parameters are honoured."""
        key = _issue(api_client, product="editor", prefix="pro")

        assert key.startswith("PRO-")
        assert License.objects.get(license_key=key).product == "editor"

    def test_generate_bad_prefix(self, api_client):
        """Test a malformed prefix is a 400."""
        response = api_client.get(reverse("generate-test-license"), {"prefix": "BAD-PREFIX"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_INPUT"

    def test_generate_store_unavailable(self, api_client, monkeypatch, unavailable_repository):
        """Test a store outage is a 500 without temporary keys."""
        monkeypatch.setattr(
            "api.license.views.build_license_repository", lambda: unavailable_repository
        )

        response = api_client.get(reverse("generate-test-license"))

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "STORE_UNAVAILABLE"

    def test_generate_temporary_key(
        self, api_client, settings, monkeypatch, unavailable_repository
    ):
        """Test a store outage yields an unsaved key when temporary keys are on."""
        settings.LICENSE_ALLOW_TEMPORARY_KEYS = True
        monkeypatch.setattr(
            "api.license.views.build_license_repository", lambda: unavailable_repository
        )

        response = api_client.get(reverse("generate-test-license"))

        assert response.status_code == 201
        data = response.json()
        assert data["persisted"] is False
        assert data["message"]
        assert LICENSE_KEY_PATTERN.match(data["licenseKey"])
        assert not License.objects.filter(license_key=data["licenseKey"]).exists()


@pytest.mark.django_db
@pytest.mark.integration
class TestActivateAndVerify:
    """Integration tests for activation and verification."""

    def test_full_lifecycle(self, api_client):
        """Test issue, activate, verify, mismatch and conflict."""
        key = _issue(api_client)

        response = _activate(api_client, key, "device-1")
        assert response.status_code == 200
        assert response.json() == {
            "status": "activated",
            "message": "License activated successfully",
        }

        response = _verify(api_client, key, "device-1")
        assert response.status_code == 200
        assert response.json()["status"] == "valid"

        response = _verify(api_client, key, "device-2")
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "DEVICE_MISMATCH"

        response = _activate(api_client, key, "device-2")
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "DEVICE_CONFLICT"

        stored = License.objects.get(license_key=key)
        assert stored.device_id == "device-1"
        assert stored.status == "active"

    def test_repeat_activation_same_device(self, api_client):
        """Test re-activating from the bound device is an idempotent success."""
        key = _issue(api_client)
        _activate(api_client, key, "device-1")
        first_date = License.objects.get(license_key=key).activation_date

        response = _activate(api_client, key, "device-1")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "activated"
        assert data["alreadyActivated"] is True
        assert License.objects.get(license_key=key).activation_date == first_date

    def test_verify_pending(self, api_client):
        """Test verifying before activation is refused."""
        key = _issue(api_client)

        response = _verify(api_client, key, "device-1")

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "LICENSE_NOT_ACTIVATED"

    def test_unknown_key(self, api_client):
        """Test an unknown key is a 404 for both operations."""
        key = "TEST-FFFFFFFF-FFFFFFFF-FFFFFFFF"

        for response in (_activate(api_client, key, "device-1"), _verify(api_client, key, "d")):
            assert response.status_code == 404
            assert response.json()["error"] == {
                "code": "LICENSE_NOT_FOUND",
                "message": "Invalid license key",
            }

    @pytest.mark.parametrize(
        "payload",
        [{}, {"licenseKey": "TEST-FFFFFFFF-FFFFFFFF-FFFFFFFF"}, {"deviceId": "device-1"},
         {"licenseKey": "", "deviceId": "device-1"}],
    )
    def test_missing_fields(self, api_client, payload):
        """Test missing or empty fields are a 400."""
        for name in ("activate-license", "verify-license"):
            response = api_client.post(reverse(name), payload, format="json")

            assert response.status_code == 400
            error = response.json()["error"]
            assert error["code"] == "INVALID_INPUT"
            assert error["message"] == "License key and device ID are required"
            assert error["fields"]

    def test_malformed_json(self, api_client):
        """Test an unparseable body is a 400."""
        response = api_client.post(
            reverse("activate-license"), "{not json", content_type="application/json"
        )

        assert response.status_code == 400

    def test_revoked_license(self, api_client):
        """Test a license revoked by an operator is refused."""
        key = _issue(api_client)
        License.objects.filter(license_key=key).update(status="revoked")

        response = _activate(api_client, key, "device-1")

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "LICENSE_REVOKED"


@pytest.mark.django_db
@pytest.mark.integration
class TestAdminLicenseListing:
    """Integration tests for the admin listing."""

    def test_listing(self, api_client):
        """Test every license is returned keyed by license key."""
        key = _issue(api_client)
        _activate(api_client, key, "device-1")

        response = api_client.get(reverse("admin-list-licenses"))

        assert response.status_code == 200
        record = response.json()[key]
        assert record["licenseKey"] == key
        assert record["deviceId"] == "device-1"
        assert record["activated"] is True
        assert record["activationDate"]
        assert record["status"] == "active"
        assert record["product"] == "test_product"

    def test_listing_disabled(self, api_client, settings):
        """Test the listing is hidden when disabled."""
        settings.LICENSE_ADMIN_LISTING_ENABLED = False

        response = api_client.get(reverse("admin-list-licenses"))

        assert response.status_code == 404

    def test_listing_requires_token(self, api_client, settings):
        """Test the admin token is enforced when configured."""
        settings.LICENSE_ADMIN_TOKEN = "s3cret"
        url = reverse("admin-list-licenses")

        assert api_client.get(url).status_code == 401
        assert api_client.get(url, HTTP_X_ADMIN_TOKEN="wrong").status_code == 401
        assert api_client.get(url, HTTP_X_ADMIN_TOKEN="s3cret").status_code == 200


@pytest.mark.django_db
@pytest.mark.integration
def test_file_backend_lifecycle(api_client, file_store_settings, json_store_path):
    """Test the API runs end to end on the JSON file store."""
    key = _issue(api_client)

    assert _activate(api_client, key, "device-1").status_code == 200
    assert _verify(api_client, key, "device-1").status_code == 200

    document = json.loads(json_store_path.read_text(encoding="utf-8"))
    assert document[key]["deviceId"] == "device-1"
    assert not License.objects.filter(license_key=key).exists()


@pytest.mark.django_db
@pytest.mark.integration
class TestFileStoreTimeouts:
    """Integration tests for a slow or hung JSON file store."""

    def test_hung_read_answers_within_timeout(self, api_client, file_store_settings, monkeypatch):
        """Test a hung store read releases the caller after the store timeout."""
        file_store_settings.LICENSE_STORE_TIMEOUT_SECONDS = 0.2
        release = threading.Event()
        original_read = JsonFileLicenseRepository._read

        def hung_read(self):
            release.wait(5)
            return original_read(self)

        monkeypatch.setattr(JsonFileLicenseRepository, "_read", hung_read)

        started = time.monotonic()
        try:
            response = _verify(api_client, "TEST-00000000-00000000-00000001", "device-1")
        finally:
            release.set()
        elapsed = time.monotonic() - started

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "STORE_UNAVAILABLE"
        assert elapsed < 1.5

    def test_late_write_does_not_leak_temporary_key(
        self, api_client, file_store_settings, json_store_path, monkeypatch
    ):
        """Test a temporary key is not the one a timed-out write later saved."""
        file_store_settings.LICENSE_STORE_TIMEOUT_SECONDS = 0.1
        file_store_settings.LICENSE_ALLOW_TEMPORARY_KEYS = True
        written = threading.Event()
        original_write = JsonFileLicenseRepository._write

        def slow_write(self, data):
            time.sleep(0.5)
            original_write(self, data)
            written.set()

        monkeypatch.setattr(JsonFileLicenseRepository, "_write", slow_write)

        response = api_client.get(reverse("generate-test-license"))

        assert response.status_code == 201
        data = response.json()
        assert data["persisted"] is False
        assert written.wait(5)

        key = data["licenseKey"]
        document = json.loads(json_store_path.read_text(encoding="utf-8"))
        assert len(document) == 1
        assert key not in document
        assert _activate(api_client, key, "device-1").status_code == 404
        assert _verify(api_client, key, "device-1").status_code == 404
