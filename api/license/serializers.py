"""
Serializers for license API endpoints.

Request and response bodies use camelCase keys.
"""

from rest_framework import serializers


class LicenseDeviceRequestSerializer(serializers.Serializer):
    """Serializer for activate and verify requests."""

    licenseKey = serializers.CharField(  # noqa: N815
        source="license_key", required=True, allow_blank=False, max_length=100
    )
    deviceId = serializers.CharField(  # noqa: N815
        source="device_id", required=True, allow_blank=False, max_length=500
    )


class GenerateLicenseQuerySerializer(serializers.Serializer):
    """Serializer for generate-test-license query parameters."""

    product = serializers.CharField(required=False, allow_blank=False, max_length=100)
    prefix = serializers.CharField(required=False, allow_blank=False)


class GenerateLicenseResponseSerializer(serializers.Serializer):
    """Serializer for a freshly issued key."""

    licenseKey = serializers.CharField(source="license_key")  # noqa: N815


class TemporaryLicenseResponseSerializer(GenerateLicenseResponseSerializer):
    """Serializer for a key that could not be stored."""

    persisted = serializers.BooleanField()
    message = serializers.CharField()


class ActivateLicenseResponseSerializer(serializers.Serializer):
    """Serializer for activate license response."""

    status = serializers.CharField()
    message = serializers.CharField()
    alreadyActivated = serializers.BooleanField(required=False)  # noqa: N815


class VerifyLicenseResponseSerializer(serializers.Serializer):
    """Serializer for verify license response."""

    status = serializers.CharField()
    message = serializers.CharField()


class LicenseRecordSerializer(serializers.Serializer):
    """Serializer for LicenseRecordDTO in the admin listing."""

    licenseKey = serializers.CharField(source="license_key")  # noqa: N815
    product = serializers.CharField()
    deviceId = serializers.CharField(source="device_id", allow_null=True)  # noqa: N815
    activated = serializers.BooleanField()
    activationDate = serializers.DateTimeField(  # noqa: N815
        source="activation_date", allow_null=True
    )
    expiryDate = serializers.DateTimeField(source="expiry_date", allow_null=True)  # noqa: N815
    status = serializers.CharField()
    createdAt = serializers.DateTimeField(source="created_at")  # noqa: N815
