"""
License API views.

These endpoints are used by client applications to:
- Generate test license keys
- Activate a license on a device
- Verify a license for a device
- List every license (operators only)
"""

from asgiref.sync import async_to_sync
from django.conf import settings
from django.http import Http404
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from activations.application.commands.activate_license import ActivateLicenseCommand
from activations.application.handlers.activate_license_handler import ActivateLicenseHandler
from activations.application.handlers.verify_license_handler import VerifyLicenseHandler
from activations.application.queries.verify_license import VerifyLicenseQuery
from api.license.serializers import (
    ActivateLicenseResponseSerializer,
    GenerateLicenseQuerySerializer,
    GenerateLicenseResponseSerializer,
    LicenseDeviceRequestSerializer,
    LicenseRecordSerializer,
    TemporaryLicenseResponseSerializer,
    VerifyLicenseResponseSerializer,
)
from core.infrastructure.event_handlers import mask_license_key
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.application.handlers.list_licenses_handler import ListLicensesHandler
from licenses.application.queries.list_licenses import ListLicensesQuery
from licenses.infrastructure.store import build_license_repository

tracer = get_tracer(__name__)

MISSING_FIELDS_MESSAGE = "License key and device ID are required"


def _invalid_input(message: str, fields) -> Response:
    """Build a 400 response carrying serializer field errors."""
    return Response(
        {"error": {"code": "INVALID_INPUT", "message": message, "fields": fields}},
        status=status.HTTP_400_BAD_REQUEST,
    )


class GenerateTestLicenseView(APIView):
    """View for issuing test license keys."""

    @extend_schema(
        operation_id="generate_test_license",
        summary="Generate Test License",
        description=(
            "Issue a new pending license key. When the store is unreachable and "
            "temporary keys are enabled, a key that was never stored is returned "
            "with persisted=false."
        ),
        tags=["License API"],
        parameters=[
            OpenApiParameter(
                name="product",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Product name (defaults to LICENSE_TEST_PRODUCT)",
            ),
            OpenApiParameter(
                name="prefix",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Key prefix, 1-16 characters A-Z0-9 (defaults to LICENSE_TEST_PREFIX)",
            ),
        ],
        responses={
            201: GenerateLicenseResponseSerializer,
            400: {"description": "Invalid prefix"},
            500: {"description": "Store unavailable or key generation failed"},
        },
    )
    def get(self, request: Request) -> Response:
        """Issue a test license key."""
        return async_to_sync(self._handle_generate_license)(request)

    async def _handle_generate_license(self, request: Request) -> Response:
        """Async handler for generate test license."""
        with tracer.start_as_current_span("generate_test_license") as span:
            span.set_attribute("operation", "generate_test_license")

            serializer = GenerateLicenseQuerySerializer(data=request.query_params)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return _invalid_input("Invalid query parameters", serializer.errors)

            command = IssueLicenseCommand(
                product=serializer.validated_data.get("product", settings.LICENSE_TEST_PRODUCT),
                prefix=serializer.validated_data.get("prefix", settings.LICENSE_TEST_PREFIX),
                allow_temporary=settings.LICENSE_ALLOW_TEMPORARY_KEYS,
            )
            span.set_attribute("license.product", command.product)
            span.set_attribute("license.prefix", command.prefix)

            handler = IssueLicenseHandler(license_repository=build_license_repository())
            result = await handler.handle(command)

            span.set_attribute("license.key", mask_license_key(result.license_key))
            span.set_attribute("license.persisted", result.persisted)
            span.set_attribute("license.attempts", result.attempts)
            span.set_status(Status(StatusCode.OK))

            if not result.persisted:
                response_serializer = TemporaryLicenseResponseSerializer(
                    {
                        "license_key": result.license_key,
                        "persisted": False,
                        "message": "License store unavailable; this key was not saved",
                    }
                )
                return Response(response_serializer.data, status=status.HTTP_201_CREATED)

            response_serializer = GenerateLicenseResponseSerializer(result)
            return Response(response_serializer.data, status=status.HTTP_201_CREATED)


class ActivateLicenseView(APIView):
    """View for activating licenses."""

    @extend_schema(
        operation_id="activate_license",
        summary="Activate License",
        description=(
            "Bind a pending license to a device. Repeating the call from the "
            "bound device succeeds with alreadyActivated=true."
        ),
        tags=["License API"],
        request=LicenseDeviceRequestSerializer,
        responses={
            200: ActivateLicenseResponseSerializer,
            400: {"description": "License key and device ID are required"},
            403: {"description": "Bound to another device, revoked, or expired"},
            404: {"description": "Invalid license key"},
            500: {"description": "Store unavailable"},
        },
    )
    def post(self, request: Request) -> Response:
        """Activate a license on a device."""
        return async_to_sync(self._handle_activate_license)(request)

    async def _handle_activate_license(self, request: Request) -> Response:
        """Async handler for activate license."""
        with tracer.start_as_current_span("activate_license") as span:
            span.set_attribute("operation", "activate_license")

            serializer = LicenseDeviceRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return _invalid_input(MISSING_FIELDS_MESSAGE, serializer.errors)

            command = ActivateLicenseCommand(
                license_key=serializer.validated_data["license_key"],
                device_id=serializer.validated_data["device_id"],
            )
            span.set_attribute("license.key", mask_license_key(command.license_key))

            handler = ActivateLicenseHandler(license_repository=build_license_repository())
            result = await handler.handle(command)

            data = {"status": "activated", "message": result.message}
            if result.already_activated:
                data["alreadyActivated"] = True

            span.set_attribute("license.already_activated", result.already_activated)
            span.set_status(Status(StatusCode.OK))

            response_serializer = ActivateLicenseResponseSerializer(data)
            return Response(response_serializer.data, status=status.HTTP_200_OK)


class VerifyLicenseView(APIView):
    """View for verifying licenses."""

    @extend_schema(
        operation_id="verify_license",
        summary="Verify License",
        description="Check that a license is activated for the given device. Never modifies it.",
        tags=["License API"],
        request=LicenseDeviceRequestSerializer,
        responses={
            200: VerifyLicenseResponseSerializer,
            400: {"description": "License key and device ID are required"},
            403: {"description": "Not activated, other device, revoked, or expired"},
            404: {"description": "Invalid license key"},
            500: {"description": "Store unavailable"},
        },
    )
    def post(self, request: Request) -> Response:
        """Verify a license for a device."""
        return async_to_sync(self._handle_verify_license)(request)

    async def _handle_verify_license(self, request: Request) -> Response:
        """Async handler for verify license."""
        with tracer.start_as_current_span("verify_license") as span:
            span.set_attribute("operation", "verify_license")

            serializer = LicenseDeviceRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return _invalid_input(MISSING_FIELDS_MESSAGE, serializer.errors)

            query = VerifyLicenseQuery(
                license_key=serializer.validated_data["license_key"],
                device_id=serializer.validated_data["device_id"],
            )
            span.set_attribute("license.key", mask_license_key(query.license_key))

            handler = VerifyLicenseHandler(license_repository=build_license_repository())
            result = await handler.handle(query)

            span.set_status(Status(StatusCode.OK))
            response_serializer = VerifyLicenseResponseSerializer(
                {"status": "valid", "message": result.message}
            )
            return Response(response_serializer.data, status=status.HTTP_200_OK)


class AdminLicenseListView(APIView):
    """View for listing every license record."""

    @extend_schema(
        operation_id="list_licenses",
        summary="List Licenses",
        description=(
            "Return every license record keyed by license key. Disabled unless "
            "LICENSE_ADMIN_LISTING_ENABLED is set; requires X-Admin-Token when "
            "LICENSE_ADMIN_TOKEN is configured."
        ),
        tags=["Admin API"],
        parameters=[
            OpenApiParameter(
                name="X-Admin-Token",
                type=str,
                location=OpenApiParameter.HEADER,
                required=False,
                description="Admin token (required when LICENSE_ADMIN_TOKEN is set)",
            ),
        ],
        responses={
            200: {"description": "Mapping of license key to record"},
            401: {"description": "Missing or invalid admin token"},
            404: {"description": "Listing disabled"},
        },
    )
    def get(self, request: Request) -> Response:
        """List all licenses."""
        if not settings.LICENSE_ADMIN_LISTING_ENABLED:
            raise Http404("License listing is disabled")
        return async_to_sync(self._handle_list_licenses)(request)

    async def _handle_list_licenses(self, request: Request) -> Response:
        """Async handler for list licenses."""
        with tracer.start_as_current_span("list_licenses") as span:
            span.set_attribute("operation", "list_licenses")

            handler = ListLicensesHandler(license_repository=build_license_repository())
            records = await handler.handle(ListLicensesQuery())

            span.set_attribute("license.count", len(records))
            span.set_status(Status(StatusCode.OK))

            data = {key: LicenseRecordSerializer(record).data for key, record in records.items()}
            return Response(data, status=status.HTTP_200_OK)
