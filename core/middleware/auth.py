"""
Admin token authentication middleware.

This middleware guards the admin license listing with a shared token.
"""

import hmac
import logging
from typing import Optional

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)

ADMIN_API_PREFIX = "/api/admin/"
ADMIN_TOKEN_HEADER = "X-Admin-Token"


class AdminTokenMiddleware(MiddlewareMixin):
    """
    Middleware for admin API authentication.

    This middleware:
    1. Leaves every path outside /api/admin/ alone
    2. Lets admin requests through when LICENSE_ADMIN_TOKEN is empty
    3. Returns 401 Unauthorized if the X-Admin-Token header does not match
    """

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Process request and validate the admin token.

        Args:
            request: HTTP request

        Returns:
            HttpResponse with 401 if authentication fails, None otherwise
        """
        if not request.path.startswith(ADMIN_API_PREFIX):
            return None

        expected = getattr(settings, "LICENSE_ADMIN_TOKEN", "")
        if not expected:
            return None

        provided = request.headers.get(ADMIN_TOKEN_HEADER, "")
        if not provided:
            return JsonResponse(
                {
                    "error": {
                        "code": "UNAUTHORIZED",
                        "message": f"Missing admin token. Provide {ADMIN_TOKEN_HEADER} header.",
                    }
                },
                status=401,
            )

        if not hmac.compare_digest(provided.encode(), expected.encode()):
            logger.warning("Invalid admin token attempted on %s", request.path)
            return JsonResponse(
                {"error": {"code": "UNAUTHORIZED", "message": "Invalid admin token"}},
                status=401,
            )

        return None
