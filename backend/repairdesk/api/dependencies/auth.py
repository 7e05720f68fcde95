# backend/repairdesk/api/dependencies/auth.py
"""Admin authentication dependency for schedule management endpoints."""

import logging
import secrets

from fastapi import Request

from ...core.config import settings
from ...core.exceptions import UnauthorizedException

logger = logging.getLogger(__name__)


async def require_admin(request: Request) -> None:
    """
    Validate the admin bearer token.

    The expected value is ADMIN_API_TOKEN; an empty setting rejects every
    request so admin routes are closed unless explicitly configured.
    """
    auth_header = request.headers.get("authorization", "")
    if not auth_header.startswith("Bearer "):
        logger.warning("admin_auth_missing_header", extra={"path": request.url.path})
        raise UnauthorizedException(
            "Missing or invalid authorization header", code="ADMIN_AUTH_REQUIRED"
        ).to_http_exception()

    token = auth_header[7:].strip()
    expected = settings.admin_api_token.get_secret_value().strip()
    if not expected or not secrets.compare_digest(token, expected):
        logger.warning("admin_auth_invalid_token", extra={"path": request.url.path})
        raise UnauthorizedException("Invalid admin token", code="ADMIN_AUTH_INVALID").to_http_exception()
