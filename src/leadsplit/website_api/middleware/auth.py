"""Shared-secret authentication dependency."""

import hmac
from fastapi import Request

from ...core.errors import AuthError


async def verify_secret(request: Request):
    """Require the ``X-API-Secret`` header to match the configured secret."""
    expected = request.app.state.settings.api_secret
    secret = request.headers.get("X-API-Secret")
    if secret and hmac.compare_digest(secret, expected):
        return True

    raise AuthError("Invalid or missing authentication")
