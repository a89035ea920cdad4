"""
Shared-secret authentication for the ingestion endpoint.

The secret may be sent as X-HillPulse-Key or as Authorization, either raw
or with a "Bearer " prefix. When no secret is configured every request is
allowed.
"""

import hmac
from typing import Optional

from fastapi import Request, Security
from fastapi.security import APIKeyHeader

from ..errors import AuthorizationError, ErrorCode


KEY_HEADER = "X-HillPulse-Key"

key_header = APIKeyHeader(name=KEY_HEADER, auto_error=False)
authorization_header = APIKeyHeader(name="Authorization", auto_error=False)


def _strip_bearer(value: str) -> str:
    value = value.strip()
    if value[:7].lower() == "bearer ":
        return value[7:].strip()
    return value


def secret_matches(secret: str, presented: Optional[str]) -> bool:
    """Constant-time comparison of a presented header value with the secret."""
    if not presented:
        return False
    candidate = _strip_bearer(presented)
    return hmac.compare_digest(candidate.encode("utf-8"), secret.encode("utf-8"))


async def verify_ingest_key(
    request: Request,
    api_key: Optional[str] = Security(key_header),
    authorization: Optional[str] = Security(authorization_header),
) -> str:
    """
    Verify the shared secret on an ingest request.

    Returns:
        "open" when no secret is configured, otherwise "secret"

    Raises:
        AuthorizationError: If a secret is configured and neither header
            carries it
    """
    secret = request.app.state.config["server"]["secret"]
    if not secret:
        return "open"

    if secret_matches(secret, api_key) or secret_matches(secret, authorization):
        return "secret"

    raise AuthorizationError(ErrorCode.INGEST_UNAUTHORIZED)
