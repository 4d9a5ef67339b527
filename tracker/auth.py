"""Shared-secret authentication for the /v1 endpoints."""

import secrets

from fastapi import HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader

# API key header scheme
api_key_header = APIKeyHeader(name="x-api-key", auto_error=False)


async def require_api_key(
    request: Request,
    api_key: str | None = Security(api_key_header),
) -> None:
    """Reject requests that do not carry the deployment's API token.

    Args:
        request: Incoming request (settings live on the app state)
        api_key: Value of the x-api-key header

    Raises:
        HTTPException: If the key is missing or does not match
    """
    expected = request.app.state.settings.api_token
    # Bytes, since compare_digest rejects non-ASCII str
    if not api_key or not secrets.compare_digest(api_key.encode(), expected.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
            headers={"WWW-Authenticate": "ApiKey"},
        )
