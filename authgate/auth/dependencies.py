import logging
from typing import Any, Dict, Optional

from fastapi import Depends, Request
from fastapi.security.utils import get_authorization_scheme_param

from authgate.connectors.supabase import IdentityClient
from authgate.core.errors import InvalidTokenError, MissingTokenError

logger = logging.getLogger(__name__)


def get_identity_client(request: Request) -> IdentityClient:
    """The process-wide identity client built in the app lifespan."""
    return request.app.state.identity_client


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    scheme, token = get_authorization_scheme_param(authorization)
    # Exactly "Bearer <token>": one separator, no whitespace inside the token
    if scheme.lower() != "bearer" or not token or any(c.isspace() for c in token):
        return None
    return token


async def authorize(authorization: Optional[str], client: IdentityClient) -> Dict[str, Any]:
    """
    Admit a request carrying a bearer token the identity provider recognises.

    No caching and no local signature or expiry checks: every call costs one
    introspection round-trip.

    Raises:
        MissingTokenError: header absent or not "Bearer <token>"
        InvalidTokenError: introspection failed or returned no user
    """
    token = extract_bearer_token(authorization)
    if token is None:
        raise MissingTokenError()

    try:
        result = await client.introspect(token)
    except Exception as e:
        logger.warning("Token introspection raised: %s", e)
        raise InvalidTokenError() from e

    if result.error or not result.user:
        if result.error:
            logger.info("Token introspection failed: %s", result.error)
        raise InvalidTokenError()
    return result.user


async def get_current_user(
    request: Request,
    client: IdentityClient = Depends(get_identity_client),
) -> Dict[str, Any]:
    """
    FastAPI dependency guarding protected routes.
    Attaches the resolved user to request.state.user.
    """
    user = await authorize(request.headers.get("Authorization"), client)
    request.state.user = user
    return user
