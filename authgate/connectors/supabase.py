"""
Supabase Auth connector: the identity provider behind sign-in, sign-up and
bearer-token introspection.
"""
import logging
from functools import partial
from typing import Any, Callable, Dict, Optional

from starlette.concurrency import run_in_threadpool
from supabase import Client, ClientOptions, create_client

from authgate.core.config import get_supabase_key, get_supabase_url
from authgate.models.auth import AuthResult, Introspection

logger = logging.getLogger(__name__)


def provider_message(exc: Exception) -> str:
    """Human-readable text of a provider exception, passed through verbatim."""
    return getattr(exc, "message", None) or str(exc)


def get_supabase_client(url: Optional[str] = None, key: Optional[str] = None) -> Client:
    """
    Create a Supabase client for the identity provider.
    Uses the public (anon) key; the service never needs elevated rights.
    """
    return create_client(
        url or get_supabase_url(),
        key or get_supabase_key(),
        options=ClientOptions(persist_session=False, auto_refresh_token=False),
    )


class IdentityClient:
    """
    Process-wide handle on the identity provider.

    Built once at startup and shared read-only by every form and every
    protected request. The shared client only introspects tokens; sign-in
    and sign-up run on a throwaway client from `session_factory`, since the
    SDK stores the resulting session on whichever client made the call.
    The Supabase SDK is blocking, so each call runs in the threadpool.
    """

    def __init__(self, client: Client, session_factory: Callable[[], Client]):
        self._client = client
        self._session_factory = session_factory

    @classmethod
    def from_env(cls) -> "IdentityClient":
        url, key = get_supabase_url(), get_supabase_key()
        return cls(get_supabase_client(url, key), partial(get_supabase_client, url, key))

    def _sign_in(self, credentials: Dict[str, Any]) -> None:
        self._session_factory().auth.sign_in_with_password(credentials)

    def _sign_up(self, credentials: Dict[str, Any]) -> None:
        self._session_factory().auth.sign_up(credentials)

    async def sign_in(self, email: str, password: str) -> AuthResult:
        try:
            await run_in_threadpool(self._sign_in, {"email": email, "password": password})
        except Exception as e:
            logger.info("Sign in rejected by identity provider: %s", provider_message(e))
            return AuthResult(error=provider_message(e))
        return AuthResult()

    async def sign_up(
        self,
        email: str,
        password: str,
        phone: str,
        metadata: Dict[str, Any],
    ) -> AuthResult:
        try:
            await run_in_threadpool(
                self._sign_up,
                {
                    "email": email,
                    "password": password,
                    "phone": phone,
                    "options": {"data": metadata},
                },
            )
        except Exception as e:
            logger.info("Sign up rejected by identity provider: %s", provider_message(e))
            return AuthResult(error=provider_message(e))
        return AuthResult()

    async def introspect(self, token: str) -> Introspection:
        """Resolve a bearer token to the user it was issued for."""
        try:
            response = await run_in_threadpool(self._client.auth.get_user, token)
        except Exception as e:
            return Introspection(error=provider_message(e))

        if response is None or response.user is None:
            return Introspection()
        return Introspection(user=response.user.model_dump(mode="json"))
