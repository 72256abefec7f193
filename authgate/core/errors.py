"""
Exception types for the authentication flow and the bearer-token gate.

Only lightweight, data-carrying exceptions live here so the web layer can
turn them into HTTP responses.
"""
from typing import Dict


class AuthGateError(Exception):
    """Base class for every error raised by authgate."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AuthGateError):
    """Local signup check failed (composition rule, mismatch, missing field)."""


class AuthProviderError(AuthGateError):
    """Identity provider rejected a sign-in or sign-up. Message is verbatim."""


class InvalidTransition(AuthGateError):
    """A submission was invoked from a view that does not offer it."""


class TokenError(AuthGateError):
    """Bearer token missing or rejected by introspection."""

    reason = "Invalid token"

    def __init__(self, message: str = ""):
        super().__init__(message or self.reason)

    def to_payload(self) -> Dict[str, str]:
        # Fixed reason only, never provider internals
        return {"error": self.reason}


class MissingTokenError(TokenError):
    reason = "Missing token"


class InvalidTokenError(TokenError):
    reason = "Invalid token"
