from unittest.mock import AsyncMock

import pytest

from authgate.auth.dependencies import authorize, extract_bearer_token
from authgate.core.errors import InvalidTokenError, MissingTokenError
from authgate.models.auth import Introspection

from conftest import TEST_USER


@pytest.mark.parametrize(
    "header, token",
    [
        ("Bearer xyz", "xyz"),
        ("bearer xyz", "xyz"),
        ("Basic dXNlcjpwYXNz", None),
        ("Bearer", None),
        ("Bearer  xyz", None),
        ("Bearer xyz extra", None),
        ("xyz", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_bearer_token(header, token):
    assert extract_bearer_token(header) == token


@pytest.mark.asyncio
async def test_missing_header_skips_introspection(identity_client):
    with pytest.raises(MissingTokenError) as exc_info:
        await authorize(None, identity_client)
    assert exc_info.value.to_payload() == {"error": "Missing token"}
    assert identity_client.introspect_calls == []


@pytest.mark.asyncio
async def test_non_bearer_header_skips_introspection(identity_client):
    with pytest.raises(MissingTokenError):
        await authorize("Token xyz", identity_client)
    assert identity_client.introspect_calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("header", ["Bearer  xyz", "Bearer xyz extra"])
async def test_malformed_bearer_skips_introspection(identity_client, header):
    with pytest.raises(MissingTokenError):
        await authorize(header, identity_client)
    assert identity_client.introspect_calls == []


@pytest.mark.asyncio
async def test_valid_token_returns_user(identity_client):
    user = await authorize("Bearer xyz", identity_client)
    assert user == TEST_USER
    assert identity_client.introspect_calls == ["xyz"]


@pytest.mark.asyncio
async def test_no_user_is_invalid(identity_client):
    identity_client.introspection = Introspection()
    with pytest.raises(InvalidTokenError) as exc_info:
        await authorize("Bearer xyz", identity_client)
    assert exc_info.value.to_payload() == {"error": "Invalid token"}


@pytest.mark.asyncio
async def test_provider_error_does_not_leak(identity_client):
    identity_client.introspection = Introspection(error="invalid JWT: unable to parse or verify signature")
    with pytest.raises(InvalidTokenError) as exc_info:
        await authorize("Bearer xyz", identity_client)
    assert exc_info.value.to_payload() == {"error": "Invalid token"}


@pytest.mark.asyncio
async def test_introspection_exception_is_invalid_token():
    client = AsyncMock()
    client.introspect.side_effect = TimeoutError("provider timed out")
    with pytest.raises(InvalidTokenError):
        await authorize("Bearer xyz", client)
    client.introspect.assert_awaited_once_with("xyz")
