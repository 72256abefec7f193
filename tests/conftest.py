"""
Shared pytest fixtures: a fake identity provider and an API test client
wired to it.
"""
import asyncio
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from authgate.main import create_app
from authgate.models.auth import AuthResult, Introspection

TEST_USER = {
    "id": "5f1c2b9e-0000-4000-8000-000000000001",
    "email": "ada@example.com",
    "role": "authenticated",
}


class FakeIdentityClient:
    """Records every call and answers with canned results."""

    def __init__(self):
        self.sign_in_calls: List[tuple] = []
        self.sign_up_calls: List[tuple] = []
        self.introspect_calls: List[str] = []
        self.sign_in_result = AuthResult()
        self.sign_up_result = AuthResult()
        self.introspection = Introspection(user=TEST_USER)
        # When set, calls wait on it before answering
        self.gate: Optional[asyncio.Event] = None

    async def _wait(self):
        if self.gate is not None:
            await self.gate.wait()

    async def sign_in(self, email: str, password: str) -> AuthResult:
        self.sign_in_calls.append((email, password))
        await self._wait()
        return self.sign_in_result

    async def sign_up(self, email: str, password: str, phone: str, metadata: Dict[str, Any]) -> AuthResult:
        self.sign_up_calls.append((email, password, phone, metadata))
        await self._wait()
        return self.sign_up_result

    async def introspect(self, token: str) -> Introspection:
        self.introspect_calls.append(token)
        return self.introspection


@pytest.fixture
def identity_client():
    return FakeIdentityClient()


@pytest.fixture
def client(identity_client):
    return TestClient(create_app(identity_client=identity_client))


@pytest.fixture
def signup_fields():
    return {
        "email": "ada@example.com",
        "password": "Abc12345!",
        "confirm_password": "Abc12345!",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "phone": "+15555550100",
    }
