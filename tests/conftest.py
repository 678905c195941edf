"""
tests/conftest.py -- Shared test fixtures for Samunu.

This module provides:
  - FakeIdentityService: in-process stand-in for the identity service with
    scripted responses, recorded calls and an optional hold to keep a call
    in flight
  - _patch_lifespan(): wires the fake into app.state, bypassing real startup
  - identity: a fresh FakeIdentityService per test
  - web_client: TestClient with follow_redirects=False for route tests
  - async_client: httpx.AsyncClient over ASGITransport for concurrent requests

IDENTITY_SERVICE_URL must be set before any core/auth import so the cached
Settings never point at a real server.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import AsyncGenerator, Generator, Mapping
from contextlib import asynccontextmanager
from typing import Optional

# Set before importing the app so get_settings() caches the test values.
os.environ.setdefault("IDENTITY_SERVICE_URL", "http://identity.test")
os.environ.setdefault("DEBUG", "true")

import httpx
import pytest
from fastapi.testclient import TestClient

from asgi import app
from auth.forms import FormRegistry
from auth.gate import SessionGate
from auth.models import IdentityError, IdentityResponse, Session

SESSION_COOKIE = "better-auth.session_token=tok123; Path=/; HttpOnly; SameSite=Lax"


class FakeIdentityService:
    """Scripted IdentityService.

    Set sign_in_response / sign_up_response / session to control answers,
    raises / session_error to simulate transport failures, and hold to an
    asyncio.Event to keep sign-in/sign-up calls pending until it is set.
    """

    def __init__(self) -> None:
        self.succeed()
        self.session: Optional[Session] = None
        self.raises: Optional[BaseException] = None
        self.session_error: Optional[Exception] = None
        self.hold: Optional[asyncio.Event] = None
        self.started: Optional[asyncio.Event] = None
        self.calls: list[tuple] = []
        self.session_calls: list[dict[str, str]] = []

    def succeed(self) -> None:
        self.sign_in_response = IdentityResponse(data={"redirect": False}, set_cookies=(SESSION_COOKIE,))
        self.sign_up_response = IdentityResponse(data={"user": {"id": "u2"}})

    def fail_with(self, code: Optional[str] = None, message: Optional[str] = None, status: int = 400) -> None:
        error = IdentityResponse(error=IdentityError(code=code, message=message, status=status))
        self.sign_in_response = error
        self.sign_up_response = error

    async def _respond(self, response: IdentityResponse) -> IdentityResponse:
        if self.started is not None:
            self.started.set()
        if self.hold is not None:
            await self.hold.wait()
        if self.raises is not None:
            raise self.raises
        return response

    async def sign_in_email(self, email: str, password: str, callback_url: str) -> IdentityResponse:
        self.calls.append(("sign_in", email, password, callback_url))
        return await self._respond(self.sign_in_response)

    async def sign_up_email(self, name: str, email: str, password: str, callback_url: str) -> IdentityResponse:
        self.calls.append(("sign_up", name, email, password, callback_url))
        return await self._respond(self.sign_up_response)

    async def get_session(self, headers: Mapping[str, str]) -> Optional[Session]:
        self.session_calls.append({k.lower(): v for k, v in headers.items()})
        if self.session_error is not None:
            raise self.session_error
        return self.session


def _patch_lifespan(identity: FakeIdentityService):
    """Return an async context manager that replaces the real lifespan.

    No HttpIdentityClient is created, so no test can reach the network.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.identity = identity
        app.state.session_gate = SessionGate(identity)
        app.state.forms = FormRegistry(identity)
        yield

    return test_lifespan


@pytest.fixture
def identity() -> FakeIdentityService:
    return FakeIdentityService()


@pytest.fixture
def alice() -> Session:
    return Session(user_id="u1", email="alice@example.com", name="Alice Example", expires_at="2030-01-01T00:00:00Z")


@pytest.fixture
def web_client(identity: FakeIdentityService) -> Generator[TestClient, None, None]:
    """Yield a TestClient bound to the fake identity service.

    follow_redirects=False is essential: tests assert on redirect locations,
    which are invisible once the client follows them.
    """
    app.router.lifespan_context = _patch_lifespan(identity)
    with TestClient(app, follow_redirects=False, raise_server_exceptions=True) as client:
        yield client


@pytest.fixture
async def async_client(identity: FakeIdentityService) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Yield an AsyncClient that can keep several requests in flight at once.

    ASGITransport does not run the lifespan, so app.state is wired directly.
    """
    app.state.identity = identity
    app.state.session_gate = SessionGate(identity)
    app.state.forms = FormRegistry(identity)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver", follow_redirects=False) as client:
        yield client
