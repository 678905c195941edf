"""
auth/identity.py -- Client for the external identity service.

The identity service owns sessions, token issuance and password storage.
This module only consumes three operations:

  sign_in_email(email, password, callback_url)       -> IdentityResponse
  sign_up_email(name, email, password, callback_url) -> IdentityResponse
  get_session(headers)                               -> Session | None

IdentityService is the Protocol the controller and gate depend on.
HttpIdentityClient implements it over httpx.AsyncClient against a
Better-Auth style server:

  POST {base}/sign-in/email   {"email", "password", "callbackURL"}
  POST {base}/sign-up/email   {"name", "email", "password", "callbackURL"}
  GET  {base}/get-session     (cookie / authorization forwarded)

Error handling:
  Non-2xx sign-in/sign-up responses are returned as IdentityResponse.error,
  never raised. Transport failures (connect, timeout, protocol) raise
  httpx.HTTPError -- the caller decides what "unexpected" means.

The client holds no mutable state beyond httpx's connection pool, so one
instance is shared by every form and every request.

Layer rule: no imports from api/ or web/.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional, Protocol

import httpx

from auth.models import IdentityError, IdentityResponse, Session
from core.config import Settings, get_settings

logger = logging.getLogger("samunu.auth.identity")

# Request headers that carry the caller's session to the identity service.
# Everything else (host, content-length, ...) belongs to the inbound request.
_SESSION_HEADERS = ("cookie", "authorization")


class IdentityService(Protocol):
    async def sign_in_email(self, email: str, password: str, callback_url: str) -> IdentityResponse: ...

    async def sign_up_email(self, name: str, email: str, password: str, callback_url: str) -> IdentityResponse: ...

    async def get_session(self, headers: Mapping[str, str]) -> Optional[Session]: ...


def _json_or_none(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return None


def _to_identity_response(resp: httpx.Response) -> IdentityResponse:
    """Map an HTTP response onto the { data, error? } shape."""
    body = _json_or_none(resp)
    set_cookies = tuple(resp.headers.get_list("set-cookie"))
    if resp.is_success:
        data = body if isinstance(body, dict) else None
        return IdentityResponse(data=data, set_cookies=set_cookies)

    body = body if isinstance(body, dict) else {}
    code = body.get("code")
    message = body.get("message")
    return IdentityResponse(
        error=IdentityError(
            code=code if isinstance(code, str) else None,
            message=message if isinstance(message, str) else None,
            status=resp.status_code,
        ),
        set_cookies=set_cookies,
    )


def parse_session(payload: Any) -> Optional[Session]:
    """Build a Session from a get-session body, or None when there is none.

    The service answers `null` for an anonymous request and
    {"session": {...}, "user": {...}} otherwise.
    """
    if not isinstance(payload, dict):
        return None
    session = payload.get("session")
    user = payload.get("user")
    if not isinstance(session, dict) or not isinstance(user, dict):
        return None
    user_id = user.get("id") or session.get("userId")
    if not user_id:
        return None
    return Session(
        user_id=str(user_id),
        email=str(user.get("email") or ""),
        name=str(user.get("name") or ""),
        expires_at=str(session["expiresAt"]) if session.get("expiresAt") else None,
        raw=payload,
    )


class HttpIdentityClient:
    """IdentityService over HTTP.

    Args:
        settings:  Application settings; defaults to get_settings().
        transport: Optional httpx transport. Tests pass httpx.MockTransport.
    """

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        cfg = settings or get_settings()
        self._client = httpx.AsyncClient(
            base_url=cfg.identity_base_url,
            timeout=httpx.Timeout(cfg.identity_timeout_seconds),
            limits=httpx.Limits(max_keepalive_connections=20, max_connections=100),
            follow_redirects=False,
            transport=transport,
        )
        logger.info("Identity client targeting %s", cfg.identity_base_url)

    async def __aenter__(self) -> "HttpIdentityClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def sign_in_email(self, email: str, password: str, callback_url: str) -> IdentityResponse:
        resp = await self._client.post(
            "/sign-in/email",
            json={"email": email, "password": password, "callbackURL": callback_url},
        )
        return _to_identity_response(resp)

    async def sign_up_email(self, name: str, email: str, password: str, callback_url: str) -> IdentityResponse:
        resp = await self._client.post(
            "/sign-up/email",
            json={"name": name, "email": email, "password": password, "callbackURL": callback_url},
        )
        return _to_identity_response(resp)

    async def get_session(self, headers: Mapping[str, str]) -> Optional[Session]:
        """Ask the identity service who the request belongs to.

        Returns None for an anonymous request (null body, 401 or 403). Any
        other non-2xx status raises httpx.HTTPStatusError so the gate can
        fail closed instead of guessing.
        """
        forwarded = {}
        for name, value in headers.items():
            if name.lower() in _SESSION_HEADERS:
                forwarded[name.lower()] = value

        resp = await self._client.get("/get-session", headers=forwarded)
        if resp.status_code in (401, 403):
            return None
        resp.raise_for_status()
        return parse_session(_json_or_none(resp))
