"""
auth/gate.py -- Session guard for protected pages.

SessionGate runs once per protected request, before anything protected is
built. It asks the identity service for the current session and answers:

  Render(session)      -- a session exists; build the page with it
  Redirect("/sign-in") -- no session; build nothing

There is no caching: every call queries the identity service, which is the
only source of truth. If the identity service cannot answer, the gate fails
closed and redirects.

Two ways to use it:
  protect(headers, build)  -- HTML routes. build(session) runs only after a
                              Render, so anonymous requests never construct
                              protected content.
  require_session(request) -- FastAPI dependency for JSON routes. Raises
                              SessionMissing; api/ turns that into a 401.

Layer rule: no imports from api/ or web/. fastapi.Request is imported for
the dependency signature only.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Mapping
from dataclasses import dataclass
from typing import Callable, TypeVar, Union

from fastapi import Request

from auth.identity import IdentityService
from auth.models import Session

logger = logging.getLogger("samunu.auth.gate")

SIGN_IN_PATH = "/sign-in"

T = TypeVar("T")


@dataclass(frozen=True)
class Render:
    session: Session


@dataclass(frozen=True)
class Redirect:
    target: str = SIGN_IN_PATH


GateDecision = Union[Render, Redirect]


class SessionMissing(Exception):
    """Control-flow signal: the request has no session. Not a user-facing error."""

    def __init__(self, target: str = SIGN_IN_PATH):
        super().__init__(target)
        self.target = target


class SessionGate:
    def __init__(self, identity: IdentityService, sign_in_path: str = SIGN_IN_PATH):
        self.identity = identity
        self.sign_in_path = sign_in_path

    async def guard(self, headers: Mapping[str, str]) -> GateDecision:
        """Decide render-vs-redirect for one request's headers."""
        try:
            session = await self.identity.get_session(headers)
        except Exception:
            logger.exception("Session lookup failed; denying access")
            return Redirect(self.sign_in_path)
        if session is None:
            return Redirect(self.sign_in_path)
        return Render(session)

    async def protect(
        self,
        headers: Mapping[str, str],
        build: Callable[[Session], Union[T, Awaitable[T]]],
    ) -> Union[T, Redirect]:
        """Guard, then build protected content only for a confirmed session."""
        decision = await self.guard(headers)
        if isinstance(decision, Redirect):
            return decision
        content = build(decision.session)
        if inspect.isawaitable(content):
            content = await content
        return content


async def require_session(request: Request) -> Session:
    """FastAPI dependency: return the session or raise SessionMissing.

    The session is also stored on request.state.session for anything
    downstream of the route handler.
    """
    gate: SessionGate = request.app.state.session_gate
    decision = await gate.guard(request.headers)
    if isinstance(decision, Redirect):
        raise SessionMissing(decision.target)
    request.state.session = decision.session
    return decision.session
