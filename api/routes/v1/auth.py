"""
api/routes/v1/auth.py -- JSON authentication endpoints.

Routes:
  POST /api/v1/auth/sign-in   -- submit a sign-in form; forwards session cookies on success
  POST /api/v1/auth/sign-up   -- submit a sign-up form
  GET  /api/v1/auth/session   -- current session (requires a session)

Submissions go through app.state.forms. Requests carrying the same formId
share one AuthSubmissionController, so its in-flight guard spans requests;
a request without one is its own form instance.

Status codes:
  200 succeeded, 422 field errors (nothing sent to the identity service),
  400 failed (service error or unexpected failure, message in the body),
  409 the same form already has a submission in flight (nothing sent).

Security:
  Cache-Control: no-store on every submission response.
  Passwords never appear in responses or logs.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models import SessionResponse, SignInRequest, SignUpRequest, SubmissionResponse
from auth.controller import AuthSubmissionController
from auth.forms import FormRegistry
from auth.gate import require_session
from auth.models import AuthMode, AuthOutcome, Session, Success, SubmissionStatus

# Auth policy:
# - POST /api/v1/auth/sign-in:  public -- the sign-in endpoint must be unauthenticated
# - POST /api/v1/auth/sign-up:  public
# - GET  /api/v1/auth/session:  requires a session (require_session)
router = APIRouter()


def _submission_response(controller: AuthSubmissionController, outcome: AuthOutcome | None) -> JSONResponse:
    body = SubmissionResponse.from_controller(controller)
    if controller.is_submitting:
        status_code = 409
    elif controller.field_errors:
        status_code = 422
    elif controller.state.status is SubmissionStatus.succeeded:
        status_code = 200
    else:
        status_code = 400

    resp = JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))
    if isinstance(outcome, Success):
        for cookie in outcome.set_cookies:
            resp.headers.append("set-cookie", cookie)
    resp.headers["Cache-Control"] = "no-store"
    return resp


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@router.post("/auth/sign-in", response_model=SubmissionResponse)
async def sign_in(request: Request, body: SignInRequest) -> JSONResponse:
    """Validate and submit email/password to the identity service.

    On success the identity service's Set-Cookie headers are forwarded so
    the caller holds the new session, and redirect_to is "/".
    """
    forms: FormRegistry = request.app.state.forms
    controller, outcome = await forms.submit(AuthMode.sign_in, body.form_id, body.to_credential())
    return _submission_response(controller, outcome)


@router.post("/auth/sign-up", response_model=SubmissionResponse)
async def sign_up(request: Request, body: SignUpRequest) -> JSONResponse:
    """Validate and submit a registration.

    Success does not sign the user in: the identity service emails a
    verification link and the response carries the confirmation message.
    """
    forms: FormRegistry = request.app.state.forms
    controller, outcome = await forms.submit(AuthMode.sign_up, body.form_id, body.to_credential())
    return _submission_response(controller, outcome)


# ---------------------------------------------------------------------------
# Authenticated endpoints
# ---------------------------------------------------------------------------


@router.get("/auth/session", response_model=SessionResponse)
async def current_session(session: Session = Depends(require_session)) -> SessionResponse:
    """Return identity information for the current session."""
    return SessionResponse.from_session(session)
