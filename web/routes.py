"""
web/routes.py -- Jinja2 template routes for the Samunu web UI.

These routes serve server-rendered HTML. They share app.state with the API
routes (same identity client, same session gate, same form registry) but
return HTML instead of JSON.

Routes:
  GET  /          -- application shell (session required)
  GET  /sign-in   -- sign-in form
  POST /sign-in   -- handle sign-in; 303 to / on success
  GET  /sign-up   -- sign-up form
  POST /sign-up   -- handle sign-up; confirmation banner rendered in place

Every rendered form carries a hidden form_id. POSTs with the same form_id
share one AuthSubmissionController through app.state.forms, so a second POST
while the first is still in flight re-renders the form in its submitting
state instead of reaching the identity service again.

Password fields are never echoed back into a re-rendered form.
"""

import logging
from pathlib import Path

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from auth.controller import AuthSubmissionController
from auth.forms import FORM_ID_MAX_LENGTH, FormRegistry
from auth.gate import Redirect, SessionGate
from auth.models import AuthMode, Credential, Session, Success
from core.config import get_settings

logger = logging.getLogger("samunu.web")

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
templates.env.globals["app_name"] = get_settings().app_name
router = APIRouter()

# Sidebar open/collapsed preference, written by the browser. Open unless "false".
SIDEBAR_COOKIE = "sidebar:state"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _form_page(request: Request, template: str, controller: AuthSubmissionController, form_id: str) -> HTMLResponse:
    """Render a sign-in/sign-up form from the controller's current state.

    form_id ties later POSTs from this page to one shared controller.
    """
    resp = templates.TemplateResponse(
        request,
        template,
        {
            "state": controller.state,
            "field_errors": controller.field_errors,
            "values": controller.values,
            "submitting": controller.is_submitting,
            "form_id": form_id,
        },
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp


def _blank_form(request: Request, template: str, mode: AuthMode) -> HTMLResponse:
    forms: FormRegistry = request.app.state.forms
    controller = AuthSubmissionController(forms.identity, mode)
    return _form_page(request, template, controller, forms.new_form_id())


def _render_app_shell(request: Request, session: Session) -> HTMLResponse:
    request.state.session = session
    return templates.TemplateResponse(
        request,
        "home.html",
        {
            "session": session,
            "sidebar_open": request.cookies.get(SIDEBAR_COOKIE) != "false",
        },
    )


# ---------------------------------------------------------------------------
# GET / -- protected application shell
# ---------------------------------------------------------------------------


@router.get("/", response_class=HTMLResponse)
async def home(request: Request) -> HTMLResponse:
    gate: SessionGate = request.app.state.session_gate
    page = await gate.protect(request.headers, lambda session: _render_app_shell(request, session))
    if isinstance(page, Redirect):
        logger.info("No session for %s; redirecting to %s", request.url.path, page.target)
        return RedirectResponse(page.target, status_code=302)
    return page


# ---------------------------------------------------------------------------
# Sign-in
# ---------------------------------------------------------------------------


@router.get("/sign-in", response_class=HTMLResponse)
def sign_in_form(request: Request) -> HTMLResponse:
    """Render the sign-in page: email/password form and social buttons."""
    return _blank_form(request, "sign_in.html", AuthMode.sign_in)


@router.post("/sign-in", response_class=HTMLResponse)
async def sign_in_post(
    request: Request,
    email: str = Form(default=""),
    password: str = Form(default=""),
    form_id: str = Form(default="", max_length=FORM_ID_MAX_LENGTH),
) -> HTMLResponse:
    """Handle sign-in form submission.

    Success navigates to / with a 303 so the browser issues a fresh GET,
    which re-runs the session gate and reloads the page data.
    """
    forms: FormRegistry = request.app.state.forms
    form_id = form_id or forms.new_form_id()
    controller, outcome = await forms.submit(AuthMode.sign_in, form_id, Credential(email=email, password=password))

    if controller.navigation is not None:
        resp = RedirectResponse(controller.navigation.target, status_code=303)
        if isinstance(outcome, Success):
            for cookie in outcome.set_cookies:
                resp.headers.append("set-cookie", cookie)
        resp.headers["Cache-Control"] = "no-store"
        return resp
    return _form_page(request, "sign_in.html", controller, form_id)


# ---------------------------------------------------------------------------
# Sign-up
# ---------------------------------------------------------------------------


@router.get("/sign-up", response_class=HTMLResponse)
def sign_up_form(request: Request) -> HTMLResponse:
    return _blank_form(request, "sign_up.html", AuthMode.sign_up)


@router.post("/sign-up", response_class=HTMLResponse)
async def sign_up_post(
    request: Request,
    name: str = Form(default=""),
    email: str = Form(default=""),
    password: str = Form(default=""),
    confirm_password: str = Form(default=""),
    form_id: str = Form(default="", max_length=FORM_ID_MAX_LENGTH),
) -> HTMLResponse:
    """Handle sign-up form submission.

    Success empties the form and shows the verification notice in place
    rather than navigating to /sign-in, so the user can read it.
    """
    forms: FormRegistry = request.app.state.forms
    form_id = form_id or forms.new_form_id()
    controller, _ = await forms.submit(
        AuthMode.sign_up,
        form_id,
        Credential(name=name, email=email, password=password, confirm_password=confirm_password),
    )
    return _form_page(request, "sign_up.html", controller, form_id)
