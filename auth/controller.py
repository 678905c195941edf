"""
auth/controller.py -- One sign-in or sign-up form's submission state machine.

    idle --submit--> submitting --+--> succeeded
      ^                           +--> failed(message)
      +------------ reset() ------+

A controller belongs to exactly one form instance. At most one submission is
in flight per controller: submit() while submitting is a no-op that returns
None and leaves every attribute untouched. There is no queue.

Nothing escapes submit(). Validation errors land in field_errors; service
errors and unexpected failures land in state. The only exception that
propagates is task cancellation, after the form has been returned to idle.

The identity call is bounded by Settings.submission_timeout_seconds. A call
that outlives it is treated like any other unexpected failure.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import Optional

from auth.identity import IdentityService
from auth.models import (
    AuthMode,
    AuthOutcome,
    Credential,
    Failure,
    IdentityResponse,
    Navigation,
    SubmissionState,
    SubmissionStatus,
    Success,
    Unexpected,
)
from auth.taxonomy import resolve
from auth.validation import validate
from core.config import get_settings

logger = logging.getLogger("samunu.auth.controller")

APP_ROOT = "/"
SIGN_IN_PATH = "/sign-in"

# Where the identity service sends the user after following an emailed link.
CALLBACK_URLS: dict[AuthMode, str] = {
    AuthMode.sign_in: APP_ROOT,
    AuthMode.sign_up: SIGN_IN_PATH,
}

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again."
SIGN_UP_CONFIRMATION = "Registration successful! Please check your email to verify your account."


class AuthSubmissionController:
    """Drive one form through validation, the identity call and its outcome.

    Attributes the UI renders:
        state:        SubmissionState -- status plus banner message.
        field_errors: inline errors from the last validation, by field name.
        values:       the form values to re-display (emptied after sign-up).
        navigation:   set after a successful sign-in; None otherwise.
    """

    def __init__(self, identity: IdentityService, mode: AuthMode, timeout: Optional[float] = None):
        self.identity = identity
        self.mode = AuthMode(mode)
        self.timeout = timeout if timeout is not None else get_settings().submission_timeout_seconds
        self.state = SubmissionState()
        self.field_errors: dict[str, str] = {}
        self.values = Credential.empty()
        self.navigation: Optional[Navigation] = None

    @property
    def is_submitting(self) -> bool:
        return self.state.status is SubmissionStatus.submitting

    def reset(self) -> None:
        """Return the form to its mount state: idle, empty, no errors."""
        self.state = SubmissionState()
        self.field_errors = {}
        self.values = Credential.empty()
        self.navigation = None

    async def submit(self, credential: Credential) -> Optional[AuthOutcome]:
        """Run one submission.

        Returns the AuthOutcome of the identity call, or None when nothing was
        sent: either a submission is already in flight or validation failed.
        """
        if self.is_submitting:
            logger.debug("Ignoring %s submit: a submission is already in flight", self.mode.value)
            return None

        self.values = credential
        result = validate(credential, self.mode)
        self.field_errors = result.field_errors()
        if not result.is_valid:
            return None

        self.state = SubmissionState.submitting()
        self.navigation = None
        try:
            outcome = await self._call_identity(credential)
        except asyncio.CancelledError:
            self.state = SubmissionState()
            raise
        self._settle(outcome)
        return outcome

    async def _call_identity(self, credential: Credential) -> AuthOutcome:
        try:
            response = await asyncio.wait_for(self._request(credential), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning("%s request timed out after %.1fs", self.mode.value, self.timeout)
            return Unexpected(reason="timeout")
        except Exception as exc:
            logger.exception("%s request failed", self.mode.value)
            return Unexpected(reason=type(exc).__name__)

        if response.error is not None:
            return Failure(code=response.error.code, message=response.error.message)
        return Success(set_cookies=response.set_cookies)

    def _request(self, credential: Credential) -> Awaitable[IdentityResponse]:
        callback_url = CALLBACK_URLS[self.mode]
        if self.mode is AuthMode.sign_up:
            return self.identity.sign_up_email(credential.name, credential.email, credential.password, callback_url)
        return self.identity.sign_in_email(credential.email, credential.password, callback_url)

    def _settle(self, outcome: AuthOutcome) -> None:
        """Apply the terminal transition for an outcome."""
        if isinstance(outcome, Success):
            if self.mode is AuthMode.sign_up:
                # Stay on the page so the user can read the verification notice.
                self.values = Credential.empty()
                self.field_errors = {}
                self.state = SubmissionState.succeeded(SIGN_UP_CONFIRMATION)
            else:
                self.state = SubmissionState.succeeded()
                self.navigation = Navigation(target=APP_ROOT, refresh=True)
        elif isinstance(outcome, Failure):
            self.state = SubmissionState.failed(resolve(self.mode, outcome))
        else:
            self.state = SubmissionState.failed(UNEXPECTED_ERROR_MESSAGE)
