"""
auth/forms.py -- Live form instances shared across HTTP requests.

A browser tab renders a form once and may POST it several times (double
click, resubmit after a slow response). Each render carries a form_id; every
POST for that id is routed to the same AuthSubmissionController, so the
controller's in-flight guard holds across requests:

  forms.new_form_id()                            -- issued at render time
  await forms.submit(mode, form_id, credential)  -- (controller, outcome)

Only forms with a submission in flight are kept. An entry is dropped as soon
as its controller leaves "submitting" (succeeded, failed, validation
rejected or cancelled), so the registry never grows with page views.

Callers without a form_id (plain JSON clients) get a fresh, unregistered
controller per call.

Layer rule: no imports from api/ or web/.
"""

from __future__ import annotations

import logging
import secrets
from typing import Optional

from auth.controller import AuthSubmissionController
from auth.identity import IdentityService
from auth.models import AuthMode, AuthOutcome, Credential

logger = logging.getLogger("samunu.auth.forms")

# Upper bound on client-supplied ids; token_urlsafe(16) is 22 characters.
FORM_ID_MAX_LENGTH = 64


class FormRegistry:
    def __init__(self, identity: IdentityService, timeout: Optional[float] = None):
        self.identity = identity
        self.timeout = timeout
        self._live: dict[tuple[AuthMode, str], AuthSubmissionController] = {}

    def __len__(self) -> int:
        return len(self._live)

    def __contains__(self, key: tuple[AuthMode, str]) -> bool:
        return key in self._live

    @staticmethod
    def new_form_id() -> str:
        return secrets.token_urlsafe(16)

    def claim(self, mode: AuthMode, form_id: Optional[str]) -> AuthSubmissionController:
        """Return the live controller for (mode, form_id), creating it if needed."""
        if not form_id:
            return AuthSubmissionController(self.identity, mode, timeout=self.timeout)
        key = (AuthMode(mode), form_id[:FORM_ID_MAX_LENGTH])
        controller = self._live.get(key)
        if controller is None:
            controller = AuthSubmissionController(self.identity, mode, timeout=self.timeout)
            self._live[key] = controller
        return controller

    def release(self, mode: AuthMode, form_id: Optional[str], controller: AuthSubmissionController) -> None:
        """Drop the entry once its submission is no longer in flight.

        A request that hit the in-flight guard leaves the entry alone; the
        request that owns the submission releases it.
        """
        if not form_id or controller.is_submitting:
            return
        key = (AuthMode(mode), form_id[:FORM_ID_MAX_LENGTH])
        if self._live.get(key) is controller:
            del self._live[key]

    async def submit(
        self, mode: AuthMode, form_id: Optional[str], credential: Credential
    ) -> tuple[AuthSubmissionController, Optional[AuthOutcome]]:
        """Submit credential through the form's shared controller.

        Returns the controller (for rendering) and the outcome, which is None
        when validation failed or another request already has this form in
        flight. In the latter case controller.is_submitting is still True.
        """
        controller = self.claim(mode, form_id)
        if controller.is_submitting:
            logger.info("Form %s already submitting; ignoring duplicate %s", form_id, AuthMode(mode).value)
        try:
            outcome = await controller.submit(credential)
        finally:
            self.release(mode, form_id, controller)
        return controller, outcome
