"""
auth/models.py -- Domain dataclasses for the authentication gate.

Pattern: Data class (pure data container, near-zero logic). The validator,
taxonomy, controller and gate do the work; these types only carry shape.

Layer rule: no imports from api/ or web/.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class AuthMode(str, Enum):
    sign_in = "sign_in"
    sign_up = "sign_up"


class SubmissionStatus(str, Enum):
    idle = "idle"
    submitting = "submitting"
    succeeded = "succeeded"
    failed = "failed"


# ---------------------------------------------------------------------------
# Form input
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Credential:
    """Raw form input for one authentication attempt.

    Sign-in uses email + password only; name and confirm_password are ignored
    unless the mode is sign_up.
    """

    email: str = ""
    password: str = ""
    name: str = ""
    confirm_password: str = ""

    @classmethod
    def empty(cls) -> "Credential":
        return cls()


@dataclass(frozen=True)
class ValidationResult:
    """Per-field validation outcome.

    errors maps every field checked for the mode to None (valid) or exactly
    one message. Fields not relevant to the mode are absent.
    """

    errors: dict[str, Optional[str]]

    @property
    def is_valid(self) -> bool:
        return all(message is None for message in self.errors.values())

    def field_errors(self) -> dict[str, str]:
        """Return only the failing fields."""
        return {name: message for name, message in self.errors.items() if message is not None}

    def error_for(self, name: str) -> Optional[str]:
        return self.errors.get(name)


# ---------------------------------------------------------------------------
# Identity service wire shapes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class IdentityError:
    """Error object returned by the identity service.

    code is one of the known taxonomy codes or any unrecognized value;
    message is free text. Either may be missing.
    """

    code: Optional[str] = None
    message: Optional[str] = None
    status: Optional[int] = None


@dataclass(frozen=True)
class IdentityResponse:
    """The { data, error? } result of a sign-in or sign-up call.

    set_cookies holds the raw Set-Cookie header values the service issued;
    server-side forms forward them so the browser receives the new session.
    """

    data: Optional[dict[str, Any]] = None
    error: Optional[IdentityError] = None
    set_cookies: tuple[str, ...] = ()


@dataclass(frozen=True)
class Session:
    """Opaque session record owned by the identity service.

    The gate only checks presence. The user fields are exposed to protected
    pages for display; raw keeps the full payload for anything else.
    """

    user_id: str
    email: str = ""
    name: str = ""
    expires_at: Optional[str] = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


# ---------------------------------------------------------------------------
# Submission outcome
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Success:
    set_cookies: tuple[str, ...] = ()


@dataclass(frozen=True)
class Failure:
    code: Optional[str] = None
    message: Optional[str] = None


@dataclass(frozen=True)
class Unexpected:
    """A thrown or network-level failure. Carries no provider code."""

    reason: str = ""


AuthOutcome = Union[Success, Failure, Unexpected]


# ---------------------------------------------------------------------------
# Form state
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SubmissionState:
    """Immutable snapshot of a form's submission state machine.

    message is the banner text: the failure message for failed, the
    confirmation notice for a completed sign-up, otherwise None.
    """

    status: SubmissionStatus = SubmissionStatus.idle
    message: Optional[str] = None

    @classmethod
    def submitting(cls) -> "SubmissionState":
        return cls(status=SubmissionStatus.submitting)

    @classmethod
    def succeeded(cls, message: Optional[str] = None) -> "SubmissionState":
        return cls(status=SubmissionStatus.succeeded, message=message)

    @classmethod
    def failed(cls, message: str) -> "SubmissionState":
        return cls(status=SubmissionStatus.failed, message=message)


@dataclass(frozen=True)
class Navigation:
    """Instruction for the UI: go to target, then refresh server data."""

    target: str
    refresh: bool = False
