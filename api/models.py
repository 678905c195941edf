"""
API request and response models for Samunu REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two.

Request bodies deliberately carry no format constraints (no EmailStr, no
min_length). Field rules live in auth/validation.py so the JSON API and the
HTML forms report exactly the same per-field messages.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from auth.controller import AuthSubmissionController
from auth.forms import FORM_ID_MAX_LENGTH
from auth.models import Credential, Session, SubmissionStatus

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class SignInRequest(BaseModel):
    """Request body for POST /api/v1/auth/sign-in.

    form_id is optional. Clients that send one get the in-flight guard
    across requests: a second submit for the same form while the first is
    pending is answered with 409 and never reaches the identity service.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(default="", max_length=320)
    password: str = Field(default="", max_length=255)
    form_id: Optional[str] = Field(default=None, max_length=FORM_ID_MAX_LENGTH, alias="formId")

    def to_credential(self) -> Credential:
        return Credential(email=self.email, password=self.password)


class SignUpRequest(BaseModel):
    """Request body for POST /api/v1/auth/sign-up.

    confirm_password is accepted as either confirm_password or the
    confirmPassword spelling browser clients send.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(default="", max_length=255)
    email: str = Field(default="", max_length=320)
    password: str = Field(default="", max_length=255)
    confirm_password: str = Field(default="", max_length=255, alias="confirmPassword")
    form_id: Optional[str] = Field(default=None, max_length=FORM_ID_MAX_LENGTH, alias="formId")

    def to_credential(self) -> Credential:
        return Credential(
            name=self.name,
            email=self.email,
            password=self.password,
            confirm_password=self.confirm_password,
        )


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class SubmissionResponse(BaseModel):
    """The form's state after one submission attempt.

    redirect_to is set only when the client should navigate (sign-in success);
    refresh tells it to reload server data after navigating.
    """

    model_config = ConfigDict(frozen=True)

    status: SubmissionStatus
    message: Optional[str] = None
    field_errors: dict[str, str] = Field(default_factory=dict)
    redirect_to: Optional[str] = None
    refresh: bool = False

    @classmethod
    def from_controller(cls, controller: AuthSubmissionController) -> "SubmissionResponse":
        navigation = controller.navigation
        return cls(
            status=controller.state.status,
            message=controller.state.message,
            field_errors=controller.field_errors,
            redirect_to=navigation.target if navigation else None,
            refresh=navigation.refresh if navigation else False,
        )


class SessionResponse(BaseModel):
    """Response for GET /api/v1/auth/session."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    email: str
    name: str
    expires_at: Optional[str] = None

    @classmethod
    def from_session(cls, session: Session) -> "SessionResponse":
        return cls(
            user_id=session.user_id,
            email=session.email,
            name=session.name,
            expires_at=session.expires_at,
        )


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
