"""Unit tests for auth/taxonomy.py -- provider error code resolution.

Covers:
- Every known code for each mode maps to its fixed message
- Codes only count for their own mode
- Precedence: known code > message > fallback
- Accepted error shapes: IdentityError, Failure, mapping, None
"""

import pytest

from auth.models import AuthMode, Failure, IdentityError
from auth.taxonomy import FALLBACK_MESSAGES, SIGN_IN_ERRORS, SIGN_UP_ERRORS, resolve


@pytest.mark.parametrize(
    ("code", "expected"),
    [
        ("AuthMissingEmailVerification", "Please verify your email before logging in"),
        ("AuthInvalidCredentials", "Invalid email or password"),
        ("AuthUserBlocked", "Your account has been blocked. Please contact support."),
    ],
)
def test_sign_in_codes(code: str, expected: str) -> None:
    assert resolve(AuthMode.sign_in, IdentityError(code=code)) == expected


@pytest.mark.parametrize(
    ("code", "expected"),
    [
        ("AuthUserAlreadyExists", "This email address is already registered."),
        ("AuthInvalidEmail", "Please provide a valid email address."),
        ("AuthWeakPassword", "Password is too weak. Please choose a stronger password."),
    ],
)
def test_sign_up_codes(code: str, expected: str) -> None:
    assert resolve(AuthMode.sign_up, IdentityError(code=code)) == expected


def test_known_code_beats_message() -> None:
    error = Failure(code="AuthUserBlocked", message="user is blocked (raw)")
    assert resolve(AuthMode.sign_in, error) == "Your account has been blocked. Please contact support."


def test_code_from_other_mode_is_not_recognised() -> None:
    error = IdentityError(code="AuthUserAlreadyExists")
    assert resolve(AuthMode.sign_in, error) == "Invalid email or password"


def test_unknown_code_falls_through_to_message() -> None:
    error = IdentityError(code="INVALID_EMAIL_OR_PASSWORD", message="Invalid email or password.")
    assert resolve(AuthMode.sign_in, error) == "Invalid email or password."


def test_message_used_verbatim_without_code() -> None:
    assert resolve(AuthMode.sign_in, {"code": None, "message": "custom text"}) == "custom text"


def test_fallback_when_nothing_usable() -> None:
    assert resolve(AuthMode.sign_in, {"code": None, "message": None}) == "Invalid email or password"
    assert resolve(AuthMode.sign_up, Failure()) == "Failed to sign up. Please try again."


def test_empty_message_uses_fallback() -> None:
    assert resolve(AuthMode.sign_up, IdentityError(message="")) == FALLBACK_MESSAGES[AuthMode.sign_up]


@pytest.mark.parametrize("error", [None, {}, object(), {"code": 42, "message": ["x"]}])
def test_resolve_is_total(error) -> None:
    assert resolve(AuthMode.sign_in, error) == FALLBACK_MESSAGES[AuthMode.sign_in]


def test_tables_are_read_only() -> None:
    with pytest.raises(TypeError):
        SIGN_IN_ERRORS["AuthUserBlocked"] = "changed"  # type: ignore[index]
    with pytest.raises(TypeError):
        SIGN_UP_ERRORS["New"] = "added"  # type: ignore[index]
