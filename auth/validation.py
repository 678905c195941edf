"""
auth/validation.py -- Client-side credential validation.

validate() is a pure function: no I/O, no state, same input -> same result.
Every field is checked independently and all violations are collected, so
the form can show every inline error at once. The one cross-field rule
(confirm_password == password) is reported on confirm_password only.

Messages are user-facing and shown next to the offending field.
"""

from __future__ import annotations

import re
from typing import Optional

from auth.models import AuthMode, Credential, ValidationResult

# Standard address format: no leading dot, no consecutive dots in the local
# part, dotted domain ending in a 2+ letter TLD.
EMAIL_PATTERN = re.compile(
    r"^(?!\.)(?!.*\.\.)([A-Z0-9_'+\-\.]*)[A-Z0-9_+-]@([A-Z0-9][A-Z0-9\-]*\.)+[A-Z]{2,}$",
    re.IGNORECASE,
)

PASSWORD_MIN_LENGTH = 8
NAME_MIN_LENGTH = 3

MSG_EMAIL_REQUIRED = "Please enter your email"
MSG_EMAIL_INVALID = "Invalid email address"
MSG_PASSWORD_REQUIRED = "Please enter your password"
MSG_PASSWORD_TOO_SHORT = f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"
MSG_NAME_REQUIRED = "Please enter your name"
MSG_CONFIRM_REQUIRED = "Please confirm your password"
MSG_PASSWORDS_DIFFER = "Passwords don't match."


def _check_email(email: str) -> Optional[str]:
    if not email:
        return MSG_EMAIL_REQUIRED
    if not EMAIL_PATTERN.fullmatch(email):
        return MSG_EMAIL_INVALID
    return None


def _check_password(password: str) -> Optional[str]:
    if not password:
        return MSG_PASSWORD_REQUIRED
    if len(password) < PASSWORD_MIN_LENGTH:
        return MSG_PASSWORD_TOO_SHORT
    return None


def _check_name(name: str) -> Optional[str]:
    if len(name) < NAME_MIN_LENGTH:
        return MSG_NAME_REQUIRED
    return None


def _check_confirm_password(password: str, confirm_password: str) -> Optional[str]:
    if not confirm_password:
        return MSG_CONFIRM_REQUIRED
    if confirm_password != password:
        return MSG_PASSWORDS_DIFFER
    return None


def validate(credential: Credential, mode: AuthMode) -> ValidationResult:
    """Validate raw form input for the given mode.

    Sign-in checks email and password. Sign-up additionally checks name and
    confirm_password. The result maps every checked field to None or one
    message; the form is submittable only when ValidationResult.is_valid.
    """
    errors: dict[str, Optional[str]] = {}
    if mode == AuthMode.sign_up:
        errors["name"] = _check_name(credential.name)
    errors["email"] = _check_email(credential.email)
    errors["password"] = _check_password(credential.password)
    if mode == AuthMode.sign_up:
        errors["confirm_password"] = _check_confirm_password(credential.password, credential.confirm_password)
    return ValidationResult(errors=errors)
