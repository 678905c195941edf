"""
auth/taxonomy.py -- Provider error code -> user-facing message.

resolve() reconciles what the identity service sends back (a known code, an
unknown code, a free-text message, or nothing) into one banner string.
Precedence, first match wins:
  1. code is a known entry for the mode -> that entry's fixed message
  2. message is non-empty               -> message verbatim
  3. otherwise                          -> the mode's generic fallback

The tables are read-only mappings built once at import. resolve() is total:
it never raises and always returns a string.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Optional

from auth.models import AuthMode

SIGN_IN_ERRORS: Mapping[str, str] = MappingProxyType(
    {
        "AuthMissingEmailVerification": "Please verify your email before logging in",
        "AuthInvalidCredentials": "Invalid email or password",
        "AuthUserBlocked": "Your account has been blocked. Please contact support.",
    }
)

SIGN_UP_ERRORS: Mapping[str, str] = MappingProxyType(
    {
        "AuthUserAlreadyExists": "This email address is already registered.",
        "AuthInvalidEmail": "Please provide a valid email address.",
        "AuthWeakPassword": "Password is too weak. Please choose a stronger password.",
    }
)

_TABLES: Mapping[AuthMode, Mapping[str, str]] = MappingProxyType(
    {
        AuthMode.sign_in: SIGN_IN_ERRORS,
        AuthMode.sign_up: SIGN_UP_ERRORS,
    }
)

FALLBACK_MESSAGES: Mapping[AuthMode, str] = MappingProxyType(
    {
        AuthMode.sign_in: "Invalid email or password",
        AuthMode.sign_up: "Failed to sign up. Please try again.",
    }
)


def _field(error: Any, name: str) -> Optional[str]:
    """Read code/message from an error object or a plain mapping."""
    if error is None:
        return None
    if isinstance(error, Mapping):
        value = error.get(name)
    else:
        value = getattr(error, name, None)
    return value if isinstance(value, str) else None


def resolve(mode: AuthMode, error: Any = None) -> str:
    """Return the display message for an identity service error.

    Args:
        mode:  sign_in or sign_up -- codes are only recognised for their own mode.
        error: IdentityError, Failure, a {"code", "message"} mapping, or None.
    """
    mode = AuthMode(mode)
    code = _field(error, "code")
    if code is not None and code in _TABLES[mode]:
        return _TABLES[mode][code]
    message = _field(error, "message")
    if message:
        return message
    return FALLBACK_MESSAGES[mode]
