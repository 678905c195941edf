"""Unit tests for credential validation in auth/validation.py.

Covers:
- Per-field rules for sign-in and sign-up
- All violations collected at once (no short-circuit)
- confirm_password mismatch reported on confirm_password only
- Determinism: same input, same result
"""

import pytest

from auth.models import AuthMode, Credential
from auth.validation import (
    MSG_CONFIRM_REQUIRED,
    MSG_EMAIL_INVALID,
    MSG_EMAIL_REQUIRED,
    MSG_NAME_REQUIRED,
    MSG_PASSWORD_REQUIRED,
    MSG_PASSWORD_TOO_SHORT,
    MSG_PASSWORDS_DIFFER,
    validate,
)


def _sign_up(**overrides) -> Credential:
    values = {
        "name": "Alice",
        "email": "alice@example.com",
        "password": "longenough1",
        "confirm_password": "longenough1",
    }
    values.update(overrides)
    return Credential(**values)


class TestSignIn:
    def test_valid_credential(self) -> None:
        result = validate(Credential(email="a@b.com", password="password1"), AuthMode.sign_in)
        assert result.is_valid
        assert result.errors == {"email": None, "password": None}

    def test_short_password_fails_on_password_only(self) -> None:
        result = validate(Credential(email="a@b.com", password="short"), AuthMode.sign_in)
        assert not result.is_valid
        assert result.field_errors() == {"password": MSG_PASSWORD_TOO_SHORT}

    @pytest.mark.parametrize("password", ["", "a", "1234567"])
    def test_password_under_minimum_length(self, password: str) -> None:
        result = validate(Credential(email="a@b.com", password=password), AuthMode.sign_in)
        assert result.error_for("password") in (MSG_PASSWORD_REQUIRED, MSG_PASSWORD_TOO_SHORT)

    def test_password_exactly_minimum_length(self) -> None:
        result = validate(Credential(email="a@b.com", password="12345678"), AuthMode.sign_in)
        assert result.error_for("password") is None

    def test_empty_fields_use_required_messages(self) -> None:
        result = validate(Credential(), AuthMode.sign_in)
        assert result.field_errors() == {
            "email": MSG_EMAIL_REQUIRED,
            "password": MSG_PASSWORD_REQUIRED,
        }

    def test_sign_up_fields_ignored(self) -> None:
        result = validate(Credential(email="a@b.com", password="password1", name=""), AuthMode.sign_in)
        assert "name" not in result.errors
        assert "confirm_password" not in result.errors


class TestEmailFormat:
    @pytest.mark.parametrize(
        "email",
        [
            "a@b.com",
            "alice@example.com",
            "first.last@sub.example.co.uk",
            "user+tag@example.org",
            "o'brien@example.ie",
            "UPPER@EXAMPLE.COM",
            "x_y-z@my-domain.io",
        ],
    )
    def test_well_formed_addresses_pass(self, email: str) -> None:
        result = validate(Credential(email=email, password="password1"), AuthMode.sign_in)
        assert result.error_for("email") is None

    @pytest.mark.parametrize(
        "email",
        [
            "plainaddress",
            "@example.com",
            "alice@",
            "alice@example",
            "alice@example.c",
            ".alice@example.com",
            "al..ice@example.com",
            "alice example@example.com",
            "alice@-example.com",
            "alice@example.com\n",
            "alice@example.com\n\n",
        ],
    )
    def test_malformed_addresses_fail(self, email: str) -> None:
        result = validate(Credential(email=email, password="password1"), AuthMode.sign_in)
        assert result.error_for("email") == MSG_EMAIL_INVALID
        assert result.error_for("password") is None


class TestSignUp:
    def test_valid_credential(self) -> None:
        result = validate(_sign_up(), AuthMode.sign_up)
        assert result.is_valid
        assert set(result.errors) == {"name", "email", "password", "confirm_password"}

    def test_mismatch_reported_on_confirm_password_only(self) -> None:
        result = validate(_sign_up(confirm_password="different"), AuthMode.sign_up)
        assert result.field_errors() == {"confirm_password": MSG_PASSWORDS_DIFFER}
        assert result.error_for("password") is None

    def test_missing_confirm_password(self) -> None:
        result = validate(_sign_up(confirm_password=""), AuthMode.sign_up)
        assert result.field_errors() == {"confirm_password": MSG_CONFIRM_REQUIRED}

    @pytest.mark.parametrize("name", ["", "Al"])
    def test_name_too_short(self, name: str) -> None:
        result = validate(_sign_up(name=name), AuthMode.sign_up)
        assert result.field_errors() == {"name": MSG_NAME_REQUIRED}

    def test_all_violations_collected(self) -> None:
        result = validate(
            Credential(name="", email="bad", password="short", confirm_password="other"),
            AuthMode.sign_up,
        )
        assert result.field_errors() == {
            "name": MSG_NAME_REQUIRED,
            "email": MSG_EMAIL_INVALID,
            "password": MSG_PASSWORD_TOO_SHORT,
            "confirm_password": MSG_PASSWORDS_DIFFER,
        }

    def test_short_password_not_duplicated_when_confirmation_matches(self) -> None:
        result = validate(_sign_up(password="short", confirm_password="short"), AuthMode.sign_up)
        assert result.field_errors() == {"password": MSG_PASSWORD_TOO_SHORT}


def test_validate_is_deterministic() -> None:
    credential = Credential(name="", email="nope", password="123", confirm_password="x")
    first = validate(credential, AuthMode.sign_up)
    second = validate(credential, AuthMode.sign_up)
    assert first == second


def test_mode_accepts_plain_string() -> None:
    result = validate(_sign_up(), "sign_up")
    assert "confirm_password" in result.errors
