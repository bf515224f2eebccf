"""
Unit tests for the shared/ utility modules.

Covers:
- shared.validators       (normalize_email, validate_email, is_valid_otp_format,
                           is_valid_api_key_format, validate_password)
- shared.generators       (generate_otp_code, generate_api_key,
                           generate_secure_token)
- shared.datetime_utils   (utcnow, as_utc, to_unix)
- shared.crypto           (hash_password, verify_password, hash_token)
- shared.logging_config   (redact_sensitive_fields)
"""

from __future__ import annotations

import hashlib
import re
from datetime import datetime, timedelta, timezone

import pytest

from shared.crypto import hash_password, hash_token, verify_password
from shared.datetime_utils import as_utc, to_unix, utcnow
from shared.generators import (
    API_KEY_PREFIX,
    generate_api_key,
    generate_otp_code,
    generate_secure_token,
)
from shared.logging_config import redact_sensitive_fields
from shared.validators import (
    is_valid_api_key_format,
    is_valid_otp_format,
    normalize_email,
    validate_email,
    validate_password,
)


# ---------------------------------------------------------------------------
# shared.validators
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "raw, expected",
    [("A@X.com", "a@x.com"), ("  a@x.com ", "a@x.com"), ("a@x.com", "a@x.com")],
    ids=["upper", "padded", "unchanged"],
)
def test_normalize_email(raw, expected):
    assert normalize_email(raw) == expected


@pytest.mark.parametrize(
    "email, expected",
    [
        ("a@x.com", True),
        ("first.last@sub.example.org", True),
        ("no-at-sign", False),
        ("a@nodot", False),
        ("a b@x.com", False),
        ("", False),
    ],
)
def test_validate_email(email, expected):
    assert validate_email(email) is expected


@pytest.mark.parametrize(
    "code, expected",
    [
        ("0417", True),
        ("0000", True),
        ("123", False),
        ("12345", False),
        ("12a4", False),
        ("١٢٣٤", False),  # non-ASCII digits
        ("٠٤١٧", False),
        ("0417\n", False),
        ("", False),
    ],
    ids=[
        "leading_zero",
        "zeros",
        "short",
        "long",
        "letter",
        "arabic_digits",
        "arabic_leading_zero",
        "trailing_newline",
        "empty",
    ],
)
def test_is_valid_otp_format(code, expected):
    assert is_valid_otp_format(code) is expected


def test_is_valid_api_key_format():
    assert is_valid_api_key_format(generate_api_key()) is True
    assert is_valid_api_key_format("ms_" + "A" * 48) is False
    assert is_valid_api_key_format("ms_abc") is False
    assert is_valid_api_key_format("sk_" + "a" * 48) is False
    assert is_valid_api_key_format(generate_api_key() + "\n") is False


def test_validate_email_rejects_trailing_newline():
    assert validate_email("a@x.com\n") is False


@pytest.mark.parametrize(
    "password, ok",
    [("abcdef", True), ("abcde", False), ("", False), ("x" * 128, True), ("x" * 129, False)],
    ids=["min", "too_short", "empty", "max", "too_long"],
)
def test_validate_password(password, ok):
    assert (validate_password(password) is None) is ok


# ---------------------------------------------------------------------------
# shared.generators
# ---------------------------------------------------------------------------


class TestGenerateOtpCode:
    @pytest.mark.parametrize("length", [4, 6])
    def test_length(self, length):
        assert len(generate_otp_code(length=length)) == length

    def test_default_is_four_digits(self):
        assert re.fullmatch(r"\d{4}", generate_otp_code())


class TestGenerateApiKey:
    def test_format(self):
        key = generate_api_key()
        assert key.startswith(API_KEY_PREFIX)
        assert re.fullmatch(r"ms_[0-9a-f]{48}", key)

    def test_unique(self):
        assert len({generate_api_key() for _ in range(1000)}) == 1000


class TestGenerateSecureToken:
    def test_url_safe_characters(self):
        assert re.match(r"^[A-Za-z0-9_\-]+$", generate_secure_token())

    def test_produces_variety(self):
        assert len({generate_secure_token() for _ in range(10)}) > 1


# ---------------------------------------------------------------------------
# shared.datetime_utils
# ---------------------------------------------------------------------------


def test_utcnow_is_aware():
    assert utcnow().tzinfo == timezone.utc


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, None),
        (datetime(2024, 1, 15, 12, 0), datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)),
        (
            datetime(2024, 1, 15, 14, 0, tzinfo=timezone(timedelta(hours=2))),
            datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc),
        ),
    ],
    ids=["none", "naive_assumed_utc", "offset_converted"],
)
def test_as_utc(value, expected):
    assert as_utc(value) == expected


def test_to_unix():
    assert to_unix(None) is None
    assert to_unix(datetime(1970, 1, 1, 0, 16, 40)) == 1000


# ---------------------------------------------------------------------------
# shared.crypto
# ---------------------------------------------------------------------------


class TestHashPassword:
    def test_differs_from_input(self):
        assert hash_password("secret") != "secret"

    def test_unique_salts(self):
        assert hash_password("same") != hash_password("same")


class TestVerifyPassword:
    @pytest.mark.parametrize(
        "candidate, expected",
        [("correct_password", True), ("wrong_password", False)],
        ids=["correct", "wrong"],
    )
    def test_verify(self, candidate, expected):
        h = hash_password("correct_password")
        assert verify_password(candidate, h) is expected

    def test_invalid_hash_returns_false(self):
        assert verify_password("any", "not-a-valid-hash") is False


def test_hash_token_known_value():
    assert hash_token("0417") == hashlib.sha256(b"0417").hexdigest()


def test_hash_token_distinct_inputs():
    assert hash_token("token_a") != hash_token("token_b")


# ---------------------------------------------------------------------------
# shared.logging_config
# ---------------------------------------------------------------------------


class TestRedaction:
    @pytest.mark.parametrize(
        "field",
        [
            "password",
            "smtp_password",
            "reset_token",
            "jwt_secret",
            "code",
            "otp",
            "key",
            "submitted_code",
            "presented_key",
            "otp_value",
            "Authorization",
        ],
    )
    def test_sensitive_fields_redacted(self, field):
        out = redact_sensitive_fields(None, "info", {"event": "x", field: "value"})
        assert out[field] == "***REDACTED***"

    def test_safe_fields_kept(self):
        out = redact_sensitive_fields(
            None, "info", {"event": "otp_issued", "otp_type": "signup", "user_id": "1"}
        )
        assert out == {"event": "otp_issued", "otp_type": "signup", "user_id": "1"}

    def test_identifier_fields_kept(self):
        event = {
            "event": "api_key_touch_failed",
            "key_id": "abc",
            "key_preview": "ms_1234...abcd",
            "status_code": 202,
        }
        assert redact_sensitive_fields(None, "info", dict(event)) == event
