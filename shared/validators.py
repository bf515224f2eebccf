"""
Input validators and normalisers. Pure functions, no I/O.
"""

from __future__ import annotations

import re
from typing import Optional

# Matched with fullmatch(); [0-9] keeps non-ASCII digits out
OTP_PATTERN = re.compile(r"[0-9]{4}")
API_KEY_PATTERN = re.compile(r"ms_[0-9a-f]{48}")
EMAIL_PATTERN = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")

MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_LENGTH = 128


def normalize_email(email: str) -> str:
    """Trim and lower-case an email address for storage and lookups."""
    return email.strip().lower()


def validate_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.fullmatch(email or ""))


def is_valid_otp_format(code: str) -> bool:
    """Return True for exactly four ASCII digits."""
    return bool(OTP_PATTERN.fullmatch(code or ""))


def is_valid_api_key_format(key: str) -> bool:
    return bool(API_KEY_PATTERN.fullmatch(key or ""))


def validate_password(password: str) -> Optional[str]:
    """
    Check a new password against the account password rules.

    Returns:
        None if the password is acceptable, otherwise a user-facing message.
    """
    if not password:
        return "Password is required"
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    if len(password) > MAX_PASSWORD_LENGTH:
        return f"Password must be at most {MAX_PASSWORD_LENGTH} characters"
    return None
