"""
Random code and token generators.

All generators use the ``secrets`` module.
"""

from __future__ import annotations

import secrets
import string

API_KEY_PREFIX = "ms_"
API_KEY_RANDOM_BYTES = 24


def generate_otp_code(length: int = 4) -> str:
    """Generate a numeric OTP; leading zeros are kept.

    Args:
        length: Number of digits (default 4).

    Returns:
        String of random decimal digits.
    """
    return "".join(secrets.choice(string.digits) for _ in range(length))


def generate_api_key() -> str:
    """Generate a full API key: ``ms_`` followed by 48 lowercase hex chars."""
    return API_KEY_PREFIX + secrets.token_hex(API_KEY_RANDOM_BYTES)


def generate_secure_token(length: int = 32) -> str:
    """Generate a cryptographically secure URL-safe random token.

    Args:
        length: Number of random bytes before base64 encoding (default 32).
            The resulting string will be longer than *length* characters.

    Returns:
        URL-safe base64-encoded token string.
    """
    return secrets.token_urlsafe(length)
