"""
OTP challenge document models.

Maps to the `otp_challenges` and `password_reset_grants` MongoDB collections.

One live challenge per (email, otp_type), enforced by a unique index and by
issuing through an upsert. code_hash stores SHA-256(code); the plain 4-digit
code is only ever held in memory long enough to be emailed.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from schemas.models.base import MongoBaseModel

OTP_TYPE_SIGNUP = "signup"
OTP_TYPE_FORGOT_PASSWORD = "forgot-password"
OTP_TYPES = frozenset({OTP_TYPE_SIGNUP, OTP_TYPE_FORGOT_PASSWORD})


class OtpChallengeDoc(MongoBaseModel):
    """Document model for the `otp_challenges` collection."""

    email: str
    otp_type: str
    code_hash: str
    attempts: int = Field(default=0, ge=0)
    created_at: datetime
    expires_at: datetime


class PasswordResetGrantDoc(MongoBaseModel):
    """
    Document model for the `password_reset_grants` collection.

    Written when a forgot-password OTP verifies; consumed (deleted) by exactly
    one password reset.
    """

    email: str
    token_hash: str
    created_at: datetime
    expires_at: datetime
