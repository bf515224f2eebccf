"""
Response DTOs for account and OTP endpoints.

UserProfileResponse  - user shape embedded in signup/login/me
LoginResponse        - POST /api/auth/login  (200)
SignupResponse       - POST /api/auth/signup  (201)
MeResponse           - GET /api/auth/me  (200)
SendOtpResponse      - POST /api/otp/send  (200)
VerifyOtpResponse    - POST /api/otp/verify  (200)
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from schemas.models.user import UserDoc
from shared.datetime_utils import to_unix


class UserProfileResponse(BaseModel):
    """Public view of an account. Never carries the password hash."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    user_name: str
    email_verified: bool
    created_at: Optional[int] = None  # Unix timestamp

    @classmethod
    def from_user(cls, user: UserDoc) -> "UserProfileResponse":
        return cls(
            id=str(user.id),
            email=user.email,
            user_name=user.user_name,
            email_verified=user.email_verified,
            created_at=to_unix(user.created_at),
        )


class LoginResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str
    user: UserProfileResponse


class SignupResponse(BaseModel):
    """Response body for POST /api/auth/signup (201)."""

    model_config = ConfigDict(populate_by_name=True)

    token: str
    user: UserProfileResponse
    requires_verification: bool
    verification_sent: bool


class MeResponse(BaseModel):
    """Response body for GET /api/auth/me.

    ``auth_method`` is ``"token"`` or ``"api_key"``.
    """

    model_config = ConfigDict(populate_by_name=True)

    auth_method: str
    user: UserProfileResponse


class SendOtpResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    email_sent: bool


class VerifyOtpResponse(BaseModel):
    """``reset_token`` is present only for a verified forgot-password code."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    verified: bool
    reset_token: Optional[str] = None
