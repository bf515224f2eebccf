"""
Request DTOs for account endpoints.

SignupRequest         - POST /api/auth/signup
LoginRequest          - POST /api/auth/login
ResetPasswordRequest  - POST /api/auth/reset-password

Password strength is checked by the account service so the error carries the
same message whichever route submits it.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SignupRequest(BaseModel):
    """Request body for POST /api/auth/signup."""

    model_config = ConfigDict(populate_by_name=True)

    user_name: str = Field(min_length=1, max_length=64)
    email: str = Field(max_length=254)
    password: str

    @field_validator("user_name", mode="after")
    @classmethod
    def _user_name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("user_name is required")
        return v


class LoginRequest(BaseModel):
    """Request body for POST /api/auth/login."""

    model_config = ConfigDict(populate_by_name=True)

    email: str
    password: str


class ResetPasswordRequest(BaseModel):
    """Request body for POST /api/auth/reset-password.

    ``reset_token`` is the value returned by a verified forgot-password OTP.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: str
    reset_token: str = Field(min_length=1)
    password: str
    confirm_password: str
