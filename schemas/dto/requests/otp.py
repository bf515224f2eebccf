"""
Request DTOs for OTP endpoints.

SendOtpRequest    - POST /api/otp/send
VerifyOtpRequest  - POST /api/otp/verify

The purpose travels as ``type`` in JSON bodies.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shared.validators import is_valid_otp_format

OtpTypeField = Literal["signup", "forgot-password"]


class SendOtpRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str
    otp_type: OtpTypeField = Field(alias="type")


class VerifyOtpRequest(BaseModel):
    """``otp`` must be exactly four ASCII digits; leading zeros count."""

    model_config = ConfigDict(populate_by_name=True)

    email: str
    otp: str
    otp_type: OtpTypeField = Field(alias="type")

    @field_validator("otp", mode="after")
    @classmethod
    def _validate_otp(cls, v: str) -> str:
        if not is_valid_otp_format(v):
            raise ValueError("otp must be exactly 4 digits")
        return v
