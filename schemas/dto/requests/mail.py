"""
Request DTOs for SMTP credential endpoints.

SaveSmtpCredentialsRequest - POST /api/smtp
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SaveSmtpCredentialsRequest(BaseModel):
    """Request body for POST /api/smtp.

    ``user`` and ``password`` are encrypted before they reach the store.
    """

    model_config = ConfigDict(populate_by_name=True)

    host: str = Field(min_length=1, max_length=255)
    port: int = Field(ge=1, le=65535)
    user: str = Field(min_length=1)
    password: str = Field(min_length=1)
    secure: bool = True

    @field_validator("host", mode="after")
    @classmethod
    def _strip_host(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("host is required")
        return v
