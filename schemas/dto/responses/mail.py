"""
Response DTOs for SMTP credential endpoints.

SmtpCredentialsResponse - GET /api/smtp (200)
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from services.mail_credential_service import SmtpCredentialView
from shared.datetime_utils import to_unix


class SmtpCredentialsResponse(BaseModel):
    """Stored SMTP settings with the password masked.

    ``configured`` is False (and every other field null) when the account has
    not saved credentials yet.
    """

    model_config = ConfigDict(populate_by_name=True)

    configured: bool
    host: Optional[str] = None
    port: Optional[int] = None
    user: Optional[str] = None
    password: Optional[str] = None
    secure: Optional[bool] = None
    updated_at: Optional[int] = None

    @classmethod
    def from_view(cls, view: Optional[SmtpCredentialView]) -> "SmtpCredentialsResponse":
        if view is None:
            return cls(configured=False)
        return cls(
            configured=True,
            host=view.host,
            port=view.port,
            user=view.user,
            password=view.password,
            secure=view.secure,
            updated_at=to_unix(view.updated_at),
        )
