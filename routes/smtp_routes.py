"""
SMTP credential endpoints. All require a bearer credential.

GET  /api/smtp - stored settings, password masked
POST /api/smtp - save (encrypt + upsert) settings
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from dependencies import get_current_identity, get_mail_credential_service
from schemas.dto.requests.mail import SaveSmtpCredentialsRequest
from schemas.dto.responses.common import MessageResponse
from schemas.dto.responses.mail import SmtpCredentialsResponse
from services.auth_resolver import Identity
from services.mail_credential_service import MailCredentialService

router = APIRouter(prefix="/api/smtp", tags=["smtp"])


@router.get("", response_model=SmtpCredentialsResponse)
async def get_smtp_credentials(
    identity: Identity = Depends(get_current_identity),
    credentials: MailCredentialService = Depends(get_mail_credential_service),
) -> SmtpCredentialsResponse:
    view = await credentials.get_redacted(identity.object_id)
    return SmtpCredentialsResponse.from_view(view)


@router.post("", response_model=MessageResponse)
async def save_smtp_credentials(
    body: SaveSmtpCredentialsRequest,
    identity: Identity = Depends(get_current_identity),
    credentials: MailCredentialService = Depends(get_mail_credential_service),
) -> MessageResponse:
    await credentials.save(
        identity.object_id,
        host=body.host,
        port=body.port,
        user=body.user,
        password=body.password,
        secure=body.secure,
    )
    return MessageResponse(success=True, message="SMTP credentials saved")
