"""
OTP endpoints.

POST /api/otp/send    - issue or re-issue a code (60 s resend cooldown)
POST /api/otp/verify  - check a code; forgot-password returns a reset token
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from dependencies import get_account_service
from schemas.dto.requests.otp import SendOtpRequest, VerifyOtpRequest
from schemas.dto.responses.auth import SendOtpResponse, VerifyOtpResponse
from services.account_service import AccountService

router = APIRouter(prefix="/api/otp", tags=["otp"])


@router.post("/send", response_model=SendOtpResponse)
async def send_otp(
    body: SendOtpRequest,
    accounts: AccountService = Depends(get_account_service),
) -> SendOtpResponse:
    sent = await accounts.send_otp(body.email, body.otp_type)
    return SendOtpResponse(success=True, email_sent=sent)


@router.post("/verify", response_model=VerifyOtpResponse, response_model_exclude_none=True)
async def verify_otp(
    body: VerifyOtpRequest,
    accounts: AccountService = Depends(get_account_service),
) -> VerifyOtpResponse:
    result = await accounts.verify_otp(body.email, body.otp_type, body.otp)
    return VerifyOtpResponse(
        message="OTP verified successfully",
        verified=True,
        reset_token=result.reset_token,
    )
