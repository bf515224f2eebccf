"""
Account endpoints.

POST /api/auth/signup          - create account, mail signup OTP (201)
POST /api/auth/login           - session token for a verified account
POST /api/auth/reset-password  - replace password with a reset grant
GET  /api/auth/me              - the authenticated account
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from dependencies import get_account_service, get_current_identity
from schemas.dto.requests.auth import (
    LoginRequest,
    ResetPasswordRequest,
    SignupRequest,
)
from schemas.dto.responses.auth import (
    LoginResponse,
    MeResponse,
    SignupResponse,
    UserProfileResponse,
)
from schemas.dto.responses.common import MessageResponse
from services.account_service import AccountService
from services.auth_resolver import Identity

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", status_code=201, response_model=SignupResponse)
async def signup(
    body: SignupRequest,
    accounts: AccountService = Depends(get_account_service),
) -> SignupResponse:
    result = await accounts.register(body.user_name, body.email, body.password)
    return SignupResponse(
        token=result.token,
        user=UserProfileResponse.from_user(result.user),
        requires_verification=True,
        verification_sent=result.verification_sent,
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    accounts: AccountService = Depends(get_account_service),
) -> LoginResponse:
    result = await accounts.login(body.email, body.password)
    return LoginResponse(
        token=result.token, user=UserProfileResponse.from_user(result.user)
    )


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    body: ResetPasswordRequest,
    accounts: AccountService = Depends(get_account_service),
) -> MessageResponse:
    await accounts.reset_password(
        body.email, body.reset_token, body.password, body.confirm_password
    )
    return MessageResponse(success=True, message="Password reset successfully")


@router.get("/me", response_model=MeResponse)
async def me(
    identity: Identity = Depends(get_current_identity),
    accounts: AccountService = Depends(get_account_service),
) -> MeResponse:
    user = await accounts.get_account(identity.object_id)
    return MeResponse(
        auth_method=identity.auth_method, user=UserProfileResponse.from_user(user)
    )
