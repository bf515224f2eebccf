"""
FastAPI dependency providers.

Process-wide objects (settings, database, Redis, TokenService, SecretCipher,
EmailProvider) are created once in the app lifespan and read from app.state.
Repositories and services are cheap wrappers and are built per request on
top of them.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, Request

from config import AppSettings
from errors import AuthenticationError
from infrastructure.cache.cooldown import ResendCooldown
from infrastructure.email.protocol import EmailProvider
from repositories import collections
from repositories.api_key_repository import ApiKeyRepository
from repositories.mail_credential_repository import SmtpCredentialRepository
from repositories.otp_repository import OtpRepository, PasswordResetGrantRepository
from repositories.user_repository import UserRepository
from services.account_service import AccountService
from services.api_key_service import ApiKeyService
from services.auth_resolver import AuthResolver, Identity
from services.mail_credential_service import MailCredentialService
from services.otp_manager import OtpChallengeManager
from services.secret_cipher import SecretCipher
from services.token_service import TokenService


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


async def get_db(request: Request):
    """Return the async MongoDB database from app.state."""
    return request.app.state.db


async def get_redis(request: Request):
    """Return the async Redis client from app.state (None if not configured)."""
    return request.app.state.redis


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_secret_cipher(request: Request) -> SecretCipher:
    return request.app.state.secret_cipher


def get_email_provider(request: Request) -> EmailProvider:
    return request.app.state.email_provider


async def get_api_key_service(db=Depends(get_db)) -> ApiKeyService:
    return ApiKeyService(ApiKeyRepository(db[collections.API_KEYS]))


async def get_otp_manager(db=Depends(get_db)) -> OtpChallengeManager:
    return OtpChallengeManager(OtpRepository(db[collections.OTP_CHALLENGES]))


async def get_account_service(
    db=Depends(get_db),
    redis=Depends(get_redis),
    settings: AppSettings = Depends(get_settings),
    otp_manager: OtpChallengeManager = Depends(get_otp_manager),
    token_service: TokenService = Depends(get_token_service),
    email_provider: EmailProvider = Depends(get_email_provider),
) -> AccountService:
    return AccountService(
        user_repo=UserRepository(db[collections.USERS]),
        otp_manager=otp_manager,
        grant_repo=PasswordResetGrantRepository(db[collections.PASSWORD_RESET_GRANTS]),
        token_service=token_service,
        email_provider=email_provider,
        cooldown=ResendCooldown(redis, settings.otp.otp_resend_cooldown_seconds),
    )


async def get_mail_credential_service(
    db=Depends(get_db),
    cipher: SecretCipher = Depends(get_secret_cipher),
) -> MailCredentialService:
    return MailCredentialService(
        SmtpCredentialRepository(db[collections.SMTP_CREDENTIALS]), cipher
    )


async def get_auth_resolver(
    token_service: TokenService = Depends(get_token_service),
    api_key_service: ApiKeyService = Depends(get_api_key_service),
) -> AuthResolver:
    return AuthResolver(token_service, api_key_service)


async def get_current_identity(
    authorization: Optional[str] = Header(default=None),
    resolver: AuthResolver = Depends(get_auth_resolver),
) -> Identity:
    """Require a valid bearer credential (session token or API key).

    Every failure produces the same 401 so callers cannot tell a revoked key
    from an expired token.
    """
    identity = await resolver.resolve(authorization)
    if not isinstance(identity, Identity):
        raise AuthenticationError("Invalid or expired credentials")
    return identity
