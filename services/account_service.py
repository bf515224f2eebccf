"""
Account flows built on the OTP challenge manager.

register / login / send_otp / verify_otp / reset_password.

A verified signup code flips ``email_verified``. A verified forgot-password
code mints a single-use reset grant; reset_password consumes that grant with
one guarded delete, so a second reset without a fresh code cycle fails.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from errors import (
    AuthenticationError,
    ConflictError,
    EmailNotVerifiedError,
    NotFoundError,
    OtpExpiredError,
    RateLimitError,
    ValidationError,
)
from infrastructure.cache.cooldown import ResendCooldown
from infrastructure.email.protocol import EmailProvider
from repositories.otp_repository import PasswordResetGrantRepository
from repositories.user_repository import UserRepository
from schemas.models.otp import OTP_TYPE_FORGOT_PASSWORD, OTP_TYPE_SIGNUP
from schemas.models.user import UserDoc
from services.otp_manager import MAX_ATTEMPTS, OtpChallengeManager, OtpOutcome
from services.token_service import TokenService
from shared.crypto import hash_password, hash_token, verify_password
from shared.datetime_utils import utcnow
from shared.generators import generate_secure_token
from shared.logging import get_logger, log_with_context
from shared.validators import normalize_email, validate_email, validate_password

log = get_logger(__name__)

RESET_GRANT_VALIDITY = timedelta(minutes=10)


@dataclass(frozen=True)
class SessionResult:
    user: UserDoc
    token: str


@dataclass(frozen=True)
class RegisterResult:
    user: UserDoc
    token: str
    verification_sent: bool


@dataclass(frozen=True)
class OtpVerification:
    otp_type: str
    # Only set for forgot-password; authorizes exactly one reset_password call
    reset_token: Optional[str] = None


class AccountService:
    def __init__(
        self,
        user_repo: UserRepository,
        otp_manager: OtpChallengeManager,
        grant_repo: PasswordResetGrantRepository,
        token_service: TokenService,
        email_provider: EmailProvider,
        cooldown: ResendCooldown,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._users = user_repo
        self._otp = otp_manager
        self._grants = grant_repo
        self._tokens = token_service
        self._email = email_provider
        self._cooldown = cooldown
        self._clock = clock

    def _session(self, user: UserDoc) -> str:
        return self._tokens.issue(str(user.id), user.email, user.user_name)

    async def register(
        self, user_name: str, email: str, password: str
    ) -> RegisterResult:
        user_name = user_name.strip()
        email = normalize_email(email)
        if not user_name:
            raise ValidationError("Username is required", field="user_name")
        if not validate_email(email):
            raise ValidationError("Invalid email address", field="email")
        password_error = validate_password(password)
        if password_error:
            raise ValidationError(password_error, field="password")

        existing = await self._users.find_by_email_or_user_name(email, user_name)
        if existing is not None:
            if existing.email == email:
                raise ConflictError("Email already registered", field="email")
            raise ConflictError("Username already taken", field="user_name")

        user = UserDoc(
            user_name=user_name,
            email=email,
            password_hash=hash_password(password),
            email_verified=False,
            created_at=self._clock(),
        )
        try:
            user_id = await self._users.insert(user)
        except DuplicateKeyError:
            # Lost a race with a concurrent signup for the same email/user name
            raise ConflictError("Email or username already registered") from None
        user = user.model_copy(update={"id": user_id})

        slog = log_with_context(log, user_id=str(user_id))
        slog.info("user_registered")

        code = await self._otp.issue(email, OTP_TYPE_SIGNUP)
        await self._cooldown.acquire(OTP_TYPE_SIGNUP, email)
        sent = await self._email.send_otp_email(email, user_name, code, OTP_TYPE_SIGNUP)
        if not sent:
            slog.warning("verification_email_not_sent")

        return RegisterResult(
            user=user, token=self._session(user), verification_sent=sent
        )

    async def login(self, email: str, password: str) -> SessionResult:
        user = await self._users.find_by_email(normalize_email(email))
        if user is None or not verify_password(password, user.password_hash):
            log.info("login_failed", reason="invalid_credentials")
            raise AuthenticationError("Invalid email or password")
        if not user.email_verified:
            log.info("login_failed", reason="email_not_verified", user_id=str(user.id))
            raise EmailNotVerifiedError(
                "Please verify your email before logging in", field="email"
            )

        log.info("login_success", user_id=str(user.id))
        return SessionResult(user=user, token=self._session(user))

    async def _check_cooldown(self, email: str, otp_type: str) -> None:
        if self._cooldown.enabled:
            if not await self._cooldown.acquire(otp_type, email):
                raise RateLimitError(
                    "Please wait before requesting another code",
                    details={"retry_after": self._cooldown.seconds},
                )
            return

        last = await self._otp.last_issued_at(email, otp_type)
        if last is None:
            return
        elapsed = (self._clock() - last).total_seconds()
        if elapsed < self._cooldown.seconds:
            raise RateLimitError(
                "Please wait before requesting another code",
                details={"retry_after": int(self._cooldown.seconds - elapsed) + 1},
            )

    async def send_otp(self, email: str, otp_type: str) -> bool:
        """Issue (or re-issue) a code and mail it. Returns whether the mail went out."""
        email = normalize_email(email)
        user = await self._users.find_by_email(email)
        if user is None:
            raise NotFoundError("No account found for this email", field="email")
        if otp_type == OTP_TYPE_SIGNUP and user.email_verified:
            raise ConflictError("Email is already verified", field="email")

        await self._check_cooldown(email, otp_type)

        code = await self._otp.issue(email, otp_type)
        sent = await self._email.send_otp_email(email, user.user_name, code, otp_type)
        if not sent:
            log.warning("otp_email_not_sent", otp_type=otp_type, user_id=str(user.id))
        return sent

    async def verify_otp(self, email: str, otp_type: str, code: str) -> OtpVerification:
        email = normalize_email(email)
        result = await self._otp.verify(email, otp_type, code)

        match result.outcome:
            case OtpOutcome.VERIFIED:
                pass
            case OtpOutcome.NOT_FOUND:
                raise NotFoundError("OTP not found or expired")
            case OtpOutcome.EXPIRED:
                raise OtpExpiredError("OTP has expired. Please request a new one.")
            case OtpOutcome.TOO_MANY_ATTEMPTS:
                raise RateLimitError(
                    "Too many failed attempts. Please request a new OTP."
                )
            case OtpOutcome.MISMATCH:
                raise ValidationError(
                    "Invalid OTP",
                    field="otp",
                    details={
                        "attempts_remaining": max(MAX_ATTEMPTS - result.attempts, 0)
                    },
                )

        if otp_type == OTP_TYPE_SIGNUP:
            await self._users.mark_email_verified(email)
            log.info("email_verified")
            return OtpVerification(otp_type=otp_type)

        reset_token = generate_secure_token()
        now = self._clock()
        await self._grants.replace(
            email, hash_token(reset_token), now, now + RESET_GRANT_VALIDITY
        )
        log.info("password_reset_granted")
        return OtpVerification(otp_type=OTP_TYPE_FORGOT_PASSWORD, reset_token=reset_token)

    async def reset_password(
        self, email: str, reset_token: str, password: str, confirm_password: str
    ) -> None:
        email = normalize_email(email)
        if password != confirm_password:
            raise ValidationError("Passwords do not match", field="confirm_password")
        password_error = validate_password(password)
        if password_error:
            raise ValidationError(password_error, field="password")

        now = self._clock()
        grant = await self._grants.consume(email, hash_token(reset_token), now)
        if grant is None:
            log.warning("password_reset_rejected", reason="no_valid_grant")
            raise AuthenticationError(
                "Password reset not authorized. Verify a new code first."
            )

        if not await self._users.update_password(email, hash_password(password), now):
            raise NotFoundError("Account not found")
        log.info("password_reset_success")

    async def get_account(self, account_id: ObjectId) -> UserDoc:
        user = await self._users.find_by_id(account_id)
        if user is None:
            raise NotFoundError("Account not found")
        return user
