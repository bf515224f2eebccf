"""
OTP challenge state machine, one challenge per (email, otp_type).

    absent → pending → verified | expired | exhausted

verify() checks, in order: missing → expired → attempts used up → wrong code
→ correct code. Each check is a guarded single-document store operation (see
OtpRepository), so concurrent submissions are charged one at a time and a
challenge is consumed at most once. Terminal outcomes delete the record.

Attempt limiting lives here and only here; callers add nothing on top apart
from their own resend cooldown.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Optional

from repositories.otp_repository import OtpRepository
from schemas.models.otp import OTP_TYPES
from shared.crypto import hash_token
from shared.datetime_utils import as_utc, utcnow
from shared.generators import generate_otp_code
from shared.logging import get_logger
from shared.validators import normalize_email

log = get_logger(__name__)

OTP_LENGTH = 4
OTP_VALIDITY = timedelta(minutes=10)
MAX_ATTEMPTS = 3

# A concurrent issue/verify can move the record between two guarded steps;
# the sequence is replayed a few times before giving up.
_MAX_PASSES = 3


class OtpOutcome(str, Enum):
    VERIFIED = "verified"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    TOO_MANY_ATTEMPTS = "too_many_attempts"
    MISMATCH = "mismatch"


@dataclass(frozen=True)
class OtpVerifyResult:
    outcome: OtpOutcome
    attempts: int = 0


class OtpChallengeManager:
    def __init__(
        self,
        repository: OtpRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._repo = repository
        self._clock = clock

    async def issue(self, email: str, otp_type: str) -> str:
        """Create or replace the pending challenge and return its plain code."""
        _check_type(otp_type)
        email = normalize_email(email)
        code = generate_otp_code(OTP_LENGTH)
        now = self._clock()
        await self._repo.upsert_challenge(
            email, otp_type, hash_token(code), now, now + OTP_VALIDITY
        )
        log.info("otp_issued", otp_type=otp_type)
        return code

    async def verify(self, email: str, otp_type: str, code: str) -> OtpVerifyResult:
        _check_type(otp_type)
        email = normalize_email(email)
        code_hash = hash_token(code)

        for _ in range(_MAX_PASSES):
            now = self._clock()

            if await self._repo.delete_if_expired(email, otp_type, now):
                log.info("otp_verification_failed", otp_type=otp_type, reason="expired")
                return OtpVerifyResult(OtpOutcome.EXPIRED)

            exhausted = await self._repo.delete_if_exhausted(
                email, otp_type, MAX_ATTEMPTS
            )
            if exhausted:
                log.warning(
                    "otp_verification_failed",
                    otp_type=otp_type,
                    reason="max_attempts",
                )
                return OtpVerifyResult(
                    OtpOutcome.TOO_MANY_ATTEMPTS, exhausted.attempts
                )

            consumed = await self._repo.consume_if_matching(
                email, otp_type, code_hash, now, MAX_ATTEMPTS
            )
            if consumed:
                log.info("otp_verified_success", otp_type=otp_type)
                return OtpVerifyResult(OtpOutcome.VERIFIED, consumed.attempts)

            charged = await self._repo.charge_mismatch(
                email, otp_type, code_hash, now, MAX_ATTEMPTS
            )
            if charged:
                log.info(
                    "otp_verification_failed",
                    otp_type=otp_type,
                    reason="mismatch",
                    attempts=charged.attempts,
                )
                return OtpVerifyResult(OtpOutcome.MISMATCH, charged.attempts)

            if await self._repo.find(email, otp_type) is None:
                return OtpVerifyResult(OtpOutcome.NOT_FOUND)

        log.warning("otp_verification_contended", otp_type=otp_type)
        return OtpVerifyResult(OtpOutcome.NOT_FOUND)

    async def last_issued_at(self, email: str, otp_type: str) -> Optional[datetime]:
        """When the pending challenge was issued, or None if there is none."""
        _check_type(otp_type)
        challenge = await self._repo.find(normalize_email(email), otp_type)
        if challenge is None:
            return None
        return as_utc(challenge.created_at)


def _check_type(otp_type: str) -> None:
    if otp_type not in OTP_TYPES:
        raise ValueError(f"Unknown OTP type: {otp_type!r}")
