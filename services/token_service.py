"""
Session tokens: HS256 JWTs with a fixed 7-day lifetime.

verify() never raises: a bad signature, a malformed token and an expired
token all come back as None so callers treat them the same way.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from config import JWTSettings
from errors import ConfigurationError
from shared.datetime_utils import utcnow
from shared.logging import get_logger

log = get_logger(__name__)

ALGORITHM = "HS256"
_REQUIRED_CLAIMS = ["sub", "iat", "exp", "iss", "aud"]


@dataclass(frozen=True)
class SessionClaims:
    account_id: str
    email: str
    user_name: str
    issued_at: datetime
    expires_at: datetime


class TokenService:
    def __init__(self, settings: JWTSettings) -> None:
        if not settings.jwt_secret:
            raise ConfigurationError("JWT_SECRET must be set")
        self._secret = settings.jwt_secret
        self._issuer = settings.jwt_issuer
        self._audience = settings.jwt_audience
        self._ttl = timedelta(seconds=settings.session_token_ttl_seconds)

    def issue(
        self,
        account_id: str,
        email: str,
        user_name: str,
        now: Optional[datetime] = None,
    ) -> str:
        issued_at = now or utcnow()
        claims = {
            "iss": self._issuer,
            "aud": self._audience,
            "sub": str(account_id),
            "email": email,
            "user_name": user_name,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self._ttl).timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> Optional[SessionClaims]:
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                audience=self._audience,
                issuer=self._issuer,
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.InvalidTokenError as e:
            log.debug("session_token_rejected", reason=type(e).__name__)
            return None

        email = claims.get("email")
        user_name = claims.get("user_name")
        if not isinstance(email, str) or not isinstance(user_name, str):
            log.debug("session_token_rejected", reason="missing_identity_claims")
            return None

        return SessionClaims(
            account_id=claims["sub"],
            email=email,
            user_name=user_name,
            issued_at=datetime.fromtimestamp(claims["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
        )
