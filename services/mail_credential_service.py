"""
SMTP credentials per account, encrypted at rest with SecretCipher.

The SMTP user and password are stored only as EncryptedSecret blobs. Reads
for display go through get_redacted(); load_for_send() is the only path that
returns the plaintext password, and it lets DecryptionError propagate so a
send aborts instead of transmitting a garbled secret.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from bson import ObjectId

from errors import NotFoundError
from repositories.mail_credential_repository import SmtpCredentialRepository
from schemas.models.mail_credential import SmtpCredentialDoc
from services.secret_cipher import SecretCipher
from shared.datetime_utils import utcnow
from shared.logging import get_logger

log = get_logger(__name__)

PASSWORD_MASK = "********"


@dataclass(frozen=True)
class SmtpConfig:
    host: str
    port: int
    user: str
    password: str
    secure: bool

    def __repr__(self) -> str:
        return (
            f"SmtpConfig(host={self.host!r}, port={self.port}, user={self.user!r}, "
            f"password={PASSWORD_MASK!r}, secure={self.secure})"
        )


@dataclass(frozen=True)
class SmtpCredentialView:
    host: str
    port: int
    user: str
    password: str
    secure: bool
    updated_at: Optional[datetime]


class MailCredentialService:
    def __init__(
        self,
        repository: SmtpCredentialRepository,
        cipher: SecretCipher,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._repo = repository
        self._cipher = cipher
        self._clock = clock

    async def save(
        self,
        account_id: ObjectId,
        host: str,
        port: int,
        user: str,
        password: str,
        secure: bool = True,
    ) -> None:
        await self._repo.upsert(
            SmtpCredentialDoc(
                user_id=account_id,
                host=host,
                port=port,
                user=self._cipher.encrypt(user),
                password=self._cipher.encrypt(password),
                secure=secure,
                updated_at=self._clock(),
            )
        )
        log.info("smtp_credentials_saved", user_id=str(account_id), host=host)

    async def get_redacted(self, account_id: ObjectId) -> Optional[SmtpCredentialView]:
        doc = await self._repo.find_by_user(account_id)
        if doc is None:
            return None
        return SmtpCredentialView(
            host=doc.host,
            port=doc.port,
            user=self._cipher.decrypt(doc.user),
            password=PASSWORD_MASK,
            secure=doc.secure,
            updated_at=doc.updated_at,
        )

    async def load_for_send(self, account_id: ObjectId) -> SmtpConfig:
        """Decrypted credentials for the outbound mail path.

        This is the entry point a send route hands to its SMTP transport; no
        route in this service calls it yet. DecryptionError propagates so a
        send aborts instead of using a garbled password.
        """
        doc = await self._repo.find_by_user(account_id)
        if doc is None:
            raise NotFoundError("SMTP credentials not configured")
        return SmtpConfig(
            host=doc.host,
            port=doc.port,
            user=self._cipher.decrypt(doc.user),
            password=self._cipher.decrypt(doc.password),
            secure=doc.secure,
        )
