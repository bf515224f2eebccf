"""
API key lifecycle: issuance, redaction, usage tracking and the per-account quota.

Full key format: ``ms_`` + 48 lowercase hex chars (24 random bytes). Only the
SHA-256 hash and a preview are stored; the full key is handed back exactly
once, from generate().
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from bson import ObjectId
from pymongo.errors import PyMongoError

from errors import QuotaExceededError
from repositories.api_key_repository import ApiKeyRepository
from schemas.models.api_key import ApiKeyDoc
from shared.crypto import hash_token
from shared.datetime_utils import utcnow
from shared.generators import generate_api_key
from shared.logging import get_logger
from shared.validators import is_valid_api_key_format

log = get_logger(__name__)

MAX_KEYS_PER_ACCOUNT = 10

PREVIEW_HEAD = 7
PREVIEW_TAIL = 4
PREVIEW_MASK = "..."


def make_preview(full_key: str) -> str:
    """``ms_1a2b...9f0e``: enough to recognise a key, not to rebuild it."""
    return f"{full_key[:PREVIEW_HEAD]}{PREVIEW_MASK}{full_key[-PREVIEW_TAIL:]}"


@dataclass(frozen=True)
class GeneratedApiKey:
    name: str
    full_key: str
    preview: str
    created_at: datetime


class ApiKeyService:
    def __init__(self, repository: ApiKeyRepository) -> None:
        self._repo = repository

    async def generate(self, account_id: ObjectId, name: str) -> GeneratedApiKey:
        existing = await self._repo.count_by_user(account_id)
        if existing >= MAX_KEYS_PER_ACCOUNT:
            log.warning(
                "api_key_quota_exceeded",
                user_id=str(account_id),
                count=existing,
            )
            raise QuotaExceededError(
                f"Maximum of {MAX_KEYS_PER_ACCOUNT} API keys allowed per user"
            )

        full_key = generate_api_key()
        preview = make_preview(full_key)
        created_at = utcnow()
        await self._repo.insert(
            ApiKeyDoc(
                user_id=account_id,
                name=name,
                key_hash=hash_token(full_key),
                key_preview=preview,
                created_at=created_at,
                last_used_at=None,
            )
        )

        log.info("api_key_created", user_id=str(account_id), preview=preview)
        return GeneratedApiKey(
            name=name, full_key=full_key, preview=preview, created_at=created_at
        )

    async def verify(self, presented_key: str) -> Optional[ObjectId]:
        """Return the owning account id, or None for an unknown key."""
        if not is_valid_api_key_format(presented_key):
            log.debug("api_key_rejected", reason="bad_format")
            return None

        key = await self._repo.find_by_hash(hash_token(presented_key))
        if key is None:
            log.debug("api_key_rejected", reason="not_found")
            return None

        # Usage stamp is best-effort; a failed write must not fail the request
        try:
            await self._repo.touch_last_used(key.id, utcnow())
        except PyMongoError as e:
            log.warning(
                "api_key_touch_failed",
                key_id=str(key.id),
                error=str(e),
                error_type=type(e).__name__,
            )
        return key.user_id

    async def revoke(self, account_id: ObjectId, preview: str) -> bool:
        deleted = await self._repo.delete_by_preview(account_id, preview)
        if deleted:
            log.info("api_key_deleted", user_id=str(account_id), preview=preview)
        else:
            log.warning("api_key_delete_missed", user_id=str(account_id))
        return deleted

    async def list_keys(self, account_id: ObjectId) -> list[ApiKeyDoc]:
        return await self._repo.list_by_user(account_id)
