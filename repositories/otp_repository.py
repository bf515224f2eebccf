"""
OTP challenge and password-reset grant persistence.

Every state transition is a single guarded MongoDB operation: the guard
(expiry, attempt count, code hash) lives in the filter, so two concurrent
verifications of the same challenge cannot both act on the same snapshot.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pymongo import ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection

from schemas.models.otp import OtpChallengeDoc, PasswordResetGrantDoc


class OtpRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection

    @staticmethod
    def _key(email: str, otp_type: str) -> dict:
        return {"email": email, "otp_type": otp_type}

    async def upsert_challenge(
        self,
        email: str,
        otp_type: str,
        code_hash: str,
        created_at: datetime,
        expires_at: datetime,
    ) -> None:
        """Create the challenge, or overwrite the pending one for this key."""
        await self._col.update_one(
            self._key(email, otp_type),
            {
                "$set": {
                    "code_hash": code_hash,
                    "attempts": 0,
                    "created_at": created_at,
                    "expires_at": expires_at,
                }
            },
            upsert=True,
        )

    async def find(self, email: str, otp_type: str) -> Optional[OtpChallengeDoc]:
        doc = await self._col.find_one(self._key(email, otp_type))
        return OtpChallengeDoc.from_mongo(doc)

    async def delete_if_expired(
        self, email: str, otp_type: str, now: datetime
    ) -> Optional[OtpChallengeDoc]:
        doc = await self._col.find_one_and_delete(
            {**self._key(email, otp_type), "expires_at": {"$lt": now}}
        )
        return OtpChallengeDoc.from_mongo(doc)

    async def delete_if_exhausted(
        self, email: str, otp_type: str, max_attempts: int
    ) -> Optional[OtpChallengeDoc]:
        doc = await self._col.find_one_and_delete(
            {**self._key(email, otp_type), "attempts": {"$gte": max_attempts}}
        )
        return OtpChallengeDoc.from_mongo(doc)

    async def consume_if_matching(
        self,
        email: str,
        otp_type: str,
        code_hash: str,
        now: datetime,
        max_attempts: int,
    ) -> Optional[OtpChallengeDoc]:
        doc = await self._col.find_one_and_delete(
            {
                **self._key(email, otp_type),
                "code_hash": code_hash,
                "attempts": {"$lt": max_attempts},
                "expires_at": {"$gte": now},
            }
        )
        return OtpChallengeDoc.from_mongo(doc)

    async def charge_mismatch(
        self,
        email: str,
        otp_type: str,
        code_hash: str,
        now: datetime,
        max_attempts: int,
    ) -> Optional[OtpChallengeDoc]:
        """Increment attempts on a live challenge whose code differs."""
        doc = await self._col.find_one_and_update(
            {
                **self._key(email, otp_type),
                "code_hash": {"$ne": code_hash},
                "attempts": {"$lt": max_attempts},
                "expires_at": {"$gte": now},
            },
            {"$inc": {"attempts": 1}},
            return_document=ReturnDocument.AFTER,
        )
        return OtpChallengeDoc.from_mongo(doc)


class PasswordResetGrantRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection

    async def replace(
        self, email: str, token_hash: str, created_at: datetime, expires_at: datetime
    ) -> None:
        await self._col.update_one(
            {"email": email},
            {
                "$set": {
                    "token_hash": token_hash,
                    "created_at": created_at,
                    "expires_at": expires_at,
                }
            },
            upsert=True,
        )

    async def consume(
        self, email: str, token_hash: str, now: datetime
    ) -> Optional[PasswordResetGrantDoc]:
        """Delete and return the matching unexpired grant, if any."""
        doc = await self._col.find_one_and_delete(
            {"email": email, "token_hash": token_hash, "expires_at": {"$gte": now}}
        )
        return PasswordResetGrantDoc.from_mongo(doc)
