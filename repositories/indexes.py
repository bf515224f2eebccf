"""
Index setup, run once from the app lifespan.

The TTL indexes are housekeeping only: MongoDB's TTL monitor runs about once
a minute, so services still check expires_at themselves.
"""

from __future__ import annotations

from pymongo import ASCENDING
from pymongo.asynchronous.database import AsyncDatabase

from repositories import collections
from shared.logging import get_logger

log = get_logger(__name__)

# Purge OTP challenges and reset grants 15 minutes after creation
OTP_TTL_SECONDS = 900


async def ensure_indexes(db: AsyncDatabase) -> None:
    users = db[collections.USERS]
    await users.create_index([("email", ASCENDING)], unique=True)
    await users.create_index([("user_name", ASCENDING)], unique=True)

    api_keys = db[collections.API_KEYS]
    await api_keys.create_index([("key_hash", ASCENDING)], unique=True)
    await api_keys.create_index([("user_id", ASCENDING), ("key_preview", ASCENDING)])

    otp = db[collections.OTP_CHALLENGES]
    await otp.create_index(
        [("email", ASCENDING), ("otp_type", ASCENDING)], unique=True
    )
    await otp.create_index(
        [("created_at", ASCENDING)], expireAfterSeconds=OTP_TTL_SECONDS
    )

    grants = db[collections.PASSWORD_RESET_GRANTS]
    await grants.create_index([("email", ASCENDING)], unique=True)
    await grants.create_index(
        [("created_at", ASCENDING)], expireAfterSeconds=OTP_TTL_SECONDS
    )

    smtp = db[collections.SMTP_CREDENTIALS]
    await smtp.create_index([("user_id", ASCENDING)], unique=True)

    log.info("mongodb_indexes_ensured")
