"""
Shared test fixtures.

mongomock is synchronous; AsyncMockCollection exposes the subset of the
pymongo AsyncCollection API the repositories use, so filters, atomic updates
and unique indexes run against real query semantics without a server.

BSON datetimes are naive UTC with millisecond precision. Aware datetimes are
converted the same way on the way in so mongomock can compare them.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import mongomock
import pytest

from config import EncryptionSettings, JWTSettings
from services.secret_cipher import SecretCipher
from services.token_service import TokenService

TEST_JWT_SECRET = "test-jwt-secret-with-enough-length-for-hs256"
TEST_ENCRYPTION_KEY = "test-encryption-passphrase"


def _to_bson(value: Any) -> Any:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value.replace(microsecond=value.microsecond // 1000 * 1000)
    if isinstance(value, dict):
        return {k: _to_bson(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_bson(v) for v in value]
    return value


class AsyncMockCursor:
    def __init__(self, cursor) -> None:
        self._cursor = cursor

    def sort(self, *args, **kwargs) -> "AsyncMockCursor":
        self._cursor = self._cursor.sort(*args, **kwargs)
        return self

    async def to_list(self, length=None) -> list:
        docs = list(self._cursor)
        return docs if length is None else docs[:length]


class AsyncMockCollection:
    def __init__(self, collection) -> None:
        self._col = collection

    @property
    def sync(self):
        """The underlying mongomock collection, for direct assertions."""
        return self._col

    async def find_one(self, filter=None, *args, **kwargs):
        return self._col.find_one(_to_bson(filter), *args, **kwargs)

    def find(self, filter=None, *args, **kwargs) -> AsyncMockCursor:
        return AsyncMockCursor(self._col.find(_to_bson(filter), *args, **kwargs))

    async def insert_one(self, document, *args, **kwargs):
        return self._col.insert_one(_to_bson(document), *args, **kwargs)

    async def update_one(self, filter, update, *args, **kwargs):
        return self._col.update_one(_to_bson(filter), _to_bson(update), *args, **kwargs)

    async def delete_one(self, filter, *args, **kwargs):
        return self._col.delete_one(_to_bson(filter), *args, **kwargs)

    async def find_one_and_update(self, filter, update, *args, **kwargs):
        return self._col.find_one_and_update(
            _to_bson(filter), _to_bson(update), *args, **kwargs
        )

    async def find_one_and_delete(self, filter, *args, **kwargs):
        return self._col.find_one_and_delete(_to_bson(filter), *args, **kwargs)

    async def count_documents(self, filter, *args, **kwargs) -> int:
        return self._col.count_documents(_to_bson(filter), *args, **kwargs)

    async def create_index(self, keys, **kwargs):
        return self._col.create_index(keys, **kwargs)


class AsyncMockDatabase:
    def __init__(self, db) -> None:
        self._db = db
        # health check pings through db.client.admin.command
        self.client = MagicMock()
        self.client.admin.command = AsyncMock(return_value={"ok": 1})

    def __getitem__(self, name: str) -> AsyncMockCollection:
        return AsyncMockCollection(self._db[name])


class FakeClock:
    """Callable clock that tests move forward explicitly."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class RecordingEmailProvider:
    """EmailProvider that keeps every OTP it was asked to send."""

    def __init__(self, succeed: bool = True) -> None:
        self.sent: list[dict] = []
        self.succeed = succeed

    async def send_otp_email(self, email, user_name, otp_code, otp_type) -> bool:
        self.sent.append(
            {"email": email, "user_name": user_name, "code": otp_code, "type": otp_type}
        )
        return self.succeed

    def last_code(self, email: str, otp_type: str) -> str:
        for item in reversed(self.sent):
            if item["email"] == email and item["type"] == otp_type:
                return item["code"]
        raise AssertionError(f"no {otp_type} code sent to {email}")


@pytest.fixture
def mongo_db() -> AsyncMockDatabase:
    return AsyncMockDatabase(mongomock.MongoClient().db)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def email_provider() -> RecordingEmailProvider:
    return RecordingEmailProvider()


@pytest.fixture
def jwt_settings() -> JWTSettings:
    return JWTSettings(jwt_secret=TEST_JWT_SECRET)


@pytest.fixture
def token_service(jwt_settings) -> TokenService:
    return TokenService(jwt_settings)


@pytest.fixture(scope="session")
def encryption_settings() -> EncryptionSettings:
    return EncryptionSettings(encryption_key=TEST_ENCRYPTION_KEY)


@pytest.fixture(scope="session")
def secret_cipher(encryption_settings) -> SecretCipher:
    return SecretCipher.from_settings(encryption_settings)
