"""Account persistence for the `users` collection."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from bson import ObjectId
from pymongo.asynchronous.collection import AsyncCollection

from schemas.models.user import UserDoc


class UserRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection

    async def find_by_email(self, email: str) -> Optional[UserDoc]:
        return UserDoc.from_mongo(await self._col.find_one({"email": email}))

    async def find_by_id(self, user_id: ObjectId) -> Optional[UserDoc]:
        return UserDoc.from_mongo(await self._col.find_one({"_id": user_id}))

    async def find_by_email_or_user_name(
        self, email: str, user_name: str
    ) -> Optional[UserDoc]:
        doc = await self._col.find_one(
            {"$or": [{"email": email}, {"user_name": user_name}]}
        )
        return UserDoc.from_mongo(doc)

    async def insert(self, user: UserDoc) -> ObjectId:
        """Insert a new account. DuplicateKeyError propagates to the caller."""
        result = await self._col.insert_one(user.to_mongo())
        return result.inserted_id

    async def mark_email_verified(self, email: str) -> bool:
        result = await self._col.update_one(
            {"email": email}, {"$set": {"email_verified": True}}
        )
        return result.matched_count == 1

    async def update_password(
        self, email: str, password_hash: str, changed_at: datetime
    ) -> bool:
        result = await self._col.update_one(
            {"email": email},
            {
                "$set": {
                    "password_hash": password_hash,
                    "password_changed_at": changed_at,
                }
            },
        )
        return result.matched_count == 1
