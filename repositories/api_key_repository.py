"""API key persistence for the `api_keys` collection."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from bson import ObjectId
from pymongo import DESCENDING
from pymongo.asynchronous.collection import AsyncCollection

from schemas.models.api_key import ApiKeyDoc


class ApiKeyRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection

    async def count_by_user(self, user_id: ObjectId) -> int:
        return await self._col.count_documents({"user_id": user_id})

    async def insert(self, key: ApiKeyDoc) -> ObjectId:
        result = await self._col.insert_one(key.to_mongo())
        return result.inserted_id

    async def find_by_hash(self, key_hash: str) -> Optional[ApiKeyDoc]:
        return ApiKeyDoc.from_mongo(await self._col.find_one({"key_hash": key_hash}))

    async def touch_last_used(self, key_id: ObjectId, used_at: datetime) -> None:
        await self._col.update_one(
            {"_id": key_id}, {"$set": {"last_used_at": used_at}}
        )

    async def list_by_user(self, user_id: ObjectId) -> list[ApiKeyDoc]:
        cursor = self._col.find({"user_id": user_id}).sort("created_at", DESCENDING)
        return [ApiKeyDoc.from_mongo(doc) for doc in await cursor.to_list()]

    async def delete_by_preview(self, user_id: ObjectId, key_preview: str) -> bool:
        # Constrained by owner as well as preview: no cross-account deletes
        result = await self._col.delete_one(
            {"user_id": user_id, "key_preview": key_preview}
        )
        return result.deleted_count == 1
