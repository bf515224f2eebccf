"""SMTP credential persistence for the `smtp_credentials` collection."""

from __future__ import annotations

from typing import Optional

from bson import ObjectId
from pymongo.asynchronous.collection import AsyncCollection

from schemas.models.mail_credential import SmtpCredentialDoc


class SmtpCredentialRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection

    async def upsert(self, credential: SmtpCredentialDoc) -> None:
        fields = credential.to_mongo()
        fields.pop("_id", None)
        await self._col.update_one(
            {"user_id": credential.user_id}, {"$set": fields}, upsert=True
        )

    async def find_by_user(self, user_id: ObjectId) -> Optional[SmtpCredentialDoc]:
        doc = await self._col.find_one({"user_id": user_id})
        return SmtpCredentialDoc.from_mongo(doc)
