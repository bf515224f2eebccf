"""
API key document model.

Maps to the `api_keys` MongoDB collection.

key_hash stores SHA-256(full_key); the full key is shown once at creation
and never stored. key_preview (first 7 chars + "..." + last 4 chars) is kept
for display and is how the owner identifies a key to delete.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from schemas.models.base import MongoBaseModel, PyObjectId


class ApiKeyDoc(MongoBaseModel):
    """Document model for the `api_keys` collection."""

    user_id: PyObjectId
    name: str
    key_hash: str
    key_preview: str
    created_at: Optional[datetime] = None
    last_used_at: Optional[datetime] = None
