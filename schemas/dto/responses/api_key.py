"""
Response DTOs for API key management endpoints.

ApiKeyResponse        - one key entry in GET /api/api-keys list
ApiKeyCreatedResponse - POST /api/api-keys (201), includes ``key`` once
ApiKeysListResponse   - GET /api/api-keys (200)

Timestamps are Unix seconds.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from schemas.models.api_key import ApiKeyDoc
from shared.datetime_utils import to_unix


class ApiKeyResponse(BaseModel):
    """A single API key entry as returned by the list endpoint.

    Only the ``key_preview`` is shown; the key hash never leaves the store.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    key_preview: str
    created_at: Optional[int] = None
    last_used_at: Optional[int] = None

    @classmethod
    def from_doc(cls, doc: ApiKeyDoc) -> "ApiKeyResponse":
        return cls(
            name=doc.name,
            key_preview=doc.key_preview,
            created_at=to_unix(doc.created_at),
            last_used_at=to_unix(doc.last_used_at),
        )


class ApiKeyCreatedResponse(BaseModel):
    """Response for POST /api/api-keys (201).

    This is the ONLY time the full key is returned; it is hashed before storage.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    key: str
    key_preview: str
    created_at: int


class ApiKeysListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    keys: list[ApiKeyResponse]
