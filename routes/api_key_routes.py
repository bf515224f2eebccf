"""
API key management endpoints. All require a bearer credential.

GET    /api/api-keys                   - list keys (previews only)
POST   /api/api-keys                   - create key; the full key is shown once
DELETE /api/api-keys?key_preview=...   - delete one of the caller's keys
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from dependencies import get_api_key_service, get_current_identity
from errors import NotFoundError
from schemas.dto.requests.api_key import CreateApiKeyRequest
from schemas.dto.responses.api_key import (
    ApiKeyCreatedResponse,
    ApiKeyResponse,
    ApiKeysListResponse,
)
from schemas.dto.responses.common import MessageResponse
from services.api_key_service import ApiKeyService
from services.auth_resolver import Identity
from shared.datetime_utils import to_unix

router = APIRouter(prefix="/api/api-keys", tags=["api-keys"])


@router.get("", response_model=ApiKeysListResponse)
async def list_api_keys(
    identity: Identity = Depends(get_current_identity),
    api_keys: ApiKeyService = Depends(get_api_key_service),
) -> ApiKeysListResponse:
    keys = await api_keys.list_keys(identity.object_id)
    return ApiKeysListResponse(keys=[ApiKeyResponse.from_doc(k) for k in keys])


@router.post("", status_code=201, response_model=ApiKeyCreatedResponse)
async def create_api_key(
    body: CreateApiKeyRequest,
    identity: Identity = Depends(get_current_identity),
    api_keys: ApiKeyService = Depends(get_api_key_service),
) -> ApiKeyCreatedResponse:
    generated = await api_keys.generate(identity.object_id, body.name)
    return ApiKeyCreatedResponse(
        name=generated.name,
        key=generated.full_key,
        key_preview=generated.preview,
        created_at=to_unix(generated.created_at),
    )


@router.delete("", response_model=MessageResponse)
async def delete_api_key(
    key_preview: str = Query(min_length=1),
    identity: Identity = Depends(get_current_identity),
    api_keys: ApiKeyService = Depends(get_api_key_service),
) -> MessageResponse:
    if not await api_keys.revoke(identity.object_id, key_preview):
        raise NotFoundError("API key not found")
    return MessageResponse(success=True, message="API key deleted")
