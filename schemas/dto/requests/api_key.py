"""
Request DTOs for API key management endpoints.

CreateApiKeyRequest - POST /api/api-keys
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CreateApiKeyRequest(BaseModel):
    """Request body for POST /api/api-keys."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(max_length=100)

    @field_validator("name", mode="after")
    @classmethod
    def _name_not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name is required")
        return v
