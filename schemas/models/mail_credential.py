"""
SMTP credential document model.

Maps to the `smtp_credentials` MongoDB collection, one document per account.

user and password hold EncryptedSecret strings (``<iv hex>:<ciphertext hex>``)
produced by SecretCipher; no plaintext secret is stored.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from schemas.models.base import MongoBaseModel, PyObjectId


class SmtpCredentialDoc(MongoBaseModel):
    """Document model for the `smtp_credentials` collection."""

    user_id: PyObjectId
    host: str
    port: int
    user: str
    password: str
    secure: bool = True
    updated_at: Optional[datetime] = None
