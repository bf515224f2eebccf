"""
Account document model.

Maps to the `users` MongoDB collection.

email is stored lower-cased and carries a unique index. email_verified only
flips to True after a verified signup OTP; password_hash only changes through
the password-reset flow.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from schemas.models.base import MongoBaseModel


class UserDoc(MongoBaseModel):
    """Document model for the `users` collection."""

    user_name: str
    email: str
    password_hash: str
    email_verified: bool = False
    created_at: Optional[datetime] = None
    password_changed_at: Optional[datetime] = None
