"""EmailProvider protocol. Services depend on this, not on ZeptoMailProvider."""

from typing import Optional, Protocol


class EmailProvider(Protocol):
    async def send_otp_email(
        self, email: str, user_name: Optional[str], otp_code: str, otp_type: str
    ) -> bool: ...
