"""OTP resend cooldown backed by a Redis SET NX EX key.

Without Redis the cooldown is reported as disabled and callers fall back to
the pending challenge's issue time.
"""

from typing import Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from shared.crypto import hash_token
from shared.logging import get_logger

log = get_logger(__name__)


class ResendCooldown:
    def __init__(
        self, redis_client: Optional[aioredis.Redis], seconds: int = 60
    ) -> None:
        self._redis = redis_client
        self.seconds = seconds

    @property
    def enabled(self) -> bool:
        return self._redis is not None

    def _key(self, scope: str, email: str) -> str:
        # Email addresses stay out of Redis key names
        return f"otp_cooldown:{scope}:{hash_token(email)}"

    async def acquire(self, scope: str, email: str) -> bool:
        """Start a cooldown window. False if one is already running."""
        if self._redis is None:
            return True
        try:
            result = await self._redis.set(
                self._key(scope, email), "1", nx=True, ex=self.seconds
            )
            return result is not None
        except RedisError as e:
            log.warning(
                "otp_cooldown_unavailable", error=str(e), error_type=type(e).__name__
            )
            return True
