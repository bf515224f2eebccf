"""Shared async HTTP client with configurable timeout."""

from typing import Any, Optional

import httpx


class HttpClient:
    """Thin async wrapper around httpx.AsyncClient.

    Owned by the app lifespan; closed on shutdown.
    """

    def __init__(
        self, timeout: float = 5.0, user_agent: Optional[str] = None
    ) -> None:
        headers = {"User-Agent": user_agent} if user_agent else None
        self._client = httpx.AsyncClient(timeout=timeout, headers=headers)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._client.post(url, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
