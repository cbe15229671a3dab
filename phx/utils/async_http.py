"""Async HTTP client utilities."""

import aiohttp
from typing import Optional, Dict


class AsyncHTTPClient:
    """Reusable async HTTP client."""

    def __init__(self, headers: Optional[Dict[str, str]] = None, timeout: Optional[float] = None):
        self.default_headers = headers or {}
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def __aenter__(self):
        self.session = aiohttp.ClientSession(headers=self.default_headers, timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.session.close()

    async def get_text(self, url: str, headers: Optional[Dict[str, str]] = None) -> str:
        """GET request returning the decoded body.

        Raises ``aiohttp.ClientResponseError`` on a non-2xx status and
        ``UnicodeDecodeError`` when the body is not text.
        """
        req_headers = {**self.session.headers, **(headers or {})}
        async with self.session.get(url, headers=req_headers) as resp:
            resp.raise_for_status()
            return await resp.text()
