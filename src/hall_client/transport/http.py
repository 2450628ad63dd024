"""
HTTP client for a ship's web interface.

Authentication is cookie based: ``POST /~/login`` sets the session cookie,
which the underlying httpx client then carries on every request.
"""

from typing import Any, AsyncIterator, Optional

import httpx

from hall_client.errors import HttpError

DEFAULT_BASE_URL = "http://localhost:8080"


class HttpClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"User-Agent": "urbit-hall-client/0.1.0"},
            timeout=timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @staticmethod
    def _check(resp: httpx.Response) -> httpx.Response:
        if resp.status_code >= 400:
            raise HttpError(resp.status_code, resp.text)
        return resp

    async def post_form(self, path: str, data: dict[str, str]) -> httpx.Response:
        resp = await self._client.post(path, data=data)
        return self._check(resp)

    async def put_json(self, path: str, body: Any) -> httpx.Response:
        resp = await self._client.put(path, json=body, headers={"Content-Type": "application/json"})
        return self._check(resp)

    async def delete(self, path: str) -> httpx.Response:
        resp = await self._client.delete(path)
        return self._check(resp)

    async def stream_lines(self, path: str) -> AsyncIterator[str]:
        """Yield lines of a long-lived ``text/event-stream`` response."""
        async with self._client.stream(
            "GET", path,
            headers={"Accept": "text/event-stream"},
            timeout=httpx.Timeout(None),
        ) as resp:
            if resp.status_code >= 400:
                await resp.aread()
                self._check(resp)
            async for line in resp.aiter_lines():
                yield line

    async def close(self) -> None:
        await self._client.aclose()
