"""Thin asynchronous HTTP helper shared by the REST clients."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx


class BaseAPI:
    """Issue requests against one base URL with fixed default headers.

    A new :class:`httpx.AsyncClient` is opened per request, so concurrent
    coroutines (for instance a fan-out over several ArgoCD instances) never
    share connection state.
    """

    def __init__(
        self,
        base_url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = 10.0,
        verify: bool = False,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.headers = headers or {}
        self.timeout = timeout
        self.verify = verify

    async def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        url = f"{self.base_url}/{endpoint.lstrip('/')}"

        async with httpx.AsyncClient(
            headers={**self.headers, **(headers or {})},
            timeout=self.timeout,
            verify=self.verify,
        ) as client:
            return await client.request(method.upper(), url, params=params, json=json)

    async def get(self, endpoint: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", endpoint, **kwargs)

    async def post(self, endpoint: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", endpoint, **kwargs)

    async def delete(self, endpoint: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", endpoint, **kwargs)
