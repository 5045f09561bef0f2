"""Thin async Microsoft Graph client over httpx."""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from sharefinder.errors import GraphError

LOGGER = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return f"Graph request failed with HTTP {response.status_code}"


class GraphClient:
    """Authorized access to the Graph endpoints the pipeline needs.

    Parameters
    ----------
    token:
        Bearer token for Graph, already acquired for this request.
    base_url:
        Graph API root, ``https://graph.microsoft.com/v1.0`` by default.
    http_client:
        Optional injected ``httpx.AsyncClient``; when omitted the client owns
        one and closes it in :meth:`aclose`.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = "https://graph.microsoft.com/v1.0",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._headers = {"Authorization": f"Bearer {token}"}
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def __aenter__(self) -> "GraphClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._http.request(
                method, self._url(path), headers=self._headers, **kwargs
            )
        except httpx.HTTPError as exc:
            raise GraphError(f"{method} {path} failed: {exc}") from exc
        if response.is_error:
            raise GraphError(_error_message(response), status_code=response.status_code)
        return response

    async def post_json(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._request("POST", path, json=body)
        return response.json()

    async def get_json(self, path: str) -> Dict[str, Any]:
        response = await self._request("GET", path)
        return response.json()

    async def get_text(self, path: str) -> str:
        response = await self._request("GET", path)
        return response.text

    async def iter_bytes(
        self, path: str, params: Optional[Dict[str, str]] = None
    ) -> AsyncIterator[bytes]:
        """Stream a response body chunk by chunk."""
        try:
            async with self._http.stream(
                "GET", self._url(path), headers=self._headers, params=params
            ) as response:
                if response.is_error:
                    await response.aread()
                    raise GraphError(_error_message(response), status_code=response.status_code)
                async for chunk in response.aiter_bytes():
                    yield chunk
        except httpx.HTTPError as exc:
            raise GraphError(f"GET {path} failed: {exc}") from exc

    async def read_bytes(self, path: str, params: Optional[Dict[str, str]] = None) -> bytes:
        chunks = [chunk async for chunk in self.iter_bytes(path, params=params)]
        return b"".join(chunks)

    @staticmethod
    def item_path(drive_id: str, item_id: str) -> str:
        return f"/drives/{drive_id}/items/{item_id}"

    @classmethod
    def content_path(cls, drive_id: str, item_id: str) -> str:
        return cls.item_path(drive_id, item_id) + "/content"
