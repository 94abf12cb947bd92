"""HTTP client for the catalog backend."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .errors import BackendError

logger = logging.getLogger(__name__)


class CatalogClient:
    """Client for the public project catalog API.

    Returns decoded JSON as-is; shape recovery is the caller's job.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8080/api",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def list_projects(self, params: dict[str, str] | None = None) -> Any:
        return await self._get_json("/projects", params=params or {})

    async def list_ecosystems(self) -> Any:
        return await self._get_json("/ecosystems")

    async def health(self) -> bool:
        try:
            response = await self._client.get(f"{self.base_url}/health")
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    async def close(self) -> None:
        await self._client.aclose()

    async def _get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise BackendError(f"GET {path} returned {status}", status_code=status) from e
        except httpx.HTTPError as e:
            raise BackendError(f"GET {path} failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise BackendError(
                f"GET {path} returned malformed JSON", status_code=response.status_code
            ) from e
