"""
REST client for the hosted Redis-compatible key/value store.
"""

from urllib.parse import quote

import httpx

from command_centre.config import settings
from command_centre.core.logging import get_logger
from command_centre.services.http import client_session

log = get_logger(__name__)


class KVClient:
    """Minimal GET/SET client for the key/value REST API."""

    def __init__(
        self,
        url: str | None = None,
        token: str | None = None,
        http: httpx.AsyncClient | None = None,
    ):
        self.url = (url if url is not None else settings.kv_rest_api_url).rstrip("/")
        self.token = token if token is not None else settings.kv_rest_api_token
        self._http = http

    @property
    def enabled(self) -> bool:
        """Check if the store is configured."""
        return bool(self.url and self.token)

    @property
    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}

    async def _request(self, path: str) -> dict:
        async with client_session(self._http) as client:
            response = await client.get(f"{self.url}{path}", headers=self._auth_headers)
        response.raise_for_status()
        return response.json()

    async def get(self, key: str) -> str | None:
        """
        Read a raw string value.

        Returns None when the key is absent or the store is not configured.
        Network and HTTP errors propagate to the caller.
        """
        if not self.enabled:
            return None
        data = await self._request(f"/get/{quote(key, safe=':')}")
        return data.get("result")

    async def set(self, key: str, value: str) -> bool:
        """
        Write a raw string value.

        Returns True only when the store acknowledges with ``OK``; False when
        it does not or when the store is not configured.
        """
        if not self.enabled:
            return False
        data = await self._request(f"/set/{quote(key, safe=':')}/{quote(value, safe='')}")
        ok = data.get("result") == "OK"
        if not ok:
            log.warning("kv_set_not_acknowledged", key=key, result=data.get("result"))
        return ok
