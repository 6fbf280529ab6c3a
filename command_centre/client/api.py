"""
HTTP client for the Command Centre service.

Every call is best-effort: failures are logged and turned into a neutral
return value, never raised into the caller.
"""

from typing import Any

import httpx

from command_centre.core.logging import get_logger
from command_centre.core.models import EnquiryMessage, StockQuote

log = get_logger(__name__)


class DashboardAPI:
    """Client for the dashboard endpoints."""

    def __init__(self, base_url: str = "http://localhost:3000", http: httpx.AsyncClient | None = None):
        self.base_url = base_url.rstrip("/")
        self._http = http or httpx.AsyncClient()

    async def fetch_enquiries(self) -> list[EnquiryMessage] | None:
        """Current enquiries, or None if the request failed."""
        try:
            response = await self._http.get(f"{self.base_url}/api/enquiries")
            response.raise_for_status()
            data = response.json()
        except Exception as e:
            log.warning("enquiries_request_failed", error=str(e))
            return None
        return [EnquiryMessage.from_dict(item) for item in data.get("emails") or []]

    async def fetch_stocks(self, symbols: list[str], intraday: bool = False) -> list[StockQuote]:
        params = {"symbols": ",".join(symbols)}
        if intraday:
            params["intraday"] = "true"
        try:
            response = await self._http.get(f"{self.base_url}/api/stocks", params=params)
            response.raise_for_status()
            data = response.json()
        except Exception as e:
            log.warning("stocks_request_failed", error=str(e))
            return []
        return [StockQuote.from_dict(item) for item in data.get("stocks") or []]

    async def fetch_preference(self, key: str) -> Any:
        """Remote preference value, or None when unset, unconfigured or unreachable."""
        try:
            response = await self._http.get(f"{self.base_url}/api/sync", params={"key": key})
            if response.status_code != 200:
                log.info("preference_unavailable", key=key, status=response.status_code)
                return None
            return response.json().get("value")
        except Exception as e:
            log.warning("preference_request_failed", key=key, error=str(e))
            return None

    async def attempt_write(self, key: str, value: Any) -> bool:
        """
        Push a preference to the remote store once.

        There is no retry: a write made while offline is lost remotely.

        Returns:
            True if the store acknowledged the write
        """
        try:
            response = await self._http.post(
                f"{self.base_url}/api/sync",
                json={"key": key, "value": value},
            )
        except Exception as e:
            log.warning("preference_write_failed", key=key, error=str(e))
            return False

        if response.status_code != 200:
            log.warning("preference_write_rejected", key=key, status=response.status_code)
            return False
        return True

    async def close(self) -> None:
        await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
