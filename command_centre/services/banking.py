"""
Bank and brokerage balance fetchers.

Each fetcher returns a summary dict, or None when the provider is not
configured or the call fails.
"""

from typing import Any

import httpx

from command_centre.config import settings
from command_centre.core.logging import get_logger
from command_centre.services.http import client_session

log = get_logger(__name__)


class StarlingClient:
    """Starling Bank current account balance."""

    def __init__(
        self,
        token: str | None = None,
        api_url: str | None = None,
        http: httpx.AsyncClient | None = None,
    ):
        self.token = token if token is not None else settings.starling_access_token
        self.api_url = (api_url or settings.starling_api_url).rstrip("/")
        self._http = http

    @property
    def enabled(self) -> bool:
        return bool(self.token)

    @property
    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}", "Content-Type": "application/json"}

    async def fetch_balance(self) -> dict[str, Any] | None:
        """
        Fetch the first account's balance.

        Returns:
            ``{"balance", "effective_balance", "currency"}`` in major units, or None
        """
        if not self.enabled:
            return None

        try:
            async with client_session(self._http) as client:
                accounts_res = await client.get(f"{self.api_url}/accounts", headers=self._headers)
                if accounts_res.status_code != 200:
                    log.error("starling_accounts_error", status=accounts_res.status_code, body=accounts_res.text[:300])
                    return None
                accounts = accounts_res.json().get("accounts") or []
                if not accounts:
                    return None

                uid = accounts[0]["accountUid"]
                balance_res = await client.get(f"{self.api_url}/accounts/{uid}/balance", headers=self._headers)
                if balance_res.status_code != 200:
                    log.error("starling_balance_error", status=balance_res.status_code, body=balance_res.text[:300])
                    return None
                data = balance_res.json()

            cleared = data.get("clearedBalance") or {}
            effective = data.get("effectiveBalance") or {}
            return {
                "balance": (cleared.get("minorUnits") or 0) / 100,
                "effective_balance": (effective.get("minorUnits") or 0) / 100,
                "currency": cleared.get("currency") or "GBP",
            }

        except Exception as e:
            log.error("starling_fetch_error", error=str(e))
            return None


class Trading212Client:
    """Trading 212 invest account summary."""

    def __init__(
        self,
        api_key: str | None = None,
        api_url: str | None = None,
        http: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key if api_key is not None else settings.trading212_api_key
        self.api_url = (api_url or settings.trading212_api_url).rstrip("/")
        self._http = http

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def fetch_summary(self) -> dict[str, Any] | None:
        """
        Fetch account info and cash breakdown.

        Returns:
            ``{"total_value", "cash", "invested_value", "unrealised_pnl", "currency"}``, or None
        """
        if not self.enabled:
            return None

        headers = {"Authorization": self.api_key}
        try:
            async with client_session(self._http) as client:
                info_res = await client.get(f"{self.api_url}/equity/account/info", headers=headers)
                if info_res.status_code != 200:
                    log.error("trading212_info_error", status=info_res.status_code, body=info_res.text[:300])
                    return None
                info = info_res.json()

                cash_res = await client.get(f"{self.api_url}/equity/account/cash", headers=headers)
                cash = cash_res.json() if cash_res.status_code == 200 else {}

            return {
                "total_value": cash.get("total", 0),
                "cash": cash.get("free", 0),
                "invested_value": cash.get("invested", 0),
                "unrealised_pnl": cash.get("ppl", 0),
                "currency": info.get("currencyCode") or "GBP",
            }

        except Exception as e:
            log.error("trading212_fetch_error", error=str(e))
            return None
