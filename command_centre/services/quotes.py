"""
Stock quote client for the public chart API.
"""

from datetime import datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo

import httpx

from command_centre.config import settings
from command_centre.core.logging import get_logger
from command_centre.core.models import StockQuote
from command_centre.services.http import client_session

log = get_logger(__name__)

USER_AGENT = "Mozilla/5.0"


def _series(result: dict[str, Any], label) -> list[dict[str, Any]]:
    """Zip timestamps with closing prices, dropping gaps."""
    timestamps = result.get("timestamp") or []
    quotes = (result.get("indicators") or {}).get("quote") or [{}]
    closes = quotes[0].get("close") or []

    points = []
    for i, ts in enumerate(timestamps):
        price = closes[i] if i < len(closes) else None
        if price is None:
            continue
        points.append({"date": label(ts), "price": round(price, 2)})
    return points


class QuoteClient:
    """Fetches daily history and intraday prices per symbol."""

    def __init__(self, api_url: str | None = None, http: httpx.AsyncClient | None = None):
        self.api_url = (api_url or settings.quote_api_url).rstrip("/")
        self._http = http
        self._tz = ZoneInfo(settings.display_timezone)

    async def _chart(self, symbol: str, interval: str, range_: str) -> dict[str, Any] | None:
        async with client_session(self._http) as client:
            response = await client.get(
                f"{self.api_url}/{symbol}",
                params={"interval": interval, "range": range_},
                headers={"User-Agent": USER_AGENT},
            )
        if response.status_code != 200:
            log.warning("quote_http_error", symbol=symbol, status=response.status_code)
            return None
        results = (response.json().get("chart") or {}).get("result") or []
        return results[0] if results else None

    async def fetch_quote(self, symbol: str) -> StockQuote | None:
        """
        Fetch the current quote with three months of daily closes.

        Returns:
            StockQuote, or None if the symbol could not be fetched
        """
        try:
            result = await self._chart(symbol, "1d", "3mo")
            if not result:
                return None

            meta = result.get("meta") or {}
            current = meta["regularMarketPrice"]
            previous = meta.get("chartPreviousClose") or meta.get("previousClose") or 0
            change = current - previous
            change_percent = (change / previous) * 100 if previous > 0 else 0

            history = _series(
                result,
                lambda ts: datetime.fromtimestamp(ts, tz=timezone.utc).date().isoformat(),
            )

            return StockQuote(
                symbol=meta.get("symbol", symbol),
                name=meta.get("longName") or meta.get("shortName") or symbol,
                current_price=round(current, 2),
                previous_close=round(previous, 2),
                change_amount=round(change, 2),
                change_percent=round(change_percent, 2),
                regular_market_time=meta.get("regularMarketTime"),
                market_state=meta.get("marketState"),
                currency=meta.get("currency"),
                history=history,
            )

        except Exception as e:
            log.error("quote_fetch_error", symbol=symbol, error=str(e))
            return None

    async def fetch_intraday(self, symbol: str) -> list[dict[str, Any]]:
        """Five-minute prices for the current session, labelled HH:MM local time."""
        try:
            result = await self._chart(symbol, "5m", "1d")
            if not result:
                return []
            return _series(
                result,
                lambda ts: datetime.fromtimestamp(ts, tz=self._tz).strftime("%H:%M"),
            )
        except Exception as e:
            log.warning("intraday_fetch_error", symbol=symbol, error=str(e))
            return []
