"""
Stock quotes endpoint.

GET /api/stocks?symbols=AAPL,QDEL&intraday=true
"""

import asyncio
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from command_centre.config import settings
from command_centre.services.quotes import QuoteClient

router = APIRouter(prefix="/api")


def get_quote_client() -> QuoteClient:
    return QuoteClient()


def parse_symbols(symbols: str | None) -> list[str]:
    """Comma-separated symbols, upper-cased; the default watchlist when empty."""
    parsed = [s.strip().upper() for s in (symbols or "").split(",") if s.strip()]
    return parsed or list(settings.default_stock_symbols)


@router.get("/stocks")
async def get_stocks(
    symbols: str | None = None,
    intraday: str | None = None,
    client: QuoteClient = Depends(get_quote_client),
):
    """Quotes for each symbol; symbols that fail are left out."""
    include_intraday = intraday == "true"

    async def load(symbol: str):
        quote = await client.fetch_quote(symbol)
        if quote is None:
            return None
        if include_intraday:
            quote.intraday = await client.fetch_intraday(symbol)
        return quote

    quotes = await asyncio.gather(*(load(s) for s in parse_symbols(symbols)))
    return {
        "stocks": [q.to_dict() for q in quotes if q is not None],
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
