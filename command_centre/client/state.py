"""
Dashboard application state.

An explicit state object with typed actions, handed to whatever renders
the dashboard. Persisted fields go through local-first preferences.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from command_centre.client.local_store import LocalStore
from command_centre.client.preferences import (
    OVERVIEW_WIDGETS,
    Preference,
    RemoteSync,
    build_preferences,
    valid_overview_order,
)
from command_centre.core.models import BookingEvent, EnquiryMessage, StockQuote, WeatherReport

DEFAULT_TAX_PERCENTAGE = 25.0


def set_manual_balance(
    balances: dict[str, Any],
    card_id: str,
    amount: float,
    updated_at: str | None = None,
) -> dict[str, Any]:
    """Copy of a flat balance map with one card's balance and ``-updated`` stamp replaced."""
    updated_at = updated_at or datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return {**balances, card_id: amount, f"{card_id}-updated": updated_at}


@dataclass
class DashboardState:
    preferences: dict[str, Preference]
    stocks: list[StockQuote] = field(default_factory=list)
    bookings: list[BookingEvent] = field(default_factory=list)
    enquiries: list[EnquiryMessage] = field(default_factory=list)
    glance_enquiries: list[EnquiryMessage] = field(default_factory=list)
    weather: WeatherReport | None = None
    tax_percentage: float = DEFAULT_TAX_PERCENTAGE

    @classmethod
    def create(cls, local: LocalStore, remote: RemoteSync) -> "DashboardState":
        """Build state and synchronously load every preference from local storage."""
        state = cls(preferences=build_preferences(local, remote))
        for preference in state.preferences.values():
            preference.load()
        return state

    async def reconcile(self) -> dict[str, bool]:
        """Pull every preference from the remote store; returns which ones changed."""
        return {key: await pref.reconcile() for key, pref in self.preferences.items()}

    # Stocks

    @property
    def stock_symbols(self) -> list[str]:
        return list(self.preferences["stock-symbols"].value)

    def set_stocks(self, stocks: list[StockQuote]) -> None:
        """Replace quotes, ordered by the persisted watchlist (unknown symbols last)."""
        order = {symbol: i for i, symbol in enumerate(self.stock_symbols)}
        self.stocks = sorted(stocks, key=lambda s: order.get(s.symbol, len(order)))

    def add_stock(self, stock: StockQuote) -> None:
        if stock.symbol in self.stock_symbols:
            return
        self.stocks = [*self.stocks, stock]
        self.preferences["stock-symbols"].set([*self.stock_symbols, stock.symbol])

    def remove_stock(self, symbol: str) -> None:
        self.stocks = [s for s in self.stocks if s.symbol != symbol]
        self.preferences["stock-symbols"].set([s for s in self.stock_symbols if s != symbol])

    def reorder_stocks(self, from_index: int, to_index: int) -> None:
        stocks = list(self.stocks)
        moved = stocks.pop(from_index)
        stocks.insert(to_index, moved)
        self.stocks = stocks
        self.preferences["stock-symbols"].set([s.symbol for s in stocks])

    # Overview layout

    @property
    def overview_order(self) -> list[str]:
        return list(self.preferences["overview-order"].value)

    def set_overview_order(self, order: list[str]) -> None:
        if not valid_overview_order(order):
            raise ValueError(f"Overview order must contain exactly {', '.join(OVERVIEW_WIDGETS)}")
        self.preferences["overview-order"].set(list(order))

    # Manual balances

    @property
    def card_balances(self) -> dict[str, Any]:
        return dict(self.preferences["credit-card-balances"].value)

    @property
    def card_limits(self) -> dict[str, Any]:
        return dict(self.preferences["credit-card-limits"].value)

    def set_card_balance(self, card_id: str, amount: float, updated_at: str | None = None) -> None:
        self.preferences["credit-card-balances"].set(
            set_manual_balance(self.card_balances, card_id, amount, updated_at)
        )

    def set_card_limit(self, card_id: str, limit: float) -> None:
        self.preferences["credit-card-limits"].set({**self.card_limits, card_id: limit})

    # Tax

    def set_tax_percentage(self, percentage: float) -> None:
        self.tax_percentage = min(max(percentage, 0.0), 100.0)

    def estimated_tax(self, income: float) -> float:
        return round(income * self.tax_percentage / 100, 2)

    # Feeds

    def set_enquiries(self, enquiries: list[EnquiryMessage]) -> None:
        self.enquiries = list(enquiries)

    def set_glance_enquiries(self, enquiries: list[EnquiryMessage]) -> None:
        self.glance_enquiries = list(enquiries)

    def set_bookings(self, bookings: list[BookingEvent]) -> None:
        self.bookings = list(bookings)

    def set_weather(self, weather: WeatherReport) -> None:
        self.weather = weather
