"""
Data models for the dashboard.

Uses dataclasses for clean, typed data structures. ``to_dict`` produces the
camelCase wire format the dashboard front end consumes.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class AccountLabel(str, Enum):
    """Which of the owner's mailboxes a message came from."""

    PERSONAL = "personal"
    PROFESSIONAL = "professional"


class AccountType(str, Enum):
    """Kind of financial account shown on the dashboard."""

    CURRENT = "current"
    INVESTMENT = "investment"
    CREDIT = "credit"


class EventType(str, Enum):
    """Booking category inferred from calendar and summary."""

    PHOTOGRAPHY = "photography"
    RETAINER = "retainer"
    PERSONAL = "personal"
    MEETING = "meeting"
    TRAVEL = "travel"


@dataclass
class Mailbox:
    """One Gmail account the enquiry pipeline reads from."""

    label: AccountLabel
    refresh_token: str = ""
    address: str = ""
    web_index: int = 0

    @property
    def enabled(self) -> bool:
        """A mailbox without a refresh token is treated as disabled."""
        return bool(self.refresh_token)

    def web_url(self, message_id: str) -> str:
        """Deep link to the message in the Gmail web UI."""
        return f"https://mail.google.com/mail/u/{self.web_index}/#inbox/{message_id}"


@dataclass
class EnquiryMessage:
    """A filtered, normalized enquiry email."""

    id: str
    thread_id: str = ""
    sender_name: str = ""
    sender_email: str = ""
    subject: str = ""
    snippet: str = ""
    timestamp: int = 0  # Provider internal date, epoch ms
    is_unread: bool = False
    account: AccountLabel = AccountLabel.PERSONAL
    url: str = ""

    @property
    def date(self) -> str:
        """ISO-8601 UTC string derived from the provider timestamp."""
        dt = datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc)
        return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "threadId": self.thread_id,
            "from": self.sender_name,
            "fromEmail": self.sender_email,
            "subject": self.subject,
            "snippet": self.snippet,
            "date": self.date,
            "timestamp": self.timestamp,
            "isUnread": self.is_unread,
            "account": self.account.value,
            "gmailUrl": self.url,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EnquiryMessage":
        """Create EnquiryMessage from the wire format."""
        try:
            account = AccountLabel(data.get("account", "personal"))
        except ValueError:
            account = AccountLabel.PERSONAL

        return cls(
            id=str(data.get("id", "")),
            thread_id=data.get("threadId", ""),
            sender_name=data.get("from", ""),
            sender_email=data.get("fromEmail", ""),
            subject=data.get("subject", ""),
            snippet=data.get("snippet", ""),
            timestamp=int(data.get("timestamp") or 0),
            is_unread=bool(data.get("isUnread", False)),
            account=account,
            url=data.get("gmailUrl", ""),
        )


@dataclass
class EnquiryResult:
    """Response of one enquiry pipeline run."""

    emails: list[EnquiryMessage] = field(default_factory=list)
    live: bool = False
    accounts: dict[str, bool] = field(default_factory=lambda: {
        AccountLabel.PERSONAL.value: False,
        AccountLabel.PROFESSIONAL.value: False,
    })
    error: str | None = None
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "emails": [email.to_dict() for email in self.emails],
            "live": self.live,
            "accounts": dict(self.accounts),
        }
        if self.error:
            data["error"] = self.error
        if self.message:
            data["message"] = self.message
        return data


@dataclass
class AccountBalance:
    """A bank, brokerage or credit card balance."""

    id: str
    name: str
    type: AccountType
    balance: float | None = None
    currency: str = "GBP"
    last_updated: str | None = None
    auto_sync: bool = False
    live: bool = False
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "balance": self.balance,
            **self.extra,
            "currency": self.currency,
            "lastUpdated": self.last_updated,
            "autoSync": self.auto_sync,
            "live": self.live,
        }


@dataclass
class StockQuote:
    """Quote and price history for one symbol."""

    symbol: str
    name: str
    current_price: float
    previous_close: float
    change_amount: float
    change_percent: float
    currency: str | None = None
    market_state: str | None = None
    regular_market_time: int | None = None
    history: list[dict[str, Any]] = field(default_factory=list)
    intraday: list[dict[str, Any]] | None = None

    def to_dict(self) -> dict[str, Any]:
        data = {
            "symbol": self.symbol,
            "name": self.name,
            "currentPrice": self.current_price,
            "previousClose": self.previous_close,
            "changeAmount": self.change_amount,
            "changePercent": self.change_percent,
            "regularMarketTime": self.regular_market_time,
            "marketState": self.market_state,
            "currency": self.currency,
            "history": self.history,
        }
        if self.intraday is not None:
            data["intraday"] = self.intraday
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StockQuote":
        """Create StockQuote from the wire format."""
        return cls(
            symbol=data.get("symbol", ""),
            name=data.get("name", ""),
            current_price=data.get("currentPrice", 0),
            previous_close=data.get("previousClose", 0),
            change_amount=data.get("changeAmount", 0),
            change_percent=data.get("changePercent", 0),
            currency=data.get("currency"),
            market_state=data.get("marketState"),
            regular_market_time=data.get("regularMarketTime"),
            history=data.get("history") or [],
            intraday=data.get("intraday"),
        )


@dataclass
class BookingEvent:
    """An upcoming calendar booking."""

    id: str
    title: str
    client: str
    date: str
    type: EventType
    end_date: str = ""
    time: str | None = None
    end_time: str | None = None
    location: str | None = None
    description: str | None = None
    calendar_source: str | None = None
    all_day: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "client": self.client,
            "date": self.date,
            "endDate": self.end_date,
            "time": self.time,
            "endTime": self.end_time,
            "location": self.location,
            "description": self.description,
            "type": self.type.value,
            "calendarSource": self.calendar_source,
            "allDay": self.all_day,
        }


@dataclass
class WeatherReport:
    """Current conditions plus a short forecast."""

    temp: int
    feels_like: int
    description: str
    icon: str
    humidity: int
    wind_speed: int  # km/h
    forecast: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "temp": self.temp,
            "feelsLike": self.feels_like,
            "description": self.description,
            "icon": self.icon,
            "humidity": self.humidity,
            "windSpeed": self.wind_speed,
            "forecast": self.forecast,
        }
