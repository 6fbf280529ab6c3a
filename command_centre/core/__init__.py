"""Core modules for the dashboard."""

from .logging import configure_logging, get_logger
from .errors import (
    ProviderUnavailable,
    SyncError,
    InvalidKey,
    NotConfigured,
    ReadFailed,
    WriteFailed,
)
from .models import (
    AccountLabel,
    AccountType,
    EventType,
    Mailbox,
    EnquiryMessage,
    EnquiryResult,
    AccountBalance,
    StockQuote,
    BookingEvent,
    WeatherReport,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "ProviderUnavailable",
    "SyncError",
    "InvalidKey",
    "NotConfigured",
    "ReadFailed",
    "WriteFailed",
    "AccountLabel",
    "AccountType",
    "EventType",
    "Mailbox",
    "EnquiryMessage",
    "EnquiryResult",
    "AccountBalance",
    "StockQuote",
    "BookingEvent",
    "WeatherReport",
]
