"""
Local-first preferences.

Each preference renders from device-local storage immediately, then adopts the
remote value only if it passes a feature-specific shape check. Writes land in
local storage synchronously and are pushed to the remote store best-effort.
Local storage is always authoritative for this device.
"""

import asyncio
from typing import Any, Callable, Protocol

from command_centre.client.local_store import LocalStore
from command_centre.core.logging import get_logger

log = get_logger(__name__)

OVERVIEW_WIDGETS = ("enquiries", "bookings", "accounts", "stocks", "invoices")
DEFAULT_STOCK_SYMBOLS = ["QDEL"]


class RemoteSync(Protocol):
    """What a preference needs from the remote side."""

    async def fetch_preference(self, key: str) -> Any: ...

    async def attempt_write(self, key: str, value: Any) -> bool: ...


def valid_overview_order(value: Any) -> bool:
    """Exactly the known widget ids, each once."""
    return (
        isinstance(value, list)
        and len(value) == len(OVERVIEW_WIDGETS)
        and set(value) == set(OVERVIEW_WIDGETS)
    )


def valid_stock_symbols(value: Any) -> bool:
    return (
        isinstance(value, list)
        and len(value) > 0
        and all(isinstance(s, str) and s for s in value)
    )


def valid_balance_map(value: Any) -> bool:
    """Flat ``{"<id>": number, "<id>-updated": iso}`` object."""
    return isinstance(value, dict) and all(
        isinstance(v, (int, float, str)) and not isinstance(v, bool) for v in value.values()
    )


def valid_invoice_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, dict) for item in value)


class Preference:
    """One allow-listed key with local-first reads and best-effort remote writes."""

    def __init__(
        self,
        key: str,
        local: LocalStore,
        remote: RemoteSync,
        default: Any,
        validate: Callable[[Any], bool] = lambda value: value is not None,
        local_key: str | None = None,
    ):
        self.key = key
        self.local = local
        self.remote = remote
        self.default = default
        self.validate = validate
        self.local_key = local_key or f"rcc-{key}"
        self.value = default
        self._pending: set[asyncio.Task] = set()

    def load(self) -> Any:
        """Synchronously adopt the locally stored value if it is well-formed."""
        stored = self.local.get_json(self.local_key)
        if stored is not None and self.validate(stored):
            self.value = stored
        return self.value

    async def reconcile(self) -> bool:
        """
        Adopt the remote value if it passes the shape check.

        Returns:
            True if the local and in-memory values were replaced
        """
        remote_value = await self.remote.fetch_preference(self.key)
        if remote_value is None:
            return False
        if not self.validate(remote_value):
            log.info("preference_remote_rejected", key=self.key)
            return False

        self.local.set_json(self.local_key, remote_value)
        self.value = remote_value
        return True

    def set(self, value: Any) -> asyncio.Task | None:
        """
        Store locally now and push remotely in the background.

        Returns:
            The pending remote write, or None when no event loop is running
            (the write is then kept locally only)
        """
        self.value = value
        self.local.set_json(self.local_key, value)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            log.info("preference_remote_write_skipped", key=self.key, reason="no event loop")
            return None

        task = loop.create_task(self.remote.attempt_write(self.key, value))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def save(self, value: Any) -> bool:
        """Store locally and wait for the remote acknowledgement."""
        task = self.set(value)
        return await task


def build_preferences(local: LocalStore, remote: RemoteSync) -> dict[str, Preference]:
    """The dashboard's synced preferences, keyed by sync key."""
    return {
        "overview-order": Preference(
            "overview-order", local, remote, list(OVERVIEW_WIDGETS), valid_overview_order,
        ),
        "stock-symbols": Preference(
            "stock-symbols", local, remote, list(DEFAULT_STOCK_SYMBOLS), valid_stock_symbols,
        ),
        "credit-card-balances": Preference(
            "credit-card-balances", local, remote, {}, valid_balance_map,
        ),
        "credit-card-limits": Preference(
            "credit-card-limits", local, remote, {}, valid_balance_map,
        ),
        "pixieset-invoices": Preference(
            "pixieset-invoices", local, remote, [], valid_invoice_list,
        ),
    }
