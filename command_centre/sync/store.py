"""
Allow-listed preference store on top of the remote key/value service.

Values are JSON blobs stored one per key under ``<namespace>:<key>``.
Last write wins; there is no versioning and nothing is ever deleted.
"""

import json
from typing import Any

from command_centre.config import settings
from command_centre.core.errors import InvalidKey, NotConfigured, ReadFailed, WriteFailed
from command_centre.core.logging import get_logger
from command_centre.services.kv import KVClient

log = get_logger(__name__)

ALLOWED_KEYS = (
    "overview-order",
    "stock-symbols",
    "credit-card-balances",
    "credit-card-limits",
    "pixieset-invoices",
)


def validate_key(key: Any) -> str:
    """Return the key if it is allow-listed, raise InvalidKey otherwise."""
    if not isinstance(key, str) or key not in ALLOWED_KEYS:
        raise InvalidKey()
    return key


def serialize(value: Any) -> str:
    """Strings pass through unchanged, everything else becomes compact JSON."""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"))


def deserialize(raw: str | None) -> Any:
    """JSON-decode a stored blob, falling back to the raw string."""
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return raw


class SyncStore:
    """Reads and writes allow-listed preference blobs."""

    def __init__(self, kv: KVClient | None = None, namespace: str | None = None):
        self.kv = kv or KVClient()
        self.namespace = namespace or settings.kv_namespace

    def namespaced(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    async def read(self, key: str) -> Any:
        """
        Read a preference value.

        Args:
            key: Allow-listed sync key

        Returns:
            Parsed JSON value, the raw string if it is not JSON, or None if absent

        Raises:
            InvalidKey: key is not allow-listed
            NotConfigured: the remote store is not configured
            ReadFailed: the remote call failed
        """
        key = validate_key(key)
        if not self.kv.enabled:
            raise NotConfigured()

        try:
            raw = await self.kv.get(self.namespaced(key))
        except Exception as e:
            log.error("sync_read_error", key=key, error=str(e))
            raise ReadFailed() from e

        return deserialize(raw)

    async def write(self, key: str, value: Any) -> bool:
        """
        Store a preference value, replacing whatever was there.

        Raises:
            InvalidKey: key is not allow-listed
            NotConfigured: the remote store is not configured
            WriteFailed: the remote store did not acknowledge the write
        """
        key = validate_key(key)
        if not self.kv.enabled:
            raise NotConfigured()

        try:
            ok = await self.kv.set(self.namespaced(key), serialize(value))
        except Exception as e:
            log.error("sync_write_error", key=key, error=str(e))
            raise WriteFailed() from e

        if not ok:
            raise WriteFailed()

        log.info("sync_written", key=key)
        return True

    async def read_or_default(self, key: str, default: Any = None) -> Any:
        """Read a value for server-side consumers, returning ``default`` on any failure."""
        try:
            value = await self.read(key)
        except Exception as e:
            log.warning("sync_read_fallback", key=key, error=str(e))
            return default
        return default if value is None else value
