"""
Device-local key/value storage.

Plays the role of browser local storage for the client: synchronous string
items, persisted to a JSON file, or kept in memory when no path is given.
"""

import json
from pathlib import Path
from typing import Any

from command_centre.core.logging import get_logger

log = get_logger(__name__)


class LocalStore:
    """Synchronous string key/value store backed by a JSON file."""

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path).expanduser() if path else None
        self._items: dict[str, str] = {}
        self._load()

    def _load(self) -> None:
        if not self.path or not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            log.warning("local_store_unreadable", path=str(self.path), error=str(e))
            return
        if isinstance(data, dict):
            self._items = {k: v for k, v in data.items() if isinstance(v, str)}

    def _flush(self) -> None:
        if not self.path:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self._items), encoding="utf-8")
        except OSError as e:
            log.warning("local_store_write_failed", path=str(self.path), error=str(e))

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
        self._flush()

    def remove_item(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._flush()

    def get_json(self, key: str) -> Any:
        """Parsed JSON item, or None when absent or not valid JSON."""
        raw = self.get_item(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return None

    def set_json(self, key: str, value: Any) -> None:
        self.set_item(key, json.dumps(value))
