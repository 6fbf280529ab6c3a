"""Preference sync store."""

from command_centre.sync.store import (
    ALLOWED_KEYS,
    SyncStore,
    deserialize,
    serialize,
    validate_key,
)

__all__ = [
    "ALLOWED_KEYS",
    "SyncStore",
    "deserialize",
    "serialize",
    "validate_key",
]
