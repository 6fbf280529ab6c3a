"""
Error taxonomy shared by providers and the sync store.
"""


class ProviderUnavailable(RuntimeError):
    """An upstream provider call failed or returned a non-success status."""

    def __init__(self, provider: str, detail: str = ""):
        self.provider = provider
        self.detail = detail
        super().__init__(f"{provider} unavailable: {detail}" if detail else f"{provider} unavailable")


class SyncError(Exception):
    """Base class for sync store failures."""

    status_code = 500
    message = "Sync failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class InvalidKey(SyncError):
    """Key is not on the sync allow-list."""

    status_code = 400
    message = "Invalid key"


class NotConfigured(SyncError):
    """Remote store connection settings are absent."""

    status_code = 503
    message = "KV not configured"


class ReadFailed(SyncError):
    """Remote store read did not succeed."""

    status_code = 500
    message = "Failed to read"


class WriteFailed(SyncError):
    """Remote store did not acknowledge a write."""

    status_code = 500
    message = "Failed to write"
