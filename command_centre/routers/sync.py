"""
Preference sync endpoints.

GET  /api/sync?key=<key>  read a stored preference
POST /api/sync {"key", "value"}  overwrite a stored preference

CORS is fully open so a bookmarklet on another origin can post invoices.
"""

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from command_centre.core.errors import InvalidKey, SyncError, WriteFailed
from command_centre.core.logging import get_logger
from command_centre.sync.store import SyncStore

log = get_logger(__name__)

router = APIRouter(prefix="/api")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class SyncWriteRequest(BaseModel):
    """Body of POST /api/sync. The key is checked against the allow-list by the store."""

    key: Any = None
    value: Any = None


def get_sync_store() -> SyncStore:
    return SyncStore()


def _json(data: dict, status_code: int = 200) -> JSONResponse:
    return JSONResponse(data, status_code=status_code, headers=CORS_HEADERS)


def _error(error: SyncError) -> JSONResponse:
    return _json({"error": error.message}, status_code=error.status_code)


@router.options("/sync")
async def sync_preflight():
    """CORS preflight."""
    return _json({})


@router.get("/sync")
async def read_preference(key: str | None = None, store: SyncStore = Depends(get_sync_store)):
    """Read one allow-listed preference; ``value`` is null when unset."""
    try:
        value = await store.read(key)
    except SyncError as e:
        return _error(e)
    return _json({"value": value})


@router.post("/sync")
async def write_preference(request: Request, store: SyncStore = Depends(get_sync_store)):
    """Overwrite one allow-listed preference."""
    try:
        body = await request.json()
    except ValueError as e:
        log.warning("sync_invalid_body", error=str(e))
        return _error(WriteFailed())

    if not isinstance(body, dict):
        return _error(InvalidKey())

    payload = SyncWriteRequest.model_validate(body)
    try:
        await store.write(payload.key, payload.value)
    except SyncError as e:
        return _error(e)
    return _json({"ok": True})
