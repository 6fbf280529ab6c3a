"""
Shared httpx session helper.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx


@asynccontextmanager
async def client_session(http: httpx.AsyncClient | None = None) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the injected client, or a private one closed on exit."""
    if http is not None:
        yield http
        return
    async with httpx.AsyncClient() as client:
        yield client
