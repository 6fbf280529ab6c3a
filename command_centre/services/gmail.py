"""
Gmail REST client authenticated with a stored OAuth refresh token.
"""

from typing import Any

import httpx

from command_centre.config import settings
from command_centre.core.errors import ProviderUnavailable
from command_centre.core.logging import get_logger

log = get_logger(__name__)

METADATA_HEADERS = ("From", "Subject", "Date")


class GmailClient:
    """Async client for one Gmail mailbox."""

    def __init__(
        self,
        refresh_token: str,
        client_id: str,
        client_secret: str,
        token_uri: str | None = None,
        api_url: str | None = None,
        http: httpx.AsyncClient | None = None,
    ):
        self.refresh_token = refresh_token
        self.client_id = client_id
        self.client_secret = client_secret
        self.token_uri = token_uri or settings.gmail_token_uri
        self.api_url = (api_url or settings.gmail_api_url).rstrip("/")
        self._http = http or httpx.AsyncClient()
        self._owns_http = http is None
        self._access_token: str | None = None

    async def refresh_access_token(self) -> str:
        """Exchange the refresh token for a short-lived access token."""
        # Same grant as google.oauth2.credentials.Credentials.refresh(), which is sync only
        response = await self._http.post(
            self.token_uri,
            data={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "refresh_token": self.refresh_token,
                "grant_type": "refresh_token",
            },
        )
        if response.status_code != 200:
            log.error(
                "gmail_token_refresh_failed",
                status=response.status_code,
                response_body=response.text[:300],
            )
            raise ProviderUnavailable("gmail", f"token refresh returned {response.status_code}")

        token = response.json().get("access_token")
        if not token:
            raise ProviderUnavailable("gmail", "token response missing access_token")
        self._access_token = token
        return token

    async def _get(self, path: str, params: Any = None) -> dict[str, Any]:
        """Authorized GET against the Gmail API."""
        if not self._access_token:
            await self.refresh_access_token()

        response = await self._http.get(
            f"{self.api_url}{path}",
            params=params,
            headers={"Authorization": f"Bearer {self._access_token}"},
        )
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderUnavailable("gmail", f"{path} returned {e.response.status_code}") from e
        return response.json()

    async def list_messages(self, query: str, max_results: int = 30) -> list[dict[str, Any]]:
        """
        Search the mailbox.

        Args:
            query: Gmail search syntax
            max_results: Upper bound on returned ids

        Returns:
            List of ``{"id", "threadId"}`` stubs, newest first
        """
        data = await self._get(
            "/users/me/messages",
            params={"q": query, "maxResults": max_results},
        )
        return data.get("messages") or []

    async def get_profile(self) -> dict[str, Any]:
        """Mailbox profile; ``emailAddress`` is the account's own address."""
        return await self._get("/users/me/profile")

    async def get_message_metadata(
        self,
        message_id: str,
        headers: tuple[str, ...] = METADATA_HEADERS,
    ) -> dict[str, Any]:
        """Fetch headers, snippet, labels and internal date for one message."""
        params = [("format", "metadata")] + [("metadataHeaders", h) for h in headers]
        return await self._get(f"/users/me/messages/{message_id}", params=params)

    async def close(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
