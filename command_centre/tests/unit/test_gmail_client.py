"""Unit tests for the Gmail REST client."""

import asyncio

import httpx
import pytest

from command_centre.core.errors import ProviderUnavailable
from command_centre.services.gmail import GmailClient

TOKEN_URI = "https://oauth.example.com/token"
API_URL = "https://gmail.example.com/gmail/v1"


def make_client(handler):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GmailClient(
        refresh_token="refresh",
        client_id="cid",
        client_secret="secret",
        token_uri=TOKEN_URI,
        api_url=API_URL,
        http=http,
    )


class TestGmailClient:
    """Tests for GmailClient against a mock transport."""

    def test_list_messages_refreshes_token_once(self):
        requests = []

        def handler(request):
            requests.append(request)
            if str(request.url) == TOKEN_URI:
                return httpx.Response(200, json={"access_token": "access-1", "expires_in": 3599})
            return httpx.Response(200, json={"messages": [{"id": "m1", "threadId": "t1"}]})

        async def run():
            client = make_client(handler)
            first = await client.list_messages("subject:booking", 30)
            second = await client.list_messages("subject:quote", 5)
            return first, second

        first, second = asyncio.run(run())

        assert first == [{"id": "m1", "threadId": "t1"}]
        assert second == first
        token_requests = [r for r in requests if str(r.url) == TOKEN_URI]
        assert len(token_requests) == 1
        body = token_requests[0].content.decode()
        assert "grant_type=refresh_token" in body
        assert "refresh_token=refresh" in body

        search = requests[1]
        assert search.url.path == "/gmail/v1/users/me/messages"
        assert search.url.params["q"] == "subject:booking"
        assert search.url.params["maxResults"] == "30"
        assert search.headers["Authorization"] == "Bearer access-1"

    def test_empty_search(self):
        def handler(request):
            if str(request.url) == TOKEN_URI:
                return httpx.Response(200, json={"access_token": "a"})
            return httpx.Response(200, json={"resultSizeEstimate": 0})

        assert asyncio.run(make_client(handler).list_messages("q")) == []

    def test_metadata_request(self):
        seen = {}

        def handler(request):
            if str(request.url) == TOKEN_URI:
                return httpx.Response(200, json={"access_token": "a"})
            seen["url"] = request.url
            return httpx.Response(200, json={"id": "m1", "snippet": "hello"})

        detail = asyncio.run(make_client(handler).get_message_metadata("m1"))

        assert detail == {"id": "m1", "snippet": "hello"}
        assert seen["url"].path == "/gmail/v1/users/me/messages/m1"
        assert seen["url"].params["format"] == "metadata"
        assert seen["url"].params.get_list("metadataHeaders") == ["From", "Subject", "Date"]

    def test_profile_request(self):
        seen = {}

        def handler(request):
            if str(request.url) == TOKEN_URI:
                return httpx.Response(200, json={"access_token": "a"})
            seen["request"] = request
            return httpx.Response(200, json={"emailAddress": "owner@gmail.com", "messagesTotal": 12})

        profile = asyncio.run(make_client(handler).get_profile())

        assert profile["emailAddress"] == "owner@gmail.com"
        assert seen["request"].url.path == "/gmail/v1/users/me/profile"
        assert seen["request"].headers["Authorization"] == "Bearer a"

    def test_token_refresh_failure(self):
        def handler(request):
            return httpx.Response(400, json={"error": "invalid_grant"})

        with pytest.raises(ProviderUnavailable) as exc_info:
            asyncio.run(make_client(handler).list_messages("q"))

        assert exc_info.value.provider == "gmail"

    def test_missing_access_token(self):
        def handler(request):
            return httpx.Response(200, json={"token_type": "Bearer"})

        with pytest.raises(ProviderUnavailable):
            asyncio.run(make_client(handler).refresh_access_token())

    def test_api_error_status(self):
        def handler(request):
            if str(request.url) == TOKEN_URI:
                return httpx.Response(200, json={"access_token": "a"})
            return httpx.Response(403, json={"error": {"message": "forbidden"}})

        with pytest.raises(ProviderUnavailable, match="403"):
            asyncio.run(make_client(handler).list_messages("q"))

    def test_injected_client_left_open(self):
        async def run():
            http = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
            async with GmailClient("r", "c", "s", http=http):
                pass
            return http

        http = asyncio.run(run())

        assert http.is_closed is False
