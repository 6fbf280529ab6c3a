"""Unit tests for the dashboard HTTP client."""

import asyncio
import json

import httpx

from command_centre.client.api import DashboardAPI


def make_api(handler):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return DashboardAPI("http://dashboard.test", http=http)


class TestDashboardAPI:
    """Tests for DashboardAPI against a mock transport."""

    def test_fetch_enquiries(self):
        def handler(request):
            assert request.url.path == "/api/enquiries"
            return httpx.Response(200, json={
                "emails": [{
                    "id": "m1",
                    "threadId": "t1",
                    "from": "Jane Client",
                    "fromEmail": "jane@example.com",
                    "subject": "Headshots",
                    "snippet": "Hi",
                    "date": "2023-11-14T22:13:20.000Z",
                    "timestamp": 1_700_000_000_000,
                    "isUnread": True,
                    "account": "professional",
                    "gmailUrl": "https://mail.google.com/mail/u/4/#inbox/m1",
                }],
                "live": True,
                "accounts": {"personal": True, "professional": True},
            })

        [email] = asyncio.run(make_api(handler).fetch_enquiries())

        assert email.id == "m1"
        assert email.sender_name == "Jane Client"
        assert email.is_unread is True
        assert email.account.value == "professional"

    def test_fetch_enquiries_failure(self):
        def handler(request):
            raise httpx.ConnectError("offline", request=request)

        assert asyncio.run(make_api(handler).fetch_enquiries()) is None

    def test_fetch_stocks_params(self):
        seen = {}

        def handler(request):
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"stocks": [{"symbol": "QDEL", "name": "QuidelOrtho"}]})

        stocks = asyncio.run(make_api(handler).fetch_stocks(["QDEL", "AAPL"], intraday=True))

        assert seen["params"] == {"symbols": "QDEL,AAPL", "intraday": "true"}
        assert stocks[0].symbol == "QDEL"

    def test_fetch_preference(self):
        def handler(request):
            if request.url.params["key"] == "stock-symbols":
                return httpx.Response(200, json={"value": ["QDEL"]})
            return httpx.Response(503, json={"error": "KV not configured"})

        api = make_api(handler)

        assert asyncio.run(api.fetch_preference("stock-symbols")) == ["QDEL"]
        assert asyncio.run(api.fetch_preference("overview-order")) is None

    def test_attempt_write(self):
        bodies = []

        def handler(request):
            body = json.loads(request.content)
            bodies.append(body)
            status = 200 if body["key"] == "stock-symbols" else 400
            return httpx.Response(status, json={})

        api = make_api(handler)

        assert asyncio.run(api.attempt_write("stock-symbols", ["QDEL"])) is True
        assert asyncio.run(api.attempt_write("nope", 1)) is False
        assert bodies[0] == {"key": "stock-symbols", "value": ["QDEL"]}

    def test_attempt_write_offline(self):
        def handler(request):
            raise httpx.ConnectError("offline", request=request)

        assert asyncio.run(make_api(handler).attempt_write("stock-symbols", ["QDEL"])) is False
