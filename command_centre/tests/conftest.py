"""
Shared pytest fixtures for command_centre tests.
"""

import asyncio

import pytest

from command_centre.client.local_store import LocalStore
from command_centre.core.models import AccountLabel, Mailbox
from command_centre.enquiries.classifier import SpamClassifier
from command_centre.enquiries.rules import SpamRules

PERSONAL_ADDRESS = "owner@gmail.com"
PROFESSIONAL_ADDRESS = "photography@studio-example.co.uk"
OWN_DOMAIN = "studio-example"


class FakeGmail:
    """In-memory stand-in for GmailClient."""

    def __init__(
        self,
        messages: list[dict],
        error: Exception | None = None,
        profile: str | None = None,
        failing: dict[str, Exception] | None = None,
    ):
        self.messages = {m["id"]: m for m in messages}
        self.order = [m["id"] for m in messages]
        self.error = error
        self.list_calls: list[tuple[str, int]] = []
        self.fetched: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False
        self.profile = profile
        self.profile_calls = 0
        self.failing = failing or {}
        self.fetched_before_close: list[str] | None = None

    async def list_messages(self, query: str, max_results: int = 30) -> list[dict]:
        self.list_calls.append((query, max_results))
        if self.error:
            raise self.error
        return [{"id": i, "threadId": self.messages[i].get("threadId", "")} for i in self.order][:max_results]

    async def get_message_metadata(self, message_id: str) -> dict:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0)
        if message_id in self.failing:
            self.in_flight -= 1
            raise self.failing[message_id]
        await asyncio.sleep(0)
        self.in_flight -= 1
        self.fetched.append(message_id)
        return self.messages[message_id]

    async def get_profile(self) -> dict:
        self.profile_calls += 1
        return {"emailAddress": self.profile} if self.profile else {}

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.closed = True
        self.fetched_before_close = list(self.fetched)


def gmail_message(
    message_id: str,
    sender: str = "Jane Client <jane@example.com>",
    subject: str = "Headshot booking enquiry",
    snippet: str = "Hi, are you free for a headshot session next month?",
    internal_date: int = 1_760_000_000_000,
    unread: bool = True,
    thread_id: str | None = None,
) -> dict:
    """Gmail ``format=metadata`` message resource."""
    labels = ["INBOX", "UNREAD"] if unread else ["INBOX"]
    return {
        "id": message_id,
        "threadId": thread_id or f"t-{message_id}",
        "labelIds": labels,
        "snippet": snippet,
        "internalDate": str(internal_date),
        "payload": {
            "headers": [
                {"name": "From", "value": sender},
                {"name": "Subject", "value": subject},
                {"name": "Date", "value": "Mon, 1 Jan 2001 00:00:00 +0000"},
            ]
        },
    }


@pytest.fixture
def spam_rules() -> SpamRules:
    """Default rule set with the test owner's addresses."""
    return SpamRules.build(
        owner_addresses=[PERSONAL_ADDRESS, PROFESSIONAL_ADDRESS],
        own_domain=OWN_DOMAIN,
    )


@pytest.fixture
def classifier(spam_rules) -> SpamClassifier:
    return SpamClassifier(spam_rules)


@pytest.fixture
def personal_mailbox() -> Mailbox:
    return Mailbox(
        label=AccountLabel.PERSONAL,
        refresh_token="personal-refresh",
        address=PERSONAL_ADDRESS,
        web_index=0,
    )


@pytest.fixture
def professional_mailbox() -> Mailbox:
    return Mailbox(
        label=AccountLabel.PROFESSIONAL,
        refresh_token="professional-refresh",
        address=PROFESSIONAL_ADDRESS,
        web_index=4,
    )


@pytest.fixture
def local_store() -> LocalStore:
    """In-memory local storage."""
    return LocalStore()


@pytest.fixture
def mock_settings(monkeypatch):
    """Provider credentials in the environment."""
    monkeypatch.setenv("GMAIL_OAUTH_CREDENTIALS", '{"client_id": "cid", "client_secret": "secret"}')
    monkeypatch.setenv("GMAIL_PERSONAL_REFRESH_TOKEN", "personal-refresh")
    monkeypatch.setenv("GMAIL_PROFESSIONAL_REFRESH_TOKEN", "professional-refresh")
    monkeypatch.setenv("PERSONAL_ADDRESS", PERSONAL_ADDRESS)
    monkeypatch.setenv("PROFESSIONAL_ADDRESS", PROFESSIONAL_ADDRESS)
    monkeypatch.setenv("OWN_DOMAIN", OWN_DOMAIN)
    monkeypatch.setenv("KV_REST_API_URL", "https://kv.example.com")
    monkeypatch.setenv("KV_REST_API_TOKEN", "kv-token")


@pytest.fixture
def make_message():
    """Factory for Gmail metadata resources."""
    return gmail_message


@pytest.fixture
def fake_gmail():
    """The FakeGmail class, for building per-test mailboxes."""
    return FakeGmail
