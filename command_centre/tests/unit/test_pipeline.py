"""Unit tests for the two-mailbox enquiry pipeline."""

import asyncio
from unittest.mock import MagicMock

from command_centre.config import Settings
from command_centre.core.models import AccountLabel, Mailbox
from command_centre.enquiries.fetcher import MailboxFetcher
from command_centre.enquiries.pipeline import EnquiryPipeline, default_mailboxes


class ExplodingFetcher:
    """Fetcher that fails outside the per-mailbox error handling."""

    async def fetch(self, mailbox):
        raise RuntimeError("unexpected")


def pipeline_for(mailboxes, gmail_by_label, classifier):
    fetcher = MailboxFetcher(
        lambda mailbox: gmail_by_label[mailbox.label],
        classifier=classifier,
        query="test-query",
    )
    return EnquiryPipeline(mailboxes, fetcher)


class TestEnquiryPipeline:
    """Tests for EnquiryPipeline.run."""

    def test_one_account_failing(
        self, classifier, personal_mailbox, professional_mailbox, fake_gmail, make_message
    ):
        """Test a failing mailbox contributes nothing while the other still serves."""
        gmail = {
            AccountLabel.PERSONAL: fake_gmail([], error=RuntimeError("401 Unauthorized")),
            AccountLabel.PROFESSIONAL: fake_gmail(
                [make_message(f"w{i}", subject=f"Enquiry {i}", internal_date=1000 + i) for i in range(5)]
            ),
        }
        pipeline = pipeline_for([personal_mailbox, professional_mailbox], gmail, classifier)

        result = asyncio.run(pipeline.run())

        assert result.live is True
        assert result.error is None
        assert [e.id for e in result.emails] == ["w4", "w3", "w2", "w1", "w0"]
        assert all(e.account == AccountLabel.PROFESSIONAL for e in result.emails)
        # Connectivity reflects configured credentials, not fetch success
        assert result.accounts == {"personal": True, "professional": True}

    def test_merges_both_accounts(
        self, classifier, personal_mailbox, professional_mailbox, fake_gmail, make_message
    ):
        gmail = {
            AccountLabel.PERSONAL: fake_gmail([
                make_message("p1", subject="Wedding quote", internal_date=300),
                make_message("p2", subject="Portrait session", internal_date=100),
            ]),
            AccountLabel.PROFESSIONAL: fake_gmail([
                make_message("w1", subject="Fwd: Wedding quote", internal_date=200),
            ]),
        }
        pipeline = pipeline_for([personal_mailbox, professional_mailbox], gmail, classifier)

        payload = asyncio.run(pipeline.run()).to_dict()

        assert [e["id"] for e in payload["emails"]] == ["p1", "p2"]
        assert payload["emails"][0]["gmailUrl"] == "https://mail.google.com/mail/u/0/#inbox/p1"
        assert "error" not in payload

    def test_missing_refresh_token(self, classifier, personal_mailbox, fake_gmail, make_message):
        """Test a mailbox without a token is skipped and reported as not connected."""
        gmail = {AccountLabel.PERSONAL: fake_gmail([make_message("p1")])}
        professional = Mailbox(label=AccountLabel.PROFESSIONAL, refresh_token="", web_index=4)
        pipeline = pipeline_for([personal_mailbox, professional], gmail, classifier)

        result = asyncio.run(pipeline.run())

        assert [e.id for e in result.emails] == ["p1"]
        assert result.accounts == {"personal": True, "professional": False}

    def test_oauth_not_configured(self, personal_mailbox, professional_mailbox):
        pipeline = EnquiryPipeline([personal_mailbox, professional_mailbox], fetcher=None)

        payload = asyncio.run(pipeline.run()).to_dict()

        assert payload == {
            "emails": [],
            "live": False,
            "accounts": {"personal": False, "professional": False},
            "message": "Gmail OAuth not configured",
        }

    def test_unexpected_failure(self, personal_mailbox, professional_mailbox):
        pipeline = EnquiryPipeline([personal_mailbox, professional_mailbox], ExplodingFetcher())

        result = asyncio.run(pipeline.run())

        assert result.live is False
        assert result.emails == []
        assert result.error == "Failed to fetch emails"

    def test_output_limit(self, classifier, personal_mailbox, professional_mailbox, fake_gmail, make_message):
        gmail = {
            label: fake_gmail([
                make_message(f"{label.value}{i}", subject=f"{label.value} {i}", internal_date=i)
                for i in range(15)
            ])
            for label in AccountLabel
        }
        pipeline = pipeline_for([personal_mailbox, professional_mailbox], gmail, classifier)

        result = asyncio.run(pipeline.run())

        assert len(result.emails) == 20


class TestFromSettings:
    """Tests for wiring the pipeline from configuration."""

    def test_without_oauth_credentials(self):
        pipeline = EnquiryPipeline.from_settings(Settings(gmail_oauth_credentials=""))

        assert pipeline.fetcher is None
        assert pipeline.connected_accounts == {"personal": False, "professional": False}

    def test_with_credentials(self):
        config = Settings(
            gmail_oauth_credentials='{"installed": {"client_id": "cid", "client_secret": "s"}}',
            gmail_personal_refresh_token="p-token",
            gmail_professional_refresh_token="",
            enquiry_output_limit=10,
        )

        pipeline = EnquiryPipeline.from_settings(config)

        assert pipeline.fetcher is not None
        assert pipeline.limit == 10
        assert pipeline.connected_accounts == {"personal": True, "professional": False}

    def test_warns_without_owner_addresses(self, monkeypatch):
        """Test a missing owner address is reported rather than silently ignored."""
        mock_log = MagicMock()
        monkeypatch.setattr("command_centre.enquiries.pipeline.log", mock_log)
        config = Settings(
            _env_file=None,
            gmail_oauth_credentials='{"installed": {"client_id": "cid", "client_secret": "s"}}',
            gmail_personal_refresh_token="p",
            gmail_professional_refresh_token="",
            personal_address="",
            professional_address="",
        )

        pipeline = EnquiryPipeline.from_settings(config)

        mock_log.warning.assert_called_once_with("owner_addresses_not_configured")
        assert pipeline.fetcher.classifier.rules.owner_addresses == frozenset()

    def test_own_reply_dropped_without_owner_addresses(self, fake_gmail, make_message):
        """Test the personal mailbox drops its own reply when no owner address is configured."""
        config = Settings(
            _env_file=None,
            gmail_oauth_credentials='{"installed": {"client_id": "cid", "client_secret": "s"}}',
            gmail_personal_refresh_token="p",
            gmail_professional_refresh_token="",
            personal_address="",
            professional_address="",
        )
        gmail = fake_gmail(
            [
                make_message("reply", sender="Owner <owner@gmail.com>", subject="Re: Booking enquiry"),
                make_message("client"),
            ],
            profile="owner@gmail.com",
        )
        pipeline = EnquiryPipeline.from_settings(config)
        pipeline.fetcher.client_factory = lambda mailbox: gmail

        result = asyncio.run(pipeline.run())

        assert [e.id for e in result.emails] == ["client"]

    def test_default_mailboxes(self):
        config = Settings(
            gmail_personal_refresh_token="p",
            gmail_professional_refresh_token="w",
            personal_web_index=1,
            professional_web_index=3,
        )

        personal, professional = default_mailboxes(config)

        assert personal.label == AccountLabel.PERSONAL
        assert professional.web_url("x") == "https://mail.google.com/mail/u/3/#inbox/x"
