"""
Enquiry pipeline: two mailboxes fetched concurrently, merged and deduplicated.
"""

import asyncio

from command_centre.config import Settings, settings as default_settings
from command_centre.core.logging import get_logger
from command_centre.core.models import AccountLabel, EnquiryResult, Mailbox
from command_centre.enquiries.classifier import SpamClassifier
from command_centre.enquiries.fetcher import MailboxFetcher, gmail_client_factory
from command_centre.enquiries.merge import merge_enquiries
from command_centre.enquiries.rules import default_rules

log = get_logger(__name__)


def default_mailboxes(config: Settings | None = None) -> list[Mailbox]:
    """The owner's personal and professional mailboxes from settings."""
    config = config or default_settings
    return [
        Mailbox(
            label=AccountLabel.PERSONAL,
            refresh_token=config.gmail_personal_refresh_token,
            address=config.personal_address,
            web_index=config.personal_web_index,
        ),
        Mailbox(
            label=AccountLabel.PROFESSIONAL,
            refresh_token=config.gmail_professional_refresh_token,
            address=config.professional_address,
            web_index=config.professional_web_index,
        ),
    ]


class EnquiryPipeline:
    """Builds the enquiry list served by ``GET /api/enquiries``."""

    def __init__(
        self,
        mailboxes: list[Mailbox],
        fetcher: MailboxFetcher | None,
        limit: int = 20,
    ):
        self.mailboxes = mailboxes
        self.fetcher = fetcher
        self.limit = limit

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "EnquiryPipeline":
        """Wire a pipeline from application settings.

        Without OAuth client credentials the pipeline has no fetcher and
        reports itself as not configured.
        """
        config = config or default_settings
        credentials = config.gmail_client_credentials
        fetcher = None
        if credentials:
            if not config.owner_addresses:
                # Each mailbox falls back to its Gmail profile address
                log.warning("owner_addresses_not_configured")
            fetcher = MailboxFetcher(
                client_factory=gmail_client_factory(credentials),
                classifier=SpamClassifier(default_rules(config)),
                max_results=config.enquiry_max_results,
                batch_size=config.enquiry_batch_size,
                snippet_length=config.enquiry_snippet_length,
            )
        return cls(default_mailboxes(config), fetcher, limit=config.enquiry_output_limit)

    @property
    def connected_accounts(self) -> dict[str, bool]:
        """Whether each mailbox has credentials (not whether its fetch succeeded)."""
        configured = self.fetcher is not None
        return {m.label.value: configured and m.enabled for m in self.mailboxes}

    async def run(self) -> EnquiryResult:
        """
        Fetch, filter, merge and rank enquiries.

        Never raises: per-mailbox failures degrade to empty contributions,
        anything else degrades to an empty, non-live result.
        """
        if self.fetcher is None:
            log.info("enquiries_skipped", reason="Gmail OAuth not configured")
            return EnquiryResult(
                live=False,
                accounts=self.connected_accounts,
                message="Gmail OAuth not configured",
            )

        try:
            enabled = [m for m in self.mailboxes if m.enabled]
            results = await asyncio.gather(*(self.fetcher.fetch(m) for m in enabled))
            emails = merge_enquiries(results, limit=self.limit)

            log.info(
                "enquiries_merged",
                per_account={m.label.value: len(r) for m, r in zip(enabled, results)},
                returned=len(emails),
            )
            return EnquiryResult(emails=emails, live=True, accounts=self.connected_accounts)

        except Exception as e:
            log.error("enquiries_pipeline_error", error=str(e))
            return EnquiryResult(
                live=False,
                accounts=self.connected_accounts,
                error="Failed to fetch emails",
            )
