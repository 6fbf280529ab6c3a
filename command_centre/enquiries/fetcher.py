"""
Per-mailbox fetch-and-filter round.
"""

import asyncio
from typing import Any, Callable

from command_centre.config import settings
from command_centre.core.logging import bind_context, clear_context, get_logger
from command_centre.core.models import EnquiryMessage, Mailbox
from command_centre.enquiries.classifier import SpamClassifier
from command_centre.enquiries.parsing import (
    extract_header,
    normalize_subject,
    parse_internal_date,
    parse_sender,
    truncate_snippet,
)
from command_centre.enquiries.rules import build_search_query
from command_centre.services.gmail import GmailClient

log = get_logger(__name__)

ClientFactory = Callable[[Mailbox], GmailClient]


def gmail_client_factory(credentials: dict[str, str]) -> ClientFactory:
    """Factory building a GmailClient per mailbox from shared OAuth client credentials."""

    def build(mailbox: Mailbox) -> GmailClient:
        return GmailClient(
            refresh_token=mailbox.refresh_token,
            client_id=credentials["client_id"],
            client_secret=credentials["client_secret"],
        )

    return build


class MailboxFetcher:
    """Searches one mailbox, fetches metadata in batches and keeps genuine enquiries."""

    def __init__(
        self,
        client_factory: ClientFactory,
        classifier: SpamClassifier | None = None,
        query: str | None = None,
        max_results: int | None = None,
        batch_size: int | None = None,
        snippet_length: int | None = None,
    ):
        self.client_factory = client_factory
        self.classifier = classifier or SpamClassifier()
        self.query = query or build_search_query()
        self.max_results = max_results or settings.enquiry_max_results
        self.batch_size = batch_size or settings.enquiry_batch_size
        self.snippet_length = snippet_length or settings.enquiry_snippet_length

    async def fetch(self, mailbox: Mailbox) -> list[EnquiryMessage]:
        """
        Run one search-and-fetch round for a mailbox.

        Batches run one after another; fetches inside a batch run concurrently.
        Any provider failure empties this mailbox's contribution instead of
        failing the caller.

        Args:
            mailbox: Mailbox with a refresh token

        Returns:
            Enquiries that passed the spam filter, in provider order
        """
        if not mailbox.enabled:
            return []

        bind_context(account=mailbox.label.value)
        try:
            async with self.client_factory(mailbox) as gmail:
                classifier = await self.mailbox_classifier(gmail, mailbox)
                stubs = await gmail.list_messages(self.query, self.max_results)
                stubs = stubs[: self.max_results]

                enquiries: list[EnquiryMessage] = []
                skipped = 0
                for start in range(0, len(stubs), self.batch_size):
                    batch = stubs[start:start + self.batch_size]
                    # Let the whole batch settle before the client closes
                    details = await asyncio.gather(
                        *(gmail.get_message_metadata(stub["id"]) for stub in batch),
                        return_exceptions=True,
                    )
                    for detail in details:
                        if isinstance(detail, BaseException):
                            raise detail
                    for detail in details:
                        enquiry = self.to_enquiry(detail, mailbox, classifier)
                        if enquiry is None:
                            skipped += 1
                        else:
                            enquiries.append(enquiry)

            log.info(
                "mailbox_fetched",
                candidates=len(stubs),
                kept=len(enquiries),
                skipped=skipped,
            )
            return enquiries

        except Exception as e:
            log.error("mailbox_fetch_failed", error=str(e))
            return []

        finally:
            clear_context()

    async def mailbox_classifier(self, gmail: GmailClient, mailbox: Mailbox) -> SpamClassifier:
        """
        Classifier that also treats the mailbox's own address as the owner.

        Uses the configured address when there is one, otherwise asks Gmail
        for the account profile. A failed profile lookup leaves the shared
        rules in place.
        """
        address = mailbox.address
        if not address:
            try:
                profile = await gmail.get_profile()
                address = profile.get("emailAddress") or ""
            except Exception as e:
                log.warning("mailbox_profile_unavailable", error=str(e))
                return self.classifier

        if not address:
            return self.classifier
        rules = self.classifier.rules.with_owners([address])
        if rules is self.classifier.rules:
            return self.classifier
        return SpamClassifier(rules)

    def to_enquiry(
        self,
        detail: dict[str, Any],
        mailbox: Mailbox,
        classifier: SpamClassifier | None = None,
    ) -> EnquiryMessage | None:
        """Turn Gmail message metadata into an EnquiryMessage, or None if it is spam."""
        headers = (detail.get("payload") or {}).get("headers") or []
        sender_name, sender_email = parse_sender(extract_header(headers, "From"))
        subject = extract_header(headers, "Subject")
        snippet = detail.get("snippet") or ""

        classifier = classifier or self.classifier
        reason = classifier.spam_reason(sender_name, sender_email, subject, snippet)
        if reason is not None:
            log.debug(
                "enquiry_filtered",
                account=mailbox.label.value,
                message_id=detail.get("id"),
                reason=reason.value,
            )
            return None

        message_id = detail.get("id") or ""
        return EnquiryMessage(
            id=message_id,
            thread_id=detail.get("threadId") or "",
            sender_name=sender_name,
            sender_email=sender_email,
            subject=normalize_subject(subject),
            snippet=truncate_snippet(snippet, self.snippet_length),
            timestamp=parse_internal_date(detail.get("internalDate")),
            is_unread="UNREAD" in (detail.get("labelIds") or []),
            account=mailbox.label,
            url=mailbox.web_url(message_id),
        )
