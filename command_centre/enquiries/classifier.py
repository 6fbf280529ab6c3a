"""
Rule-based spam/ham classifier for enquiry candidates.
"""

from enum import Enum

from command_centre.enquiries.rules import SpamRules, default_rules


class SpamReason(str, Enum):
    """Which rule excluded a message."""

    KEYWORD = "keyword"
    SENDER = "sender"
    OWNER = "owner"


class SpamClassifier:
    """Decides whether a message is a genuine business enquiry.

    Rules are checked in order and the first match wins. There is no
    scoring: a message is either excluded or it is not.
    """

    def __init__(self, rules: SpamRules | None = None):
        self.rules = rules or default_rules()

    def spam_reason(
        self,
        sender_name: str | None = "",
        sender_email: str | None = "",
        subject: str | None = "",
        snippet: str | None = "",
    ) -> SpamReason | None:
        """
        Classify a message from its headers and snippet.

        Args:
            sender_name: Display name from the From header
            sender_email: Address from the From header
            subject: Raw subject line
            snippet: Provider-generated body preview

        Returns:
            The rule that excluded the message, or None for a genuine enquiry
        """
        sender_name = sender_name or ""
        sender_email = sender_email or ""

        combined = f"{subject or ''} {snippet or ''}".lower()
        if any(kw in combined for kw in self.rules.keywords):
            return SpamReason.KEYWORD

        for pattern in self.rules.sender_patterns:
            if pattern.search(sender_email) or pattern.search(sender_name):
                return SpamReason.SENDER

        if sender_email.strip().lower() in self.rules.owner_addresses:
            return SpamReason.OWNER

        return None

    def is_spam(
        self,
        sender_name: str | None = "",
        sender_email: str | None = "",
        subject: str | None = "",
        snippet: str | None = "",
    ) -> bool:
        """True when any rule excludes the message."""
        return self.spam_reason(sender_name, sender_email, subject, snippet) is not None
