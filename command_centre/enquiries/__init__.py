"""
Enquiry pipeline.

Pulls candidate messages from the owner's Gmail mailboxes, drops noise with a
rule-based classifier, and merges both accounts into one ranked list.
"""

from command_centre.enquiries.classifier import SpamClassifier, SpamReason
from command_centre.enquiries.fetcher import MailboxFetcher
from command_centre.enquiries.merge import merge_enquiries
from command_centre.enquiries.pipeline import EnquiryPipeline, default_mailboxes
from command_centre.enquiries.rules import SpamRules, build_search_query, default_rules

__all__ = [
    "SpamClassifier",
    "SpamReason",
    "MailboxFetcher",
    "merge_enquiries",
    "EnquiryPipeline",
    "default_mailboxes",
    "SpamRules",
    "build_search_query",
    "default_rules",
]
