"""
Cross-account merge and dedup of enquiry lists.
"""

from itertools import chain
from typing import Iterable

from command_centre.core.models import EnquiryMessage
from command_centre.enquiries.parsing import dedup_key

DEFAULT_LIMIT = 20


def merge_enquiries(
    account_lists: Iterable[list[EnquiryMessage]],
    limit: int = DEFAULT_LIMIT,
) -> list[EnquiryMessage]:
    """
    Combine per-account results into one ranked list.

    Newest first by provider timestamp (stable for ties), first occurrence
    of each subject+sender key wins, truncated to ``limit``.

    Two distinct enquiries from one sender with the same subject collapse
    into one; this is the accepted cost of catching auto-forwarded copies.
    """
    combined = sorted(chain.from_iterable(account_lists), key=lambda e: e.timestamp, reverse=True)

    seen: set[str] = set()
    deduped: list[EnquiryMessage] = []
    for email in combined:
        key = dedup_key(email.subject, email.sender_email)
        if key in seen:
            continue
        seen.add(key)
        deduped.append(email)

    return deduped[:limit]
