"""
Header parsing and normalization helpers for Gmail metadata.
"""

import re
from email.utils import parseaddr
from typing import Any

# Reply/forward/spam-tag prefixes, possibly repeated ("Re: RE: ***SPAM*** ...")
SUBJECT_PREFIX_RE = re.compile(r"^(Re:\s*|Fwd:\s*|\*\*\*SPAM\*\*\*\s*)+", re.IGNORECASE)
NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def normalize_subject(subject: str | None) -> str:
    """Strip reply/forward/spam-tag prefixes from a subject line."""
    if not subject:
        return ""
    return SUBJECT_PREFIX_RE.sub("", subject.strip()).strip()


def parse_sender(header: str | None) -> tuple[str, str]:
    """
    Split a From header into display name and address.

    'Jane Doe <jane@example.com>' -> ('Jane Doe', 'jane@example.com')
    'jane@example.com'            -> ('jane@example.com', 'jane@example.com')

    The display name falls back to the address when absent.
    """
    if not header:
        return "", ""
    name, address = parseaddr(header)
    address = address.strip().lower()
    if not address:
        return header.strip(), ""
    return (name.strip() or address), address


def extract_header(headers: list[dict[str, Any]] | None, name: str) -> str:
    """Case-insensitive lookup in a Gmail ``payload.headers`` list."""
    wanted = name.lower()
    for header in headers or []:
        if str(header.get("name", "")).lower() == wanted:
            return header.get("value") or ""
    return ""


def truncate_snippet(snippet: str | None, length: int = 200) -> str:
    return (snippet or "")[:length]


def parse_internal_date(value: Any) -> int:
    """Provider internal date (epoch-ms string) as an int, 0 if malformed."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def dedup_key(subject: str, sender_email: str) -> str:
    """Key used to collapse the same enquiry delivered to both mailboxes."""
    return f"{NON_ALNUM_RE.sub('', (subject or '').lower())}-{sender_email or ''}"
