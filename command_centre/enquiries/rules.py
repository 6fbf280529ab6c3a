"""
Spam heuristics for the enquiry pipeline.

Keyword and sender lists are plain data so they can be tested and extended
without touching the classifier.
"""

import re
from dataclasses import dataclass, field

from command_centre.config import Settings, settings as default_settings


# Gmail search query: photography-related mail, excluding known noise
SEARCH_TERMS = [
    '(subject:(photography OR photo OR shoot OR booking OR enquiry OR inquiry OR quote '
    'OR hire OR headshot OR portrait OR event OR wedding OR brochure OR "looking for" '
    'OR marketing) OR from:(pixieset OR studio))',
    "-category:promotions",
    "-category:social",
]

EXCLUDED_SENDERS = [
    "noreply", "no-reply", "donotreply", "notifications",
    "linkedin.com", "amazon", "easyjet", "dpd", "nhs.net", "google.com",
    "apple.com", "paypal", "stripe.com", "facebook.com", "instagram.com",
    "twitter.com", "github.com", "vercel.com", "canva.com", "adobe.com",
    "dropbox.com", "taskade.com", "manus.im", "marketing.easyjet",
    "trainline", "kiwi.com", "booking.com", "airbnb", "skyscanner",
    "ryanair", "jet2", "tui.co.uk", "nationalrail", "uber", "deliveroo",
    "justeat", "nhs", "practiceplusgroup", "patient.info",
]

SEARCH_WINDOW = "newer_than:3m"

SPAM_KEYWORDS = [
    # Editing outsourcing
    "clipping path", "clipping mask", "image editing service", "photo editing service",
    "background removal service", "retouching service", "outsource", "bulk editing",
    "real estate editing", "product photo editing", "photo enhancement service",
    "ecommerce photo", "ghost mannequin", "color correction service",
    # Marketing
    "unsubscribe", "newsletter", "webinar", "free trial", "limited offer",
    "seo service", "web design service", "social media management",
    # Account / shipping
    "verification code", "password reset", "security alert",
    "delivery notification", "your order", "your parcel", "tracking number",
    # Travel
    "booking confirmation", "your trip", "e-ticket", "flight confirmation",
    "train ticket", "travel insurance", "boarding pass", "itinerary",
    "your booking is confirmed", "return trip", "departing",
    # Medical
    "hospital", "appointment reminder", "medical", "gp surgery", "practice plus",
    "wellsoon", "peyronie",
]

SPAM_SENDER_PATTERNS = [
    r"clippingpath", r"editingservice", r"outsource", r"offshore",
    r"fiverr", r"upwork", r"freelancer\.com",
    r"@outlook\.in$", r"@yahoo\.in$",
    r"marketing@", r"promo@", r"sales@",
    r"trainline", r"kiwi\.com", r"booking\.com", r"skyscanner",
    r"airbnb", r"ryanair", r"jet2", r"nationalrail",
    r"nhs\.uk", r"nhs\.net", r"practiceplusgroup", r"patient\.info",
]


def build_search_query(
    terms: list[str] | None = None,
    excluded_senders: list[str] | None = None,
    window: str = SEARCH_WINDOW,
) -> str:
    """Assemble the Gmail search query string."""
    parts = list(SEARCH_TERMS if terms is None else terms)
    parts.extend(f"-from:{sender}" for sender in (EXCLUDED_SENDERS if excluded_senders is None else excluded_senders))
    if window:
        parts.append(window)
    return " ".join(parts)


def info_sender_pattern(own_domain: str = "") -> str:
    """Generic ``info@`` senders, except the owner's own domain."""
    if own_domain:
        return rf"info@(?!{re.escape(own_domain.lower())})"
    return r"info@"


@dataclass(frozen=True)
class SpamRules:
    """Configurable rule set consumed by the spam classifier."""

    keywords: tuple[str, ...] = ()
    sender_patterns: tuple[re.Pattern, ...] = ()
    owner_addresses: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def build(
        cls,
        keywords: list[str] | None = None,
        sender_patterns: list[str] | None = None,
        owner_addresses: list[str] | None = None,
        own_domain: str = "",
    ) -> "SpamRules":
        """
        Compile a rule set.

        Args:
            keywords: Subject/snippet phrases (case-insensitive substrings)
            sender_patterns: Regexes matched against sender address and name
            owner_addresses: The owner's own mailbox addresses
            own_domain: Domain exempt from the generic info@ rule
        """
        patterns = list(SPAM_SENDER_PATTERNS if sender_patterns is None else sender_patterns)
        if sender_patterns is None:
            patterns.append(info_sender_pattern(own_domain))

        return cls(
            keywords=tuple(kw.lower() for kw in (SPAM_KEYWORDS if keywords is None else keywords)),
            sender_patterns=tuple(re.compile(p, re.IGNORECASE) for p in patterns),
            owner_addresses=frozenset(
                a.strip().lower() for a in (owner_addresses or []) if a and a.strip()
            ),
        )

    def extend(
        self,
        keywords: list[str] | None = None,
        sender_patterns: list[str] | None = None,
    ) -> "SpamRules":
        """Return a copy with extra keywords and sender patterns appended."""
        return SpamRules(
            keywords=self.keywords + tuple(kw.lower() for kw in (keywords or [])),
            sender_patterns=self.sender_patterns
            + tuple(re.compile(p, re.IGNORECASE) for p in (sender_patterns or [])),
            owner_addresses=self.owner_addresses,
        )

    def with_owners(self, addresses: list[str]) -> "SpamRules":
        """Return a copy that also treats ``addresses`` as the owner's own."""
        extra = {a.strip().lower() for a in addresses if a and a.strip()}
        if extra <= self.owner_addresses:
            return self
        return SpamRules(
            keywords=self.keywords,
            sender_patterns=self.sender_patterns,
            owner_addresses=self.owner_addresses | extra,
        )


def default_rules(config: Settings | None = None) -> SpamRules:
    """Rule set built from the application settings."""
    config = config or default_settings
    return SpamRules.build(
        owner_addresses=config.owner_addresses,
        own_domain=config.own_domain,
    )
