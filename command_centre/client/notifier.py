"""
New-enquiry notifications.

Tracks which unread enquiries have already been announced so that each one
triggers exactly one chime and one system notification across polls.
"""

from enum import Enum
from typing import Callable, Iterable, Protocol

from command_centre.client.local_store import LocalStore
from command_centre.core.logging import get_logger
from command_centre.core.models import EnquiryMessage

log = get_logger(__name__)

SEEN_KEY = "rcc-seen-enquiries"


class NotifierState(str, Enum):
    UNINITIALIZED = "uninitialized"
    PRIMED = "primed"  # Seen set loaded, first fetch not yet observed
    STEADY = "steady"


class NotificationSink(Protocol):
    """System notification surface."""

    permission_granted: bool

    def show(self, title: str, body: str, url: str) -> None: ...


class EnquiryNotifier:
    """Announces unread enquiries that have not been seen before.

    The first fetch after priming only records what is already unread, so
    opening the dashboard never produces a burst of notifications.
    """

    def __init__(
        self,
        local: LocalStore,
        chime: Callable[[], None],
        sink: NotificationSink | None = None,
    ):
        self.local = local
        self.chime = chime
        self.sink = sink
        self.state = NotifierState.UNINITIALIZED
        self._seen: list[str] = []
        self._seen_set: set[str] = set()

    @property
    def seen(self) -> frozenset[str]:
        return frozenset(self._seen_set)

    def prime(self) -> None:
        """Load the seen-id set from local storage."""
        stored = self.local.get_json(SEEN_KEY)
        ids = [str(i) for i in stored] if isinstance(stored, list) else []
        self._seen = list(dict.fromkeys(ids))
        self._seen_set = set(self._seen)
        self.state = NotifierState.PRIMED
        log.debug("notifier_primed", seen=len(self._seen))

    def _remember(self, ids: Iterable[str]) -> None:
        for message_id in ids:
            if message_id not in self._seen_set:
                self._seen_set.add(message_id)
                self._seen.append(message_id)
        self.local.set_json(SEEN_KEY, self._seen)

    def observe(self, emails: list[EnquiryMessage]) -> list[EnquiryMessage]:
        """
        Process one successful fetch.

        Args:
            emails: Enquiries returned by the poll

        Returns:
            The enquiries that were announced (empty on the priming fetch)
        """
        if self.state == NotifierState.UNINITIALIZED:
            self.prime()

        unread = [e for e in emails if e.is_unread]

        if self.state == NotifierState.PRIMED:
            self._remember(e.id for e in unread)
            self.state = NotifierState.STEADY
            return []

        new: list[EnquiryMessage] = []
        new_ids: set[str] = set()
        for email in unread:
            if email.id in self._seen_set or email.id in new_ids:
                continue
            new_ids.add(email.id)
            new.append(email)

        if not new:
            return []

        self._remember(e.id for e in new)
        self._announce(new)
        return new

    def _announce(self, emails: list[EnquiryMessage]) -> None:
        log.info("new_enquiries", count=len(emails))
        try:
            self.chime()
        except Exception as e:
            log.warning("chime_failed", error=str(e))

        if self.sink is None or not self.sink.permission_granted:
            return

        for email in emails:
            try:
                self.sink.show(
                    title=f"New enquiry from {email.sender_name or email.sender_email}",
                    body=email.subject or "(no subject)",
                    url=email.url,
                )
            except Exception as e:
                log.warning("notification_failed", message_id=email.id, error=str(e))
