"""
Client session wiring: state, notifier and the enquiry pollers.
"""

from command_centre.client.api import DashboardAPI
from command_centre.client.local_store import LocalStore
from command_centre.client.notifier import EnquiryNotifier, NotificationSink
from command_centre.client.poller import (
    ENQUIRIES_VIEW_INTERVAL,
    NOTIFIER_INTERVAL,
    OVERVIEW_GLANCE_INTERVAL,
    Poller,
)
from command_centre.client.state import DashboardState
from command_centre.core.logging import get_logger

log = get_logger(__name__)

GLANCE_SIZE = 5


class Dashboard:
    """One open dashboard: state plus three independent enquiry pollers."""

    def __init__(
        self,
        api: DashboardAPI,
        local: LocalStore,
        chime,
        sink: NotificationSink | None = None,
    ):
        self.api = api
        self.state = DashboardState.create(local, api)
        self.notifier = EnquiryNotifier(local, chime=chime, sink=sink)
        self.pollers = [
            Poller("enquiry-notifier", NOTIFIER_INTERVAL, self.poll_notifier),
            Poller("enquiries-view", ENQUIRIES_VIEW_INTERVAL, self.poll_enquiries_view),
            Poller("overview-glance", OVERVIEW_GLANCE_INTERVAL, self.poll_overview_glance),
        ]

    async def poll_notifier(self) -> None:
        emails = await self.api.fetch_enquiries()
        if emails is not None:
            self.notifier.observe(emails)

    async def poll_enquiries_view(self) -> None:
        emails = await self.api.fetch_enquiries()
        if emails is not None:
            self.state.set_enquiries(emails)

    async def poll_overview_glance(self) -> None:
        emails = await self.api.fetch_enquiries()
        if emails is not None:
            self.state.set_glance_enquiries(emails[:GLANCE_SIZE])

    async def open(self) -> None:
        """Mount: prime notifications, reconcile preferences, start polling."""
        self.notifier.prime()
        changed = await self.state.reconcile()
        log.info("dashboard_opened", reconciled=[k for k, v in changed.items() if v])
        for poller in self.pollers:
            poller.start()

    async def close(self) -> None:
        """Teardown: stop every poller."""
        for poller in self.pollers:
            await poller.stop()
        log.info("dashboard_closed")
