"""
Client-side dashboard logic.

Local-first preferences, the enquiry notifier and pollers, usable from any
Python front end or from the terminal watcher (``python -m command_centre.client``).
"""

from command_centre.client.api import DashboardAPI
from command_centre.client.dashboard import Dashboard
from command_centre.client.local_store import LocalStore
from command_centre.client.notifier import EnquiryNotifier, NotifierState
from command_centre.client.poller import Poller
from command_centre.client.preferences import Preference, build_preferences
from command_centre.client.state import DashboardState

__all__ = [
    "DashboardAPI",
    "Dashboard",
    "LocalStore",
    "EnquiryNotifier",
    "NotifierState",
    "Poller",
    "Preference",
    "build_preferences",
    "DashboardState",
]
