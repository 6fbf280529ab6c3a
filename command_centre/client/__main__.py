"""
Terminal enquiry watcher.

Usage:
    python -m command_centre.client --url http://localhost:3000
"""

import argparse
import asyncio
import sys

from command_centre.client.api import DashboardAPI
from command_centre.client.dashboard import Dashboard
from command_centre.client.local_store import LocalStore
from command_centre.config import settings
from command_centre.core.logging import configure_logging, get_logger

log = get_logger(__name__)


def terminal_bell() -> None:
    sys.stdout.write("\a")
    sys.stdout.flush()


class TerminalSink:
    """Prints notifications instead of raising desktop popups."""

    permission_granted = True

    def show(self, title: str, body: str, url: str) -> None:
        print(f"{title}: {body}\n  {url}", flush=True)


async def watch(url: str, storage: str) -> None:
    async with DashboardAPI(url) as api:
        dashboard = Dashboard(api, LocalStore(storage), chime=terminal_bell, sink=TerminalSink())
        await dashboard.open()
        try:
            await asyncio.Event().wait()
        finally:
            await dashboard.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Watch for new photography enquiries")
    parser.add_argument("--url", default="http://localhost:3000", help="Command Centre base URL")
    parser.add_argument("--storage", default="~/.command_centre/local.json", help="Local storage file")
    args = parser.parse_args()

    configure_logging(log_level=settings.log_level, json_output=False)
    try:
        asyncio.run(watch(args.url, args.storage))
    except KeyboardInterrupt:
        log.info("watcher_stopped")


if __name__ == "__main__":
    main()
