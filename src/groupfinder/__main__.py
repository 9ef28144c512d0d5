"""Console entry point: watch Group Finder listings from outside the game."""

import argparse
import logging
import signal
import sys

from PySide6.QtCore import QCoreApplication, QTimer

from groupfinder.api.client import GroupFinderClient
from groupfinder.core.config import ConfigManager
from groupfinder.core.host import NullHostSession
from groupfinder.core.state import ListingStore
from groupfinder.core.sync import GroupSync
from groupfinder.models.activity import Activity
from groupfinder.models.listing import GroupListing

logger = logging.getLogger(__name__)


def _parse_activity(value: str) -> Activity:
    try:
        return Activity.from_wire(value.upper())
    except ValueError:
        choices = ", ".join(a.name for a in Activity)
        raise argparse.ArgumentTypeError(
            f"unknown activity {value!r} (choose from {choices})"
        ) from None


def format_listing(listing: GroupListing) -> str:
    """Format a listing as one log line.

    Args:
        listing: Listing to format.

    Returns:
        Text like "Nex - Alice (2/4) Learner friendly".
    """
    line = f"{listing.activity} - {listing.player_name} ({listing.current_size}/{listing.max_size})"
    if listing.display_description:
        line += f" {listing.display_description}"
    return line


def main(argv: list[str] | None = None) -> int:
    """Run the listing watcher.

    Returns:
        Exit code (0 for success).
    """
    parser = argparse.ArgumentParser(
        prog="groupfinder",
        description="Group Finder - watch group listings",
    )
    parser.add_argument("--server", default=None, help="backend base URL")
    parser.add_argument(
        "--interval", type=int, default=None, help="poll interval in seconds",
    )
    parser.add_argument(
        "--activity", type=_parse_activity, default=None, help="only show this activity",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    parsed = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    QCoreApplication.setApplicationName("GroupFinder")
    QCoreApplication.setOrganizationName("GroupFinder")
    app = QCoreApplication(sys.argv[:1])

    config = ConfigManager()
    if parsed.server:
        config.set_server_url(parsed.server)
    if parsed.interval is not None:
        config.set_poll_interval(parsed.interval)

    store = ListingStore()

    def on_listings(listings: list[GroupListing]) -> None:
        logger.info("%d listing(s)", len(listings))
        for listing in listings:
            logger.info("  %s", format_listing(listing))

    store.listings_changed.connect(on_listings)
    store.error_occurred.connect(lambda message: logger.error("%s", message))

    sync = GroupSync(GroupFinderClient(config), store, config, NullHostSession())
    sync.session.current_filter = parsed.activity
    logger.info("Watching %s", config.get_server_url())
    sync.start_polling()

    # Let Ctrl+C through: Python only sees signals while the interpreter runs
    signal.signal(signal.SIGINT, lambda *_: app.quit())
    heartbeat = QTimer()
    heartbeat.timeout.connect(lambda: None)
    heartbeat.start(200)

    try:
        return app.exec()
    finally:
        sync.shutdown()


if __name__ == "__main__":
    sys.exit(main())
