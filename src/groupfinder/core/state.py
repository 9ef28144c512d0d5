"""Listing store with Qt signals for reactive UI updates.

The ListingStore is the display sink of the sync core: it keeps the last
listing set and status line and re-emits them as Qt signals. Updates
arrive on the background scheduler thread; Qt queues signal delivery to
receivers living on the main thread.
"""

import logging
from collections.abc import Sequence

from PySide6.QtCore import QObject, Signal

from groupfinder.models.listing import GroupListing

logger = logging.getLogger(__name__)

LOADING_STATUS = "Loading..."


def format_group_count(count: int) -> str:
    """Format a listing count for the status line.

    Args:
        count: Number of listings.

    Returns:
        Text like "0 groups", "1 group" or "5 groups".
    """
    return f"{count} group{'' if count == 1 else 's'}"


class ListingStore(QObject):
    """Latest listings and status, emitting Qt signals on change.

    Example:
        store = ListingStore()
        store.listings_changed.connect(panel.show_listings)
        store.error_occurred.connect(status_label.setText)
        sync = GroupSync(client, store, config, host)
    """

    # Full listing set after every successful refresh
    listings_changed = Signal(object)  # list[GroupListing]

    # User-facing error message
    error_occurred = Signal(str)

    # Status line text (group count or last error)
    status_changed = Signal(str)

    def __init__(self, parent: QObject | None = None) -> None:
        """Initialize the store with no listings."""
        super().__init__(parent)
        self._listings: list[GroupListing] = []
        self._status = LOADING_STATUS
        self._last_error: str | None = None

    @property
    def listings(self) -> list[GroupListing]:
        """Return the listings from the last refresh."""
        return list(self._listings)

    @property
    def status(self) -> str:
        """Return the current status line."""
        return self._status

    @property
    def last_error(self) -> str | None:
        """Return the most recent error message, cleared by the next refresh."""
        return self._last_error

    def get_listing(self, group_id: str) -> GroupListing | None:
        """Get a listing by id.

        Args:
            group_id: The listing id to look up.

        Returns:
            The GroupListing if present, else None.
        """
        for listing in self._listings:
            if listing.id == group_id:
                return listing
        return None

    def listings_for_player(self, player_name: str | None) -> list[GroupListing]:
        """Return the listings posted by a player.

        Args:
            player_name: Normalized player name, or None.

        Returns:
            Matching listings, empty if player_name is None.
        """
        return [listing for listing in self._listings if listing.is_owned_by(player_name)]

    def update_listings(self, listings: Sequence[GroupListing]) -> None:
        """Replace the listing set and emit signals.

        Args:
            listings: Full listing set from the server.
        """
        self._listings = list(listings)
        self._last_error = None
        self._status = format_group_count(len(self._listings))
        logger.debug("Listings updated: %s", self._status)
        self.listings_changed.emit(self.listings)
        self.status_changed.emit(self._status)

    def show_error(self, message: str) -> None:
        """Record an error and emit signals. Listings are kept as they were.

        Args:
            message: User-facing error text.
        """
        self._last_error = message
        self._status = message
        logger.debug("Error shown: %s", message)
        self.error_occurred.emit(message)
        self.status_changed.emit(message)
