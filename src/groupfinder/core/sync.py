"""Group Finder synchronization core.

GroupSync owns the listing poll loop and the create/delete/update
operations. Every network call runs on a single background scheduler, so
polls and mutations execute one at a time in submission order. After a
successful mutation the listings are refreshed exactly once; a failed
mutation shows exactly one error and does not refresh.
"""

import logging
from collections.abc import Sequence
from typing import Protocol

from groupfinder.api.client import GroupFinderClient
from groupfinder.core.config import KEY_MANAGEMENT_MODE, KEY_POLL_INTERVAL, KEY_SERVER_URL
from groupfinder.core.dispatch import Dispatcher, UiDispatcher
from groupfinder.core.host import HostSession
from groupfinder.core.membership import MembershipTracker
from groupfinder.core.names import normalize_name
from groupfinder.core.scheduler import Cancellable, Executor, TaskScheduler
from groupfinder.core.session import SessionState
from groupfinder.models.activity import Activity
from groupfinder.models.listing import GroupListing
from groupfinder.models.mode import ManagementMode

logger = logging.getLogger(__name__)

ERROR_CONNECTION = "Could not connect to server"
ERROR_NOT_LOGGED_IN = "You must be logged in to create a group"
ERROR_NO_FRIENDS_CHAT = "Join a Friends Chat before creating a group"
ERROR_CREATE_FAILED = "Failed to create group"
ERROR_DELETE_FAILED = "Failed to delete group"
ERROR_UPDATE_FAILED = "Failed to update group"


class ListingsView(Protocol):
    """Display sink for listings and errors. Both methods may be called from any thread."""

    def update_listings(self, listings: Sequence[GroupListing]) -> None: ...

    def show_error(self, message: str) -> None: ...


class SyncConfig(Protocol):
    """Settings the sync core reads."""

    def get_poll_interval(self) -> int: ...

    def get_management_mode(self) -> ManagementMode: ...


class GroupSync:
    """Keeps the listing view in sync with the backend.

    Example:
        sync = GroupSync(GroupFinderClient(config), store, config, host)
        sync.start_polling()
        sync.set_filter(Activity.THEATRE_OF_BLOOD)
        sync.create_group(GroupListing(Activity.THEATRE_OF_BLOOD, 1, 5))
        ...
        sync.shutdown()
    """

    def __init__(
        self,
        client: GroupFinderClient,
        view: ListingsView,
        config: SyncConfig,
        host: HostSession,
        scheduler: Executor | None = None,
        dispatcher: Dispatcher | None = None,
    ) -> None:
        """Initialize the sync core.

        Args:
            client: Backend API client.
            view: Display sink for listings and errors.
            config: Source of poll interval and management mode.
            host: Game session (player identity and Friends Chat).
            scheduler: Background executor (a new TaskScheduler if None).
            dispatcher: UI-thread dispatcher for status callbacks
                (a new UiDispatcher if None).
        """
        self._client = client
        self._view = view
        self._config = config
        self._host = host
        self._scheduler: Executor = scheduler if scheduler is not None else TaskScheduler()
        self._session = SessionState()
        self._poll_task: Cancellable | None = None
        self._membership = MembershipTracker(
            host,
            self._session,
            config,
            self.update_group_size,
            dispatcher if dispatcher is not None else UiDispatcher(),
        )

    @property
    def session(self) -> SessionState:
        """Return the shared session state."""
        return self._session

    @property
    def membership(self) -> MembershipTracker:
        """Return the Friends Chat membership tracker."""
        return self._membership

    @property
    def current_filter(self) -> Activity | None:
        """Return the activity filter used for fetching."""
        return self._session.current_filter

    @property
    def active_group_id(self) -> str | None:
        """Return the id of the listing this session owns, if any."""
        return self._session.active_group_id

    @property
    def is_polling(self) -> bool:
        """Return True if a poll schedule is installed."""
        return self._poll_task is not None

    # -- Polling ---------------------------------------------------------------

    def poll_once(self) -> None:
        """Fetch listings and push them to the view.

        Runs on the calling thread; normally called from the scheduler.
        """
        try:
            listings = self._client.get_groups(self._session.current_filter)
        except Exception:
            logger.warning("Error polling groups", exc_info=True)
            self._view.show_error(ERROR_CONNECTION)
            return
        self._view.update_listings(listings)

    def start_polling(self, interval_seconds: float | None = None) -> None:
        """Poll now and then repeatedly, replacing any existing schedule.

        Args:
            interval_seconds: Delay between polls (configured interval if None).
        """
        interval = interval_seconds
        if interval is None:
            interval = self._config.get_poll_interval()
        self.stop_polling()
        logger.debug("Polling every %ss", interval)
        self._poll_task = self._scheduler.schedule_with_fixed_delay(self.poll_once, 0, interval)

    def stop_polling(self) -> None:
        """Cancel pending and future polls. A poll in progress finishes."""
        if self._poll_task is not None:
            self._poll_task.cancel()
            self._poll_task = None

    def refresh_listings(self) -> None:
        """Queue a single poll on the background scheduler."""
        self._scheduler.execute(self.poll_once)

    def set_filter(self, activity: Activity | None) -> None:
        """Change the activity filter and refresh.

        Args:
            activity: Activity to show, or None for all.
        """
        self._session.current_filter = activity
        self.refresh_listings()

    # -- Mutations -------------------------------------------------------------

    def get_local_player_name(self) -> str | None:
        """Return the normalized name of the logged-in player, or None."""
        name = self._host.local_player_name()
        if name is None:
            return None
        return normalize_name(name)

    def create_group(self, listing: GroupListing) -> None:
        """Validate a draft listing and post it in the background.

        The player name is taken from the game session when known. In
        FRIENDS_CHAT mode the player must be in a Friends Chat, whose owner
        name is attached to the listing.

        Args:
            listing: Draft listing (modified in place).
        """
        player_name = self.get_local_player_name()
        if player_name is not None:
            listing.player_name = player_name

        if not listing.player_name:
            self._view.show_error(ERROR_NOT_LOGGED_IN)
            return

        if self._config.get_management_mode() == ManagementMode.FRIENDS_CHAT:
            fc_name = self._session.current_fc_name
            if fc_name is None:
                self._view.show_error(ERROR_NO_FRIENDS_CHAT)
                return
            listing.friends_chat_name = normalize_name(fc_name)

        self._scheduler.execute(lambda: self._create_group(listing))

    def _create_group(self, listing: GroupListing) -> None:
        created = self._client.create_group(listing)
        if created is None:
            self._view.show_error(ERROR_CREATE_FAILED)
            return
        self._session.active_group_id = created.id
        logger.info("Created group %s (%s)", created.id, created.activity)
        self.poll_once()

    def delete_group(self, group_id: str) -> None:
        """Delete a listing in the background.

        Args:
            group_id: Server id of the listing.
        """
        self._scheduler.execute(lambda: self._delete_group(group_id))

    def _delete_group(self, group_id: str) -> None:
        if not self._client.delete_group(group_id):
            self._view.show_error(ERROR_DELETE_FAILED)
            return
        if group_id == self._session.active_group_id:
            self._session.active_group_id = None
        logger.info("Deleted group %s", group_id)
        self.poll_once()

    def update_group_size(self, group_id: str, new_size: int) -> None:
        """Change a listing's current size in the background.

        Args:
            group_id: Server id of the listing.
            new_size: New current size.
        """
        self._scheduler.execute(lambda: self._update_group_size(group_id, new_size))

    def _update_group_size(self, group_id: str, new_size: int) -> None:
        if self._client.update_group(group_id, {"currentSize": new_size}) is None:
            self._view.show_error(ERROR_UPDATE_FAILED)
            return
        logger.debug("Group %s size set to %d", group_id, new_size)
        self.poll_once()

    # -- Lifecycle -------------------------------------------------------------

    def on_config_changed(self, key: str) -> None:
        """React to a changed setting.

        Args:
            key: Settings key that changed.
        """
        if key in (KEY_MANAGEMENT_MODE, KEY_SERVER_URL):
            self.refresh_listings()
        elif key == KEY_POLL_INTERVAL and self.is_polling:
            self.start_polling()

    def shutdown(self) -> None:
        """Stop polling and the background scheduler."""
        self.stop_polling()
        self._scheduler.shutdown()
