"""Friends Chat membership tracking.

The tracker mirrors the player's Friends Chat presence into the shared
SessionState. Host events are delivered as plain method calls and handled
immediately on the calling thread. Follow-up work is handed off: group size
updates go to the background scheduler through the size updater callback,
and the status callback goes to the UI dispatcher.
"""

import logging
from collections.abc import Callable
from typing import Protocol

from groupfinder.core.dispatch import Dispatcher
from groupfinder.core.host import GameState, HostSession
from groupfinder.core.names import normalize_name
from groupfinder.core.session import SessionState
from groupfinder.models.mode import ManagementMode

logger = logging.getLogger(__name__)

SizeUpdater = Callable[[str, int], None]


class ModeSource(Protocol):
    """Anything that can report the configured management mode."""

    def get_management_mode(self) -> ManagementMode: ...


class MembershipTracker:
    """Track Friends Chat presence and keep the owned group's size in step.

    Example:
        tracker = MembershipTracker(host, session, config, sync.update_group_size, dispatcher)
        tracker.set_status_callback(lambda: warning.setVisible(not session.in_friends_chat))
        tracker.on_friends_chat_changed(joined=True)
    """

    def __init__(
        self,
        host: HostSession,
        session: SessionState,
        config: ModeSource,
        update_group_size: SizeUpdater,
        dispatcher: Dispatcher,
    ) -> None:
        """Initialize the tracker.

        Args:
            host: Game session to read chat owner and members from.
            session: Shared session state to update.
            config: Source of the management mode.
            update_group_size: Called as (group_id, size) to push a new size.
            dispatcher: Runs the status callback on the UI thread.
        """
        self._host = host
        self._session = session
        self._config = config
        self._update_group_size = update_group_size
        self._dispatcher = dispatcher
        self._status_callback: Callable[[], None] | None = None

    @property
    def in_friends_chat(self) -> bool:
        """Return True if the player is in a Friends Chat."""
        return self._session.in_friends_chat

    @property
    def friends_chat_name(self) -> str | None:
        """Return the normalized owner name of the current chat."""
        return self._session.current_fc_name

    @property
    def member_count(self) -> int:
        """Return the last observed member count of the current chat."""
        return self._session.current_fc_member_count

    def set_status_callback(self, callback: Callable[[], None] | None) -> None:
        """Register (or clear with None) the callback run after membership changes.

        Args:
            callback: Callable run on the UI thread after every change.
        """
        self._status_callback = callback

    def sync_from_host(self) -> None:
        """Read the current chat presence from the host without notifying anyone."""
        owner = self._host.friends_chat_owner()
        self._session.in_friends_chat = owner is not None
        if owner is not None:
            self._session.current_fc_name = normalize_name(owner)
            self._session.current_fc_member_count = self._host.friends_chat_member_count()
        logger.debug(
            "Initial chat state: in_chat=%s owner=%s members=%d",
            self._session.in_friends_chat,
            self._session.current_fc_name,
            self._session.current_fc_member_count,
        )

    def on_friends_chat_changed(self, joined: bool) -> None:
        """Handle joining or leaving a Friends Chat.

        Args:
            joined: True when the player joined a chat, False when they left.
        """
        if joined:
            self._session.in_friends_chat = True
            owner = self._host.friends_chat_owner()
            if owner is not None:
                self._session.current_fc_name = normalize_name(owner)
                self._session.current_fc_member_count = self._host.friends_chat_member_count()
            logger.debug(
                "Joined chat %s (%d members)",
                self._session.current_fc_name,
                self._session.current_fc_member_count,
            )
        else:
            logger.debug("Left chat %s", self._session.current_fc_name)
            self._session.leave_friends_chat()
        self._notify_status()
        self._auto_update_group_size()

    def on_member_joined(self) -> None:
        """Handle another player joining the current chat."""
        self._refresh_member_count()

    def on_member_left(self) -> None:
        """Handle another player leaving the current chat."""
        self._refresh_member_count()

    def on_game_state_changed(self, state: GameState) -> None:
        """Handle a game client state change.

        Returning to the login screen or hopping worlds drops the chat and
        any group the session believed it owned.

        Args:
            state: The new game state.
        """
        if not state.is_disconnect:
            return
        logger.debug("Session ended (%s), clearing chat state", state.name)
        self._session.leave_friends_chat()
        self._notify_status()

    def _refresh_member_count(self) -> None:
        if self._host.friends_chat_owner() is not None:
            self._session.current_fc_member_count = self._host.friends_chat_member_count()
        self._notify_status()
        self._auto_update_group_size()

    def _notify_status(self) -> None:
        callback = self._status_callback
        if callback is not None:
            self._dispatcher.post(callback)

    def _auto_update_group_size(self) -> None:
        group_id = self._session.active_group_id
        if group_id is None:
            return
        if self._config.get_management_mode() != ManagementMode.FRIENDS_CHAT:
            return
        size = self._session.current_fc_member_count
        logger.debug("Chat size now %d, updating group %s", size, group_id)
        self._update_group_size(group_id, size)
