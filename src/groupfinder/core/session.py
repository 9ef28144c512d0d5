"""Per-session state shared by the sync core and the membership tracker."""

from dataclasses import dataclass

from groupfinder.models.activity import Activity


@dataclass(slots=True)
class SessionState:
    """Mutable state of the current game session.

    Fields are updated independently from the background scheduler and from
    host event handlers. Readers on the UI thread must tolerate seeing a mix
    of old and new values.

    Attributes:
        current_filter: Activity filter applied to the last fetch.
        in_friends_chat: Whether the player is in a Friends Chat.
        current_fc_name: Normalized owner name of the current Friends Chat.
        current_fc_member_count: Last observed member count of that chat.
        active_group_id: Id of the listing this session owns, if any.
    """

    current_filter: Activity | None = None
    in_friends_chat: bool = False
    current_fc_name: str | None = None
    current_fc_member_count: int = 0
    active_group_id: str | None = None

    def leave_friends_chat(self) -> None:
        """Forget the current chat and the group that was tied to it."""
        self.in_friends_chat = False
        self.current_fc_name = None
        self.current_fc_member_count = 0
        self.active_group_id = None
