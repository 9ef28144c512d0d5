"""Group management mode."""

from enum import Enum


class ManagementMode(Enum):
    """How the size of the local player's own listing is managed.

    FRIENDS_CHAT ties the listing to the Friends Chat the player is in: a
    chat is required to create a group, and the group size follows the chat
    member count. MANUAL leaves both to the player.
    """

    FRIENDS_CHAT = "friends_chat"
    MANUAL = "manual"
