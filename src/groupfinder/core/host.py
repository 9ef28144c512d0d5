"""Interface to the game client hosting the add-on."""

from enum import Enum, auto
from typing import Protocol


class GameState(Enum):
    """Connection state of the game client."""

    STARTING = auto()
    LOGIN_SCREEN = auto()
    LOGGING_IN = auto()
    LOADING = auto()
    LOGGED_IN = auto()
    CONNECTION_LOST = auto()
    HOPPING = auto()

    @property
    def is_disconnect(self) -> bool:
        """Return True if entering this state ends the current session."""
        return self in (GameState.LOGIN_SCREEN, GameState.HOPPING)


class HostSession(Protocol):
    """Read access to the game session.

    Values are raw: names may contain non-breaking spaces.
    """

    def local_player_name(self) -> str | None:
        """Return the logged-in player's name, or None."""
        ...

    def friends_chat_owner(self) -> str | None:
        """Return the owner name of the joined Friends Chat, or None if not in one."""
        ...

    def friends_chat_member_count(self) -> int:
        """Return the number of members in the joined Friends Chat."""
        ...


class NullHostSession:
    """Host session with no player and no chat, for running outside the game."""

    def local_player_name(self) -> str | None:
        return None

    def friends_chat_owner(self) -> str | None:
        return None

    def friends_chat_member_count(self) -> int:
        return 0
