"""Group listing model."""

from dataclasses import dataclass
from typing import Any

from groupfinder.models.activity import Activity

# Descriptions longer than this are cut when shown in a listing summary
DESCRIPTION_DISPLAY_LIMIT = 40


@dataclass(slots=True)
class GroupListing:
    """One advertised group.

    Listings created locally are drafts without an ``id``. The backend
    returns a canonical copy with ``id`` populated; later mutations refer to
    the listing by that id, which cannot change once assigned.

    Attributes:
        activity: Activity the group is formed for.
        current_size: Number of players already in the group (at least 1 for
            drafts; server listings are taken as reported).
        max_size: Group capacity (never below current_size for drafts).
        player_name: Normalized display name of the advertiser.
        friends_chat_name: Normalized owner name of the linked Friends Chat.
        description: Free-form text written by the advertiser.
        id: Server-assigned identifier.
    """

    activity: Activity
    current_size: int = 1
    max_size: int = 1
    player_name: str | None = None
    friends_chat_name: str | None = None
    description: str | None = None
    id: str | None = None

    def __post_init__(self) -> None:
        if self.current_size < 1:
            raise ValueError(f"current_size must be at least 1, got {self.current_size}")
        if self.current_size > self.max_size:
            raise ValueError(
                f"current_size ({self.current_size}) exceeds max_size ({self.max_size})"
            )

    @classmethod
    def from_server(
        cls,
        activity: Activity,
        current_size: int,
        max_size: int,
        player_name: str | None = None,
        friends_chat_name: str | None = None,
        description: str | None = None,
        id: str | None = None,
    ) -> "GroupListing":
        """Build a listing exactly as the backend reported it.

        Size checks are skipped: a group resized to its Friends Chat member
        count may hold more players than it advertised, or none at all.
        """
        listing = cls.__new__(cls)
        object.__setattr__(listing, "activity", activity)
        object.__setattr__(listing, "current_size", current_size)
        object.__setattr__(listing, "max_size", max_size)
        object.__setattr__(listing, "player_name", player_name)
        object.__setattr__(listing, "friends_chat_name", friends_chat_name)
        object.__setattr__(listing, "description", description)
        object.__setattr__(listing, "id", id)
        return listing

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "id":
            current = getattr(self, "id", None)
            if current is not None and value != current:
                raise ValueError(f"Listing id is immutable (already {current!r})")
        object.__setattr__(self, name, value)

    @property
    def is_full(self) -> bool:
        """Return True if the group has no free slots."""
        return self.current_size >= self.max_size

    @property
    def display_description(self) -> str:
        """Return the description cut to fit a one-line summary."""
        desc = self.description or ""
        if len(desc) > DESCRIPTION_DISPLAY_LIMIT:
            return desc[: DESCRIPTION_DISPLAY_LIMIT - 3] + "..."
        return desc

    def is_owned_by(self, player_name: str | None) -> bool:
        """Return True if this listing was posted by the given player."""
        return player_name is not None and player_name == self.player_name
