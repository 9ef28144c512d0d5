"""Activity categories a group can be listed under."""

from enum import Enum


class Activity(Enum):
    """A game activity a group can advertise for.

    The member name is the machine name used on the wire (filter query
    parameter and the ``activity`` field of a listing). The member value is
    the human-readable label shown to players.

    Example:
        >>> Activity.CHAMBERS_OF_XERIC.name
        'CHAMBERS_OF_XERIC'
        >>> str(Activity.CHAMBERS_OF_XERIC)
        'Chambers of Xeric'
    """

    CHAMBERS_OF_XERIC = "Chambers of Xeric"
    THEATRE_OF_BLOOD = "Theatre of Blood"
    TOMBS_OF_AMASCUT = "Tombs of Amascut"
    NEX = "Nex"
    GOD_WARS_DUNGEON = "God Wars Dungeon"
    CORPOREAL_BEAST = "Corporeal Beast"
    NIGHTMARE = "The Nightmare"
    ZALCANO = "Zalcano"
    TEMPOROSS = "Tempoross"
    WINTERTODT = "Wintertodt"
    BARBARIAN_ASSAULT = "Barbarian Assault"
    CASTLE_WARS = "Castle Wars"
    SKILLING = "Skilling"
    QUESTING = "Questing"
    OTHER = "Other"

    @property
    def display_name(self) -> str:
        """Return the label shown to players."""
        return self.value

    @property
    def wire_name(self) -> str:
        """Return the machine name used by the backend."""
        return self.name

    @classmethod
    def from_wire(cls, name: str) -> "Activity":
        """Parse a machine name received from the backend.

        Args:
            name: Machine name, e.g. "CHAMBERS_OF_XERIC".

        Returns:
            The matching Activity.

        Raises:
            ValueError: If the name is not a known activity.
        """
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"Unknown activity: {name!r}") from None

    def __str__(self) -> str:
        return self.value
