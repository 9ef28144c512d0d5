"""Player name normalization."""

# The game client encodes spaces in display names as non-breaking spaces
_NBSP = "\u00a0"


def normalize_name(name: str) -> str:
    """Replace non-breaking spaces in a display name with plain spaces.

    Callers must check for None first.

    Args:
        name: Raw display name from the game client.

    Returns:
        The name with every U+00A0 replaced by U+0020.
    """
    return name.replace(_NBSP, " ")
