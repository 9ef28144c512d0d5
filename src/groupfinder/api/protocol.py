"""JSON wire format for group listings.

The backend speaks camelCase JSON. Optional fields that are unset are left
out of serialized listings, and missing fields in received listings fall
back to the model defaults.
"""

import json
import logging
from typing import Any

from groupfinder.models.activity import Activity
from groupfinder.models.listing import GroupListing

logger = logging.getLogger(__name__)

# How much of a bad payload to keep in the error message
_SNIPPET_LENGTH = 120

_OPTIONAL_STRINGS = {
    "id": "id",
    "playerName": "player_name",
    "friendsChatName": "friends_chat_name",
    "description": "description",
}


class ListingDecodeError(ValueError):
    """Raised when a response body is not a valid listing payload."""


class UnknownActivityError(ListingDecodeError):
    """Raised when a listing names an activity this client does not know."""


def _snippet(raw: bytes | str) -> str:
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
    text = text.strip()
    if len(text) > _SNIPPET_LENGTH:
        return text[:_SNIPPET_LENGTH] + "..."
    return text


def listing_to_dict(listing: GroupListing) -> dict[str, Any]:
    """Convert a listing to its JSON-serializable wire form.

    Args:
        listing: Listing to serialize.

    Returns:
        Dict with camelCase keys; unset optional fields are omitted.
    """
    data: dict[str, Any] = {
        "activity": listing.activity.wire_name,
        "currentSize": listing.current_size,
        "maxSize": listing.max_size,
    }
    for wire_key, attr in _OPTIONAL_STRINGS.items():
        value = getattr(listing, attr)
        if value is not None:
            data[wire_key] = value
    return data


def _int_field(data: dict[str, Any], key: str, default: int) -> int:
    value = data.get(key)
    if value is None:
        return default
    # JSON numbers may arrive as floats (e.g. 3.0); bools are not sizes
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ListingDecodeError(f"Field {key!r} must be a number, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ListingDecodeError(f"Field {key!r} must be a whole number, got {value!r}")
    return int(value)


def listing_from_dict(data: Any) -> GroupListing:
    """Build a listing from a decoded JSON object.

    Args:
        data: Decoded JSON value for a single listing.

    Returns:
        The parsed GroupListing.

    Raises:
        ListingDecodeError: If the object is not a valid listing.
    """
    if not isinstance(data, dict):
        raise ListingDecodeError(f"Expected a listing object, got {type(data).__name__}")

    activity_name = data.get("activity")
    if not isinstance(activity_name, str):
        raise ListingDecodeError(f"Listing has no valid activity: {activity_name!r}")
    try:
        activity = Activity.from_wire(activity_name)
    except ValueError as e:
        raise UnknownActivityError(str(e)) from e

    strings: dict[str, str | None] = {}
    for wire_key, attr in _OPTIONAL_STRINGS.items():
        value = data.get(wire_key)
        if value is not None and not isinstance(value, str):
            raise ListingDecodeError(f"Field {wire_key!r} must be a string, got {value!r}")
        strings[attr] = value

    current_size = _int_field(data, "currentSize", 1)
    max_size = _int_field(data, "maxSize", current_size)

    # Server listings skip the draft size checks
    return GroupListing.from_server(
        activity=activity,
        current_size=current_size,
        max_size=max_size,
        **strings,
    )


def _loads(raw: bytes | str) -> Any:
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ListingDecodeError(f"Malformed JSON: {_snippet(raw)!r}") from e


def decode_listing(raw: bytes | str) -> GroupListing:
    """Decode a response body holding a single listing.

    Raises:
        ListingDecodeError: If the body is not a valid listing object.
    """
    return listing_from_dict(_loads(raw))


def decode_listing_list(raw: bytes | str) -> list[GroupListing]:
    """Decode a response body holding an array of listings.

    Raises:
        ListingDecodeError: If the body is not a JSON array of listings.
    """
    data = _loads(raw)
    if not isinstance(data, list):
        raise ListingDecodeError(f"Expected a JSON array, got {_snippet(raw)!r}")
    listings = []
    for item in data:
        try:
            listings.append(listing_from_dict(item))
        except UnknownActivityError as e:
            # Newer backends may know activities this client does not
            logger.warning("Skipping listing: %s", e)
    return listings


def encode_json(payload: Any) -> bytes:
    """Serialize a request payload to UTF-8 JSON bytes."""
    return json.dumps(payload, ensure_ascii=False).encode("utf-8")
