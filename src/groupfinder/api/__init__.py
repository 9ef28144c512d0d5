"""API client for the Group Finder backend."""

from groupfinder.api.client import GroupFinderClient
from groupfinder.api.protocol import (
    ListingDecodeError,
    UnknownActivityError,
    decode_listing,
    decode_listing_list,
    listing_from_dict,
    listing_to_dict,
)

__all__ = [
    "GroupFinderClient",
    "ListingDecodeError",
    "UnknownActivityError",
    "decode_listing",
    "decode_listing_list",
    "listing_from_dict",
    "listing_to_dict",
]
