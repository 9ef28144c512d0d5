"""Data models for group listings and activities."""

from groupfinder.models.activity import Activity
from groupfinder.models.listing import GroupListing
from groupfinder.models.mode import ManagementMode

__all__ = [
    "Activity",
    "GroupListing",
    "ManagementMode",
]
