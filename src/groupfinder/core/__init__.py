"""Core business logic layer.

This module contains the synchronization core that bridges the blocking
API client, the game session and the Qt UI layer.

Classes:
    GroupSync: Poll loop and create/delete/update operations.
    MembershipTracker: Friends Chat presence and group size auto-update.
    ListingStore: Display sink with Qt signals.
    TaskScheduler: Single-threaded background scheduler.
    UiDispatcher: Posts callables to the Qt main thread.
    ConfigManager: QSettings wrapper for configuration.
"""

from groupfinder.core.config import ConfigManager
from groupfinder.core.dispatch import UiDispatcher
from groupfinder.core.host import GameState, HostSession, NullHostSession
from groupfinder.core.membership import MembershipTracker
from groupfinder.core.names import normalize_name
from groupfinder.core.scheduler import TaskScheduler
from groupfinder.core.session import SessionState
from groupfinder.core.state import ListingStore
from groupfinder.core.sync import GroupSync, ListingsView

__all__ = [
    "ConfigManager",
    "GameState",
    "GroupSync",
    "HostSession",
    "ListingStore",
    "ListingsView",
    "MembershipTracker",
    "NullHostSession",
    "SessionState",
    "TaskScheduler",
    "UiDispatcher",
    "normalize_name",
]
