"""Configuration manager using QSettings for persistent storage."""

import logging

from PySide6.QtCore import QSettings

from groupfinder.models.mode import ManagementMode

logger = logging.getLogger(__name__)

# Settings keys
KEY_SERVER_URL = "server/url"
KEY_POLL_INTERVAL = "polling/interval"
KEY_MANAGEMENT_MODE = "groups/management_mode"

DEFAULT_SERVER_URL = "http://localhost:8080"
DEFAULT_POLL_INTERVAL = 10
DEFAULT_MANAGEMENT_MODE = ManagementMode.FRIENDS_CHAT

_MIN_POLL_INTERVAL = 5
_MAX_POLL_INTERVAL = 300


class ConfigManager:
    """Wrapper around QSettings for type-safe config access.

    QSettings stores config in platform-specific locations:
    - Windows: HKEY_CURRENT_USER\\Software\\GroupFinder\\GroupFinder
    - macOS: ~/Library/Preferences/com.GroupFinder.GroupFinder.plist
    - Linux: ~/.config/GroupFinder/GroupFinder.conf

    Example:
        config = ConfigManager()
        config.set_management_mode(ManagementMode.MANUAL)
        client = GroupFinderClient(config)
    """

    def __init__(
        self, organization: str = "GroupFinder", application: str = "GroupFinder"
    ) -> None:
        """Initialize the config manager.

        Args:
            organization: Organization name for QSettings.
            application: Application name for QSettings.
        """
        self._settings = QSettings(organization, application)

    @property
    def settings(self) -> QSettings:
        """Return the underlying QSettings instance."""
        return self._settings

    # -- Server ----------------------------------------------------------------

    def get_server_url(self) -> str:
        """Return the backend base URL.

        Returns:
            URL without trailing slash (default http://localhost:8080).
        """
        value = self._settings.value(KEY_SERVER_URL, DEFAULT_SERVER_URL, str)
        url = str(value).strip().rstrip("/") if value else ""
        return url or DEFAULT_SERVER_URL

    def set_server_url(self, url: str) -> None:
        """Set the backend base URL.

        Args:
            url: Base URL, e.g. "https://groups.example.com".
        """
        self._settings.setValue(KEY_SERVER_URL, url.strip().rstrip("/"))

    # -- Polling ---------------------------------------------------------------

    def get_poll_interval(self) -> int:
        """Return the listings poll interval in seconds.

        Returns:
            Interval in seconds (default 10).
        """
        value = self._settings.value(KEY_POLL_INTERVAL, DEFAULT_POLL_INTERVAL, int)
        return max(_MIN_POLL_INTERVAL, min(_MAX_POLL_INTERVAL, int(value)))  # type: ignore[arg-type]

    def set_poll_interval(self, seconds: int) -> None:
        """Set the listings poll interval.

        Args:
            seconds: Interval in seconds (5-300).
        """
        self._settings.setValue(
            KEY_POLL_INTERVAL, max(_MIN_POLL_INTERVAL, min(_MAX_POLL_INTERVAL, seconds))
        )

    # -- Group management ------------------------------------------------------

    def get_management_mode(self) -> ManagementMode:
        """Return how the player's own group is managed.

        Returns:
            The configured mode (default FRIENDS_CHAT).
        """
        value = self._settings.value(KEY_MANAGEMENT_MODE, DEFAULT_MANAGEMENT_MODE.value, str)
        try:
            return ManagementMode(str(value))
        except ValueError:
            logger.warning("Unknown management mode %r, using default", value)
            return DEFAULT_MANAGEMENT_MODE

    def set_management_mode(self, mode: ManagementMode) -> None:
        """Set how the player's own group is managed.

        Args:
            mode: FRIENDS_CHAT or MANUAL.
        """
        self._settings.setValue(KEY_MANAGEMENT_MODE, mode.value)

    # -- General settings ------------------------------------------------------

    def clear(self) -> None:
        """Clear all settings (useful for testing or reset)."""
        self._settings.clear()

    def sync(self) -> None:
        """Force settings to be written to disk."""
        self._settings.sync()
