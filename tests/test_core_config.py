"""Tests for ConfigManager using QSettings."""

import pytest

from groupfinder.core.config import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_SERVER_URL,
    KEY_MANAGEMENT_MODE,
    ConfigManager,
)
from groupfinder.models.mode import ManagementMode


@pytest.fixture
def config() -> ConfigManager:
    """Return a fresh ConfigManager for each test."""
    # Use unique organization/app to avoid test interference
    config = ConfigManager("GroupFinderTest", "TestConfig")
    config.clear()
    return config


class TestServerUrl:
    """Test server URL settings."""

    def test_default(self, config: ConfigManager) -> None:
        """Test the default backend URL."""
        assert config.get_server_url() == DEFAULT_SERVER_URL

    def test_set_and_get(self, config: ConfigManager) -> None:
        """Test saving a custom URL."""
        config.set_server_url("https://groups.example.com")
        assert config.get_server_url() == "https://groups.example.com"

    def test_trailing_slash_stripped(self, config: ConfigManager) -> None:
        """Test trailing slashes and whitespace are removed."""
        config.set_server_url("  https://groups.example.com/  ")
        assert config.get_server_url() == "https://groups.example.com"

    def test_blank_falls_back_to_default(self, config: ConfigManager) -> None:
        """Test an empty URL reverts to the default."""
        config.set_server_url("")
        assert config.get_server_url() == DEFAULT_SERVER_URL


class TestPollInterval:
    """Test poll interval settings."""

    def test_default(self, config: ConfigManager) -> None:
        """Test the default interval."""
        assert config.get_poll_interval() == DEFAULT_POLL_INTERVAL

    def test_set_and_get(self, config: ConfigManager) -> None:
        """Test saving a custom interval."""
        config.set_poll_interval(30)
        assert config.get_poll_interval() == 30

    def test_clamped_low(self, config: ConfigManager) -> None:
        """Test intervals below the minimum are raised."""
        config.set_poll_interval(1)
        assert config.get_poll_interval() == 5

    def test_clamped_high(self, config: ConfigManager) -> None:
        """Test intervals above the maximum are lowered."""
        config.set_poll_interval(10_000)
        assert config.get_poll_interval() == 300


class TestManagementMode:
    """Test group management mode settings."""

    def test_default_is_friends_chat(self, config: ConfigManager) -> None:
        """Test FRIENDS_CHAT is the default mode."""
        assert config.get_management_mode() == ManagementMode.FRIENDS_CHAT

    def test_set_manual(self, config: ConfigManager) -> None:
        """Test switching to MANUAL persists."""
        config.set_management_mode(ManagementMode.MANUAL)
        assert config.get_management_mode() == ManagementMode.MANUAL

    def test_unknown_value_falls_back(self, config: ConfigManager) -> None:
        """Test a corrupt stored value yields the default."""
        config.settings.setValue(KEY_MANAGEMENT_MODE, "party")
        assert config.get_management_mode() == ManagementMode.FRIENDS_CHAT


class TestGeneral:
    """Test general config operations."""

    def test_clear_restores_defaults(self, config: ConfigManager) -> None:
        """Test clear() removes all saved settings."""
        config.set_server_url("https://x.example")
        config.set_management_mode(ManagementMode.MANUAL)
        config.clear()
        assert config.get_server_url() == DEFAULT_SERVER_URL
        assert config.get_management_mode() == ManagementMode.FRIENDS_CHAT

    def test_sync_does_not_raise(self, config: ConfigManager) -> None:
        """Test sync() can be called."""
        config.set_poll_interval(20)
        config.sync()
        assert config.get_poll_interval() == 20
