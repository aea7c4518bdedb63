"""
Unit tests for relay configuration loading and validation.
"""

import pytest

from audioshare_relay.config.settings import RelayConfig, RelayConfigManager
from audioshare_relay.infrastructure.exceptions import (
    ConfigurationError,
    ValidationError,
)

RELAY_ENV_VARS = [
    "RELAY_HOST",
    "RELAY_PORT",
    "PORT",
    "LOG_LEVEL",
    "RELAY_LOG_FILE",
    "RELAY_BUFFER_CAPACITY",
    "RELAY_MAX_FRAME_SIZE",
    "RELAY_MIN_PACKET_INTERVAL",
    "RELAY_MAX_MESSAGE_SIZE",
    "RELAY_SEND_TIMEOUT",
    "RELAY_MAX_CONNECTIONS",
    "RELAY_INACTIVE_TIMEOUT",
    "RELAY_SWEEP_INTERVAL",
]


@pytest.fixture
def clean_env(monkeypatch):
    # setenv first so teardown also removes values loaded from .env files
    for name in RELAY_ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


@pytest.fixture
def manager(tmp_path):
    return RelayConfigManager(env_file_path=str(tmp_path / "missing.env"))


class TestRelayConfig:
    """Test cases for RelayConfig class."""

    @pytest.mark.unit
    def test_defaults(self):
        config = RelayConfig()

        assert config.port == 3000
        assert config.buffer_capacity == 16384
        assert config.max_frame_size == 2048
        assert config.max_message_size == 8192
        assert config.inactive_timeout == 60.0
        assert config.sweep_interval == 30.0
        config.validate()

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "field, value",
        [
            ("buffer_capacity", 0),
            ("max_frame_size", -1),
            ("send_timeout", 0),
            ("inactive_timeout", 0),
            ("sweep_interval", -5),
            ("port", 70000),
            ("min_packet_interval", -0.1),
        ],
    )
    def test_invalid_values(self, field, value):
        config = RelayConfig(**{field: value})

        with pytest.raises(ValidationError):
            config.validate()

    @pytest.mark.unit
    def test_frame_larger_than_buffer(self):
        config = RelayConfig(buffer_capacity=1024, max_frame_size=2048)

        with pytest.raises(ValidationError, match="max_frame_size"):
            config.validate()


class TestRelayConfigManager:
    """Test cases for RelayConfigManager class."""

    @pytest.mark.unit
    def test_defaults_without_environment(self, clean_env, manager):
        config = manager.get_config()

        assert config == RelayConfig()

    @pytest.mark.unit
    def test_reads_environment(self, clean_env, manager):
        clean_env.setenv("RELAY_HOST", "127.0.0.1")
        clean_env.setenv("PORT", "8080")
        clean_env.setenv("LOG_LEVEL", "debug")
        clean_env.setenv("RELAY_BUFFER_CAPACITY", "32768")
        clean_env.setenv("RELAY_INACTIVE_TIMEOUT", "120")
        clean_env.setenv("RELAY_SWEEP_INTERVAL", "15.5")

        config = manager.get_config()

        assert config.host == "127.0.0.1"
        assert config.port == 8080
        assert config.log_level == "DEBUG"
        assert config.buffer_capacity == 32768
        assert config.inactive_timeout == 120.0
        assert config.sweep_interval == 15.5

    @pytest.mark.unit
    def test_relay_port_wins(self, clean_env, manager):
        clean_env.setenv("PORT", "8080")
        clean_env.setenv("RELAY_PORT", "9090")

        assert manager.get_config().port == 9090

    @pytest.mark.unit
    def test_malformed_number(self, clean_env, manager):
        clean_env.setenv("RELAY_MAX_FRAME_SIZE", "big")

        with pytest.raises(ConfigurationError, match="RELAY_MAX_FRAME_SIZE"):
            manager.get_config()

    @pytest.mark.unit
    def test_inconsistent_values(self, clean_env, manager):
        clean_env.setenv("RELAY_BUFFER_CAPACITY", "1000")
        clean_env.setenv("RELAY_MAX_FRAME_SIZE", "2000")

        with pytest.raises(ValidationError):
            manager.get_config()

    @pytest.mark.unit
    def test_loads_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("RELAY_MAX_CONNECTIONS=42\n")

        config = RelayConfigManager(env_file_path=str(env_file)).get_config()

        assert config.max_connections == 42
