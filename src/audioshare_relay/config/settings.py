"""
Configuration management for the AudioShare relay.

This module provides a small configuration system: a dataclass holding
the relay limits and timings, and a manager that fills it from the
environment (optionally seeded from a .env file).
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from audioshare_relay.core.types import (
    DEFAULT_BUFFER_CAPACITY,
    DEFAULT_HOST,
    DEFAULT_INACTIVE_TIMEOUT,
    DEFAULT_MAX_CONNECTIONS,
    DEFAULT_MAX_FRAME_SIZE,
    DEFAULT_MAX_MESSAGE_SIZE,
    DEFAULT_MIN_PACKET_INTERVAL,
    DEFAULT_PORT,
    DEFAULT_SEND_TIMEOUT,
    DEFAULT_SWEEP_INTERVAL,
)
from audioshare_relay.infrastructure.exceptions import (
    ConfigurationError,
    ValidationError,
)

logger = logging.getLogger(__name__)


@dataclass
class RelayConfig:
    """Configuration for the relay server and its rooms."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    log_file: Optional[str] = "logs/relay.log"

    # Per-room audio buffering
    buffer_capacity: int = DEFAULT_BUFFER_CAPACITY
    max_frame_size: int = DEFAULT_MAX_FRAME_SIZE
    min_packet_interval: float = DEFAULT_MIN_PACKET_INTERVAL

    # Transport limits
    max_message_size: int = DEFAULT_MAX_MESSAGE_SIZE
    send_timeout: float = DEFAULT_SEND_TIMEOUT
    max_connections: int = DEFAULT_MAX_CONNECTIONS

    # Reclamation sweep
    inactive_timeout: float = DEFAULT_INACTIVE_TIMEOUT
    sweep_interval: float = DEFAULT_SWEEP_INTERVAL

    def validate(self) -> None:
        """
        Check that limits are positive and mutually consistent.

        Raises:
            ValidationError: If any value is out of range
        """
        positive = {
            "buffer_capacity": self.buffer_capacity,
            "max_frame_size": self.max_frame_size,
            "max_message_size": self.max_message_size,
            "send_timeout": self.send_timeout,
            "max_connections": self.max_connections,
            "inactive_timeout": self.inactive_timeout,
            "sweep_interval": self.sweep_interval,
        }
        for name, value in positive.items():
            if value <= 0:
                raise ValidationError(f"{name} must be positive, got {value}")

        if self.min_packet_interval < 0:
            raise ValidationError("min_packet_interval cannot be negative")
        if not 0 < self.port < 65536:
            raise ValidationError(f"port out of range: {self.port}")
        if self.max_frame_size > self.buffer_capacity:
            raise ValidationError(
                "max_frame_size cannot exceed buffer_capacity "
                f"({self.max_frame_size} > {self.buffer_capacity})"
            )


class RelayConfigManager:
    """Loads RelayConfig from environment variables."""

    def __init__(self, env_file_path: str = ".env"):
        """
        Initialize configuration manager.

        Args:
            env_file_path: Path to environment file
        """
        self.env_file_path = env_file_path
        self._load_environment()

    def _load_environment(self):
        """Load environment variables from file."""
        if os.path.exists(self.env_file_path):
            load_dotenv(dotenv_path=self.env_file_path)
            logger.info(f"Loaded environment from {self.env_file_path}")
        else:
            logger.debug(f"Environment file {self.env_file_path} not found")

    def _get_optional_env(self, key: str, default: str = None) -> str:
        """Get optional environment variable."""
        return os.getenv(key, default)

    def _get_int(self, key: str, default: int) -> int:
        value = self._get_optional_env(key)
        if value is None or value == "":
            return default
        try:
            return int(value)
        except ValueError:
            raise ConfigurationError(f"{key} must be an integer, got {value!r}")

    def _get_float(self, key: str, default: float) -> float:
        value = self._get_optional_env(key)
        if value is None or value == "":
            return default
        try:
            return float(value)
        except ValueError:
            raise ConfigurationError(f"{key} must be a number, got {value!r}")

    def _get_port(self) -> int:
        """RELAY_PORT wins over the conventional PORT variable."""
        if self._get_optional_env("RELAY_PORT"):
            return self._get_int("RELAY_PORT", DEFAULT_PORT)
        return self._get_int("PORT", DEFAULT_PORT)

    def get_config(self) -> RelayConfig:
        """
        Get the relay configuration.

        Returns:
            RelayConfig: Validated relay configuration

        Raises:
            ConfigurationError: If a value is malformed or out of range
        """
        try:
            config = RelayConfig(
                host=self._get_optional_env("RELAY_HOST", DEFAULT_HOST),
                port=self._get_port(),
                log_level=self._get_optional_env("LOG_LEVEL", "INFO").upper(),
                log_file=self._get_optional_env("RELAY_LOG_FILE", "logs/relay.log"),
                buffer_capacity=self._get_int(
                    "RELAY_BUFFER_CAPACITY", DEFAULT_BUFFER_CAPACITY
                ),
                max_frame_size=self._get_int(
                    "RELAY_MAX_FRAME_SIZE", DEFAULT_MAX_FRAME_SIZE
                ),
                min_packet_interval=self._get_float(
                    "RELAY_MIN_PACKET_INTERVAL", DEFAULT_MIN_PACKET_INTERVAL
                ),
                max_message_size=self._get_int(
                    "RELAY_MAX_MESSAGE_SIZE", DEFAULT_MAX_MESSAGE_SIZE
                ),
                send_timeout=self._get_float(
                    "RELAY_SEND_TIMEOUT", DEFAULT_SEND_TIMEOUT
                ),
                max_connections=self._get_int(
                    "RELAY_MAX_CONNECTIONS", DEFAULT_MAX_CONNECTIONS
                ),
                inactive_timeout=self._get_float(
                    "RELAY_INACTIVE_TIMEOUT", DEFAULT_INACTIVE_TIMEOUT
                ),
                sweep_interval=self._get_float(
                    "RELAY_SWEEP_INTERVAL", DEFAULT_SWEEP_INTERVAL
                ),
            )
            config.validate()

            logger.info("Configuration loaded successfully")
            return config

        except ConfigurationError as e:
            logger.error(f"Failed to load configuration: {e}")
            raise


# Global configuration manager instance
config_manager = RelayConfigManager()
