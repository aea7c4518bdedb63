"""
Common types and constants for the AudioShare relay.

This module centralizes roles, close codes and wire strings to avoid
hardcoding throughout the codebase.
"""

from enum import Enum
from typing import Final, Optional


class Role(Enum):
    """Slot a connection asks for when joining a room."""

    PUBLISHER = "host"
    SUBSCRIBER = "guest"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Role"]:
        """Map a query-string role to a Role, or None if unknown."""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


# Query Parameters
PARAM_ROOM: Final[str] = "room"
PARAM_ROLE: Final[str] = "role"

# Close Codes
CLOSE_NORMAL: Final[int] = 1000
CLOSE_GOING_AWAY: Final[int] = 1001

# Close Reasons
REASON_REMOVED: Final[str] = "Removed from room"
REASON_INACTIVE: Final[str] = "Room inactive"
REASON_SERVER_SHUTDOWN: Final[str] = "Server shutting down"

# Control Messages
MSG_HOST_DISCONNECTED: Final[str] = "host_disconnected"
MSG_ACK_HOST: Final[str] = "Connected as HOST"
MSG_ACK_GUEST: Final[str] = "Connected as GUEST"

# Health Page
HEALTH_PATH: Final[str] = "/health"
HEALTH_BANNER: Final[str] = "AudioShare relay running."

# Default Values
DEFAULT_HOST: Final[str] = "0.0.0.0"
DEFAULT_PORT: Final[int] = 3000
DEFAULT_BUFFER_CAPACITY: Final[int] = 16384
DEFAULT_MAX_FRAME_SIZE: Final[int] = 2048
DEFAULT_MAX_MESSAGE_SIZE: Final[int] = 8192
DEFAULT_INACTIVE_TIMEOUT: Final[float] = 60.0
DEFAULT_SWEEP_INTERVAL: Final[float] = 30.0
DEFAULT_MIN_PACKET_INTERVAL: Final[float] = 0.010
DEFAULT_SEND_TIMEOUT: Final[float] = 1.0
DEFAULT_MAX_CONNECTIONS: Final[int] = 1000
