"""
AudioShare Relay - real-time audio relay between one host and many guests.

A host publishes a binary audio stream into a room over a WebSocket and
any number of guests subscribe to it. The relay keeps many independent
rooms, bounds per-room buffering, isolates delivery failures per
recipient and reclaims rooms that go quiet.

Architecture:
- Core: Rooms, registry, connection router, reclamation sweep
- Audio: Bounded audio buffering
- WebSockets: Transport adapter and relay server
- Config: Configuration management
- Infrastructure: Logging and exceptions
- Utils: Packet-rate instrumentation
"""

__version__ = "1.0.0"
__author__ = "AudioShare Team"

# Core components
from .core import (
    Connection,
    AudioFrame,
    ControlFrame,
    Room,
    RoomRegistry,
    ConnectionRouter,
    ReclamationSweep,
    Role,
)

# Audio components
from .audio.buffers import AudioBuffer

# Networking components
from .websockets.server import RelayServer

# Configuration
from .config import RelayConfig, RelayConfigManager, config_manager

# Infrastructure
from .infrastructure.logging_manager import setup_logging
from .infrastructure.exceptions import (
    RelayError,
    ConfigurationError,
    ProtocolError,
    MissingParametersError,
    RoleConflictError,
    NoPublisherError,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Core components
    "Connection",
    "AudioFrame",
    "ControlFrame",
    "Room",
    "RoomRegistry",
    "ConnectionRouter",
    "ReclamationSweep",
    "Role",
    # Audio components
    "AudioBuffer",
    # Networking components
    "RelayServer",
    # Configuration
    "RelayConfig",
    "RelayConfigManager",
    "config_manager",
    # Infrastructure
    "setup_logging",
    "RelayError",
    "ConfigurationError",
    "ProtocolError",
    "MissingParametersError",
    "RoleConflictError",
    "NoPublisherError",
]
