"""
Core components for the AudioShare relay.

This package contains the room state machine and everything that
operates on it: connection abstraction, frames and events, the room
registry, the connection router and the reclamation sweep.
"""

from .connection import Connection
from .frames import (
    AudioFrame,
    ControlFrame,
    Frame,
    decode_frame,
    MessageEvent,
    CloseEvent,
    ErrorEvent,
)
from .room import Room
from .registry import RoomRegistry
from .router import ConnectionRouter
from .sweeper import ReclamationSweep
from .types import Role

__all__ = [
    "Connection",
    "AudioFrame",
    "ControlFrame",
    "Frame",
    "decode_frame",
    "MessageEvent",
    "CloseEvent",
    "ErrorEvent",
    "Room",
    "RoomRegistry",
    "ConnectionRouter",
    "ReclamationSweep",
    "Role",
]
