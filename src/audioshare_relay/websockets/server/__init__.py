"""
WebSocket server implementation for the AudioShare relay.

This module contains the RelayServer class and its transport adapters.
"""

from .connection import RelayServerConnection, WebSocketConnection
from .params import JoinParams, parse_join_params
from .relay_server import RelayServer, main, run

__all__ = [
    "RelayServer",
    "WebSocketConnection",
    "RelayServerConnection",
    "JoinParams",
    "parse_join_params",
    "main",
    "run",
]
