"""
Message processing modules for WebSocket relay server.

This package contains the handler for inbound WebSocket messages and
connection lifetime helpers.
"""

from .inbound_message import InboundMessageHandler
from .utils import ConnectionUtils

__all__ = [
    "InboundMessageHandler",
    "ConnectionUtils",
]
