"""
Frame and event types passed between the transport and the rooms.

A payload is classified exactly once, at the transport boundary, into
either an AudioFrame (binary) or a ControlFrame (text). Connections then
talk to their room through the typed events below.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from .connection import Connection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AudioFrame:
    """Binary audio payload, relayed as a binary WebSocket frame."""

    data: bytes

    def __len__(self) -> int:
        return len(self.data)

    @property
    def payload(self) -> bytes:
        return self.data


@dataclass(frozen=True)
class ControlFrame:
    """Text control payload, relayed as a text WebSocket frame."""

    text: str

    def __len__(self) -> int:
        return len(self.text)

    @property
    def payload(self) -> str:
        return self.text


Frame = Union[AudioFrame, ControlFrame]


def decode_frame(message) -> Optional[Frame]:
    """
    Classify a raw transport message.

    Returns:
        AudioFrame for bytes-like payloads, ControlFrame for text, or None
        for anything that cannot be relayed (logged and dropped).
    """
    if isinstance(message, str):
        return ControlFrame(message)
    if isinstance(message, (bytes, bytearray, memoryview)):
        return AudioFrame(bytes(message))
    logger.warning(f"Dropping message of unsupported type {type(message).__name__}")
    return None


@dataclass(frozen=True)
class MessageEvent:
    """A frame received from a connection."""

    connection: Connection
    frame: Frame


@dataclass(frozen=True)
class CloseEvent:
    """The connection was closed by the peer or the transport."""

    connection: Connection


@dataclass(frozen=True)
class ErrorEvent:
    """The transport reported an error on the connection."""

    connection: Connection
    error: BaseException


RoomEvent = Union[MessageEvent, CloseEvent, ErrorEvent]
