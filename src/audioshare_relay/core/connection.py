"""
Connection abstraction consumed by the relay core.

The core never touches a socket directly. Each accepted connection is
wrapped in an object implementing this interface by the transport layer.
"""

from abc import ABC, abstractmethod

from .types import CLOSE_NORMAL


class Connection(ABC):
    """An open bidirectional connection as seen by a room."""

    @property
    @abstractmethod
    def connection_id(self) -> str:
        """Stable identifier used in logs."""

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """Whether the connection still accepts frames."""

    @abstractmethod
    async def send(self, frame) -> bool:
        """
        Deliver one frame.

        AudioFrame payloads must go out as binary frames and ControlFrame
        payloads as text frames.

        Returns:
            True on success, False if the frame could not be delivered.
            Implementations must not raise for delivery failures.
        """

    @abstractmethod
    async def close(self, code: int = CLOSE_NORMAL, reason: str = "") -> None:
        """Close the connection. Must be idempotent and must not raise."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.connection_id}>"
