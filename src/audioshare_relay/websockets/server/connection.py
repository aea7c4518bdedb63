"""
WebSocket implementation of the core Connection interface.
"""

import logging
from typing import Optional

from websockets.asyncio.server import ServerConnection
from websockets.exceptions import ConcurrencyError, ConnectionClosed
from websockets.protocol import State
from websockets.typing import Data

from audioshare_relay.core.connection import Connection
from audioshare_relay.core.types import CLOSE_NORMAL

logger = logging.getLogger(__name__)


class RelayServerConnection(ServerConnection):
    """
    ServerConnection that discards undecodable text messages.

    websockets fails the connection with 1007 when a text frame is not
    valid UTF-8. Here the message is logged and skipped, and the
    connection stays open.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.invalid_messages = 0

    async def recv(self, decode: Optional[bool] = None) -> Data:
        while True:
            try:
                return await self.recv_messages.get(decode)
            except UnicodeDecodeError as e:
                self.invalid_messages += 1
                logger.warning(
                    f"Discarding undecodable text message from {self.remote_address}: "
                    f"{e.reason} at position {e.start}"
                )
            except (EOFError, ConcurrencyError):
                # Closed stream or concurrent reader: let websockets raise
                return await super().recv(decode)


class WebSocketConnection(Connection):
    """Adapts a websockets ServerConnection for use by rooms."""

    def __init__(self, websocket: ServerConnection) -> None:
        self.websocket = websocket
        self._connection_id = f"{websocket.remote_address}#{str(websocket.id)[:8]}"

    @property
    def connection_id(self) -> str:
        return self._connection_id

    @property
    def is_open(self) -> bool:
        return self.websocket.state is State.OPEN

    async def send(self, frame) -> bool:
        """Send bytes as a binary frame, str as a text frame."""
        try:
            await self.websocket.send(frame.payload)
            return True
        except ConnectionClosed:
            logger.debug(f"Send to closed connection {self.connection_id}")
            return False
        except Exception as e:
            logger.error(f"Error sending to {self.connection_id}: {e}")
            return False

    async def close(self, code: int = CLOSE_NORMAL, reason: str = "") -> None:
        try:
            await self.websocket.close(code, reason)
        except Exception as e:
            logger.debug(f"Error closing {self.connection_id}: {e}")
