"""
Inbound message handler for the WebSocket relay server.

Turns raw transport messages into typed frames and hands them to the
room the connection belongs to.
"""

import logging

from audioshare_relay.core import Connection, MessageEvent, Room, decode_frame


class InboundMessageHandler:
    """Classifies inbound messages and posts them to the room mailbox."""

    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger
        self.messages_received = 0
        self.messages_dropped = 0

    def dispatch(self, room: Room, connection: Connection, message) -> bool:
        """
        Post one raw message to the room.

        Returns:
            False if the message was dropped
        """
        self.messages_received += 1

        frame = decode_frame(message)
        if frame is None:
            self.messages_dropped += 1
            return False

        if not room.post(MessageEvent(connection, frame)):
            self.messages_dropped += 1
            self.logger.debug(
                f"Room {room.room_id} is gone, dropped message from {connection.connection_id}"
            )
            return False
        return True

    def get_stats(self) -> dict:
        return {
            "messages_received": self.messages_received,
            "messages_dropped": self.messages_dropped,
        }
