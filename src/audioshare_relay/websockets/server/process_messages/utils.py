"""
Utility functions for connection management.

This module provides helpers used by the relay server around the
lifetime of a connection and the plain-HTTP health page.
"""

import json
import logging
from http import HTTPStatus
from typing import Optional

from websockets.asyncio.server import ServerConnection
from websockets.http11 import Request, Response

from audioshare_relay.core import CloseEvent, Connection, Room
from audioshare_relay.core.types import HEALTH_BANNER, HEALTH_PATH


class ConnectionUtils:
    """Utility functions for connection management."""

    @staticmethod
    def cleanup_connection(
        room: Room,
        connection: Connection,
        logger: logging.Logger,
    ) -> None:
        """Detach a connection from its room once its socket has ended."""
        if room.post(CloseEvent(connection)):
            logger.info(f"Client disconnected: {connection.connection_id} (room {room.room_id})")
        else:
            logger.debug(f"Client {connection.connection_id} closed after room {room.room_id} was removed")

    @staticmethod
    def is_websocket_upgrade(request: Request) -> bool:
        return request.headers.get("Upgrade", "").lower() == "websocket"

    @staticmethod
    def health_response(
        connection: ServerConnection,
        request: Request,
        stats: dict,
    ) -> Optional[Response]:
        """
        Answer plain HTTP requests; let WebSocket upgrades through.

        Returns:
            A response for non-upgrade requests, None otherwise
        """
        if ConnectionUtils.is_websocket_upgrade(request):
            return None

        if request.path.split("?", 1)[0] == HEALTH_PATH:
            body = json.dumps({"status": "healthy", **stats}) + "\n"
            response = connection.respond(HTTPStatus.OK, body)
            del response.headers["Content-Type"]
            response.headers["Content-Type"] = "application/json"
            return response

        return connection.respond(HTTPStatus.OK, HEALTH_BANNER + "\n")
