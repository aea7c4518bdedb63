"""
WebSocket relay server for AudioShare rooms.

Accepts WebSocket connections, routes each one into a room according to
its ``room`` and ``role`` query parameters, feeds inbound messages to the
room mailbox and runs the reclamation sweep in the background. Plain
HTTP requests are answered with a small health page.
"""

import asyncio
import logging
from typing import Optional

from websockets.asyncio.server import Server, ServerConnection, serve
from websockets.exceptions import ConnectionClosed
from websockets.http11 import Request, Response

from audioshare_relay.config import RelayConfig, config_manager
from audioshare_relay.core import (
    ConnectionRouter,
    ErrorEvent,
    ReclamationSweep,
    RoomRegistry,
)
from audioshare_relay.core.types import CLOSE_GOING_AWAY, REASON_SERVER_SHUTDOWN
from audioshare_relay.infrastructure import ConfigurationError, setup_logging

from .connection import RelayServerConnection, WebSocketConnection
from .params import parse_join_params
from .process_messages import ConnectionUtils, InboundMessageHandler

logger = logging.getLogger(__name__)


class RelayServer:
    """WebSocket front end for the room registry."""

    def __init__(
        self,
        config: Optional[RelayConfig] = None,
        registry: Optional[RoomRegistry] = None,
    ) -> None:
        """
        Initialize the relay server.

        Args:
            config: Relay configuration (defaults to RelayConfig())
            registry: Room registry to serve; built from config if None
        """
        self.config = config or RelayConfig()
        self.registry = registry or RoomRegistry.from_config(self.config)
        self.router = ConnectionRouter(self.registry)
        self.sweep = ReclamationSweep(
            self.registry,
            inactive_timeout=self.config.inactive_timeout,
            interval=self.config.sweep_interval,
        )
        self.message_handler = InboundMessageHandler(logger)

        self.server: Optional[Server] = None
        self._connection_semaphore = asyncio.Semaphore(self.config.max_connections)
        self.total_connections = 0

    @property
    def port(self) -> Optional[int]:
        """Port actually bound (useful when configured with port 0)."""
        if not self.server or not self.server.sockets:
            return None
        return self.server.sockets[0].getsockname()[1]

    async def start(self) -> bool:
        """Start the relay server."""
        try:
            self.server = await serve(
                self._handle_connection,
                self.config.host,
                self.config.port,
                process_request=self._process_request,
                max_size=self.config.max_message_size,
                create_connection=RelayServerConnection,
                compression=None,  # No compression for low latency
            )
            logger.info(f"AudioShare relay started on {self.config.host}:{self.port}")
            self.sweep.start()
            return True
        except OSError as e:
            logger.error(f"Failed to start AudioShare relay: {e}", exc_info=True)
            return False

    async def stop(self) -> None:
        """Stop the sweep, close every room and shut the listener down."""
        await self.sweep.stop()

        for room_id, room in self.registry.items():
            self.registry.delete(room_id)
            await room.evict(CLOSE_GOING_AWAY, REASON_SERVER_SHUTDOWN)
            await room.wait_closed()

        if self.server:
            self.server.close()
            await self.server.wait_closed()
            self.server = None
            logger.info("AudioShare relay stopped")

    def _process_request(
        self, connection: ServerConnection, request: Request
    ) -> Optional[Response]:
        return ConnectionUtils.health_response(connection, request, self.get_stats())

    async def _handle_connection(self, websocket: ServerConnection) -> None:
        """Handle one WebSocket connection for its whole lifetime."""
        connection = WebSocketConnection(websocket)
        params = parse_join_params(websocket.request.path if websocket.request else None)
        logger.info(
            f"New connection {connection.connection_id} "
            f"(room={params.room_id!r}, role={params.role!r})"
        )

        async with self._connection_semaphore:
            self.total_connections += 1

            room = await self.router.join(connection, params.room_id, params.role)
            if room is None:
                return

            try:
                async for message in websocket:
                    self.message_handler.dispatch(room, connection, message)
            except ConnectionClosed:
                logger.info(f"Connection closed: {connection.connection_id}")
            except Exception as e:
                logger.error(
                    f"Error handling connection {connection.connection_id}: {e}",
                    exc_info=True,
                )
                room.post(ErrorEvent(connection, e))
            finally:
                ConnectionUtils.cleanup_connection(room, connection, logger)

    def get_stats(self) -> dict:
        """Get server statistics."""
        return {
            "server_running": self.server is not None,
            "total_connections": self.total_connections,
            "rejected_connections": self.router.rejected,
            "rooms_evicted": self.sweep.rooms_evicted,
            "registry_stats": self.registry.get_stats(),
            "message_stats": self.message_handler.get_stats(),
        }


async def main(config: Optional[RelayConfig] = None) -> None:
    """Run the relay server until interrupted."""
    if config is None:
        config = config_manager.get_config()

    setup_logging(
        component_name="audioshare_relay",
        log_level=config.log_level,
        log_file=config.log_file,
    )

    server = RelayServer(config)
    try:
        if await server.start():
            logger.info("AudioShare relay running. Press Ctrl+C to stop.")
            await asyncio.Future()  # Run forever
    finally:
        await server.stop()


def run() -> None:
    """Console script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Shutting down AudioShare relay...")
    except ConfigurationError as e:
        raise SystemExit(f"Invalid configuration: {e}")


if __name__ == "__main__":
    run()
