"""
Connection router for the AudioShare relay.

Performs role arbitration for a newly accepted connection and attaches it
to the publisher slot or the subscriber set of the right room.
"""

import logging
from typing import Optional, Tuple

from audioshare_relay.infrastructure.exceptions import (
    MissingParametersError,
    NoPublisherError,
    ProtocolError,
    RoleConflictError,
)

from .connection import Connection
from .frames import ControlFrame
from .registry import RoomRegistry
from .room import Room
from .types import MSG_ACK_GUEST, MSG_ACK_HOST, Role

logger = logging.getLogger(__name__)


class ConnectionRouter:
    """Attaches connections to rooms, one publisher per room."""

    def __init__(self, registry: RoomRegistry) -> None:
        self.registry = registry
        self.rejected = 0

    async def join(
        self,
        connection: Connection,
        room_id: Optional[str],
        role: Optional[str],
    ) -> Optional[Room]:
        """
        Attach a connection to a room and acknowledge it.

        Rejected connections are closed with the close code of the
        protocol error that caused the rejection.

        Returns:
            The room the connection joined, or None if it was rejected
        """
        try:
            room, assigned = self.attach(connection, room_id, role)
        except ProtocolError as e:
            self.rejected += 1
            logger.info(
                f"Rejected {connection.connection_id} (room={room_id!r}, role={role!r}): "
                f"{e.code} {e.reason}"
            )
            await connection.close(e.code, e.reason)
            return None

        ack = MSG_ACK_HOST if assigned is Role.PUBLISHER else MSG_ACK_GUEST
        if not await connection.send(ControlFrame(ack)):
            logger.warning(f"Could not acknowledge {connection.connection_id}, detaching")
            await room.remove_connection(connection)
            return None

        return room

    def attach(
        self,
        connection: Connection,
        room_id: Optional[str],
        role: Optional[str],
    ) -> Tuple[Room, Role]:
        """
        Assign the connection to a slot without suspending.

        Raises:
            MissingParametersError: Room id or role missing or invalid
            RoleConflictError: The room already has a publisher
            NoPublisherError: Subscriber join without an active publisher
        """
        if not room_id or not role:
            raise MissingParametersError()

        parsed = Role.parse(role)
        if parsed is None:
            raise MissingParametersError(f"Invalid role: {role}")

        room = self.registry.get(room_id)

        if parsed is Role.PUBLISHER:
            if room is None:
                room = self.registry.create(room_id)
            elif room.has_publisher:
                raise RoleConflictError()
            room.assign_publisher(connection)
        else:
            if room is None or not room.has_publisher:
                raise NoPublisherError()
            room.add_subscriber(connection)

        return room, parsed
