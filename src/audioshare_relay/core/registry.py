"""
Room registry for the AudioShare relay.

Maps opaque room ids to Room objects. Rooms are created lazily by the
router and removed eagerly as soon as they become empty. The registry is
an ordinary object handed to whoever needs it; several independent
registries can coexist in one process.
"""

import logging
import time
from typing import Callable, Dict, List, Optional, Tuple

from .room import Room
from .types import (
    DEFAULT_BUFFER_CAPACITY,
    DEFAULT_MAX_FRAME_SIZE,
    DEFAULT_MIN_PACKET_INTERVAL,
    DEFAULT_SEND_TIMEOUT,
)

logger = logging.getLogger(__name__)


class RoomRegistry:
    """In-memory mapping of room id to Room."""

    def __init__(
        self,
        buffer_capacity: int = DEFAULT_BUFFER_CAPACITY,
        max_frame_size: int = DEFAULT_MAX_FRAME_SIZE,
        min_packet_interval: float = DEFAULT_MIN_PACKET_INTERVAL,
        send_timeout: float = DEFAULT_SEND_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.buffer_capacity = buffer_capacity
        self.max_frame_size = max_frame_size
        self.min_packet_interval = min_packet_interval
        self.send_timeout = send_timeout
        self.clock = clock

        self._rooms: Dict[str, Room] = {}
        self.rooms_created = 0
        self.rooms_deleted = 0

    @classmethod
    def from_config(cls, config, clock: Callable[[], float] = time.monotonic) -> "RoomRegistry":
        """Build a registry using the room limits of a RelayConfig."""
        return cls(
            buffer_capacity=config.buffer_capacity,
            max_frame_size=config.max_frame_size,
            min_packet_interval=config.min_packet_interval,
            send_timeout=config.send_timeout,
            clock=clock,
        )

    def get(self, room_id: str) -> Optional[Room]:
        """Get a room by id - O(1) lookup."""
        return self._rooms.get(room_id)

    def create(self, room_id: str) -> Room:
        """
        Create and register a new empty room.

        Raises:
            ValueError: If a room with this id already exists
        """
        if room_id in self._rooms:
            raise ValueError(f"Room {room_id} already exists")

        room = Room(
            room_id,
            buffer_capacity=self.buffer_capacity,
            max_frame_size=self.max_frame_size,
            min_packet_interval=self.min_packet_interval,
            send_timeout=self.send_timeout,
            clock=self.clock,
            on_empty=self._discard,
        )
        self._rooms[room_id] = room
        self.rooms_created += 1
        logger.info(f"Room created: {room_id}")
        return room

    def delete(self, room_id: str) -> Optional[Room]:
        """Remove a room and shut down its worker. Returns the removed room."""
        room = self._rooms.pop(room_id, None)
        if room is None:
            return None
        self.rooms_deleted += 1
        room.shutdown()
        logger.info(f"Room deleted: {room_id}")
        return room

    def _discard(self, room: Room) -> None:
        # A newer room may already be registered under the same id
        if self._rooms.get(room.room_id) is room:
            self.delete(room.room_id)

    def items(self) -> List[Tuple[str, Room]]:
        """Snapshot of (room_id, room) pairs, safe to iterate while mutating."""
        return list(self._rooms.items())

    def __contains__(self, room_id: str) -> bool:
        return room_id in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)

    def get_stats(self) -> Dict[str, int]:
        """Get registry statistics."""
        return {
            "rooms": len(self._rooms),
            "publishers": sum(1 for r in self._rooms.values() if r.has_publisher),
            "subscribers": sum(len(r.subscribers) for r in self._rooms.values()),
            "rooms_created": self.rooms_created,
            "rooms_deleted": self.rooms_deleted,
        }
