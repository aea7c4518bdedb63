"""
Reclamation sweep for the AudioShare relay.

Periodically evicts rooms that have seen no inbound message for longer
than the inactivity timeout. Eviction looks only at activity recency,
never at whether the connections still appear open, so rooms whose
clients vanished without a close handshake are reclaimed too.
"""

import asyncio
import logging
from typing import Callable, List, Optional

from .registry import RoomRegistry
from .room import Room
from .types import CLOSE_GOING_AWAY, REASON_INACTIVE

logger = logging.getLogger(__name__)


class ReclamationSweep:
    """Background eviction of inactive rooms."""

    def __init__(
        self,
        registry: RoomRegistry,
        inactive_timeout: float,
        interval: float,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.registry = registry
        self.inactive_timeout = inactive_timeout
        self.interval = interval
        self.clock = clock or registry.clock
        self.rooms_evicted = 0
        self._task: Optional[asyncio.Task] = None

    def is_stale(self, room: Room, now: float) -> bool:
        return room.idle_for(now) > self.inactive_timeout

    async def sweep(self) -> List[str]:
        """
        Run one sweep over the registry.

        Returns:
            Ids of the rooms that were evicted
        """
        now = self.clock()
        evicted = []

        for room_id, room in self.registry.items():
            if not self.is_stale(room, now):
                continue

            logger.info(
                f"Evicting inactive room {room_id} "
                f"(idle {room.idle_for(now):.1f}s > {self.inactive_timeout}s)"
            )
            self.registry.delete(room_id)
            closed = await room.evict(CLOSE_GOING_AWAY, REASON_INACTIVE)
            logger.debug(f"Closed {closed} connection(s) of room {room_id}")
            evicted.append(room_id)

        self.rooms_evicted += len(evicted)
        return evicted

    async def run(self) -> None:
        """Sweep forever on a fixed period."""
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.sweep()
            except Exception as e:
                logger.error(f"Reclamation sweep failed: {e}", exc_info=True)

    def start(self) -> asyncio.Task:
        """Start the periodic sweep as a background task."""
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run(), name="reclamation-sweep")
        return self._task

    async def stop(self) -> None:
        """Cancel the periodic sweep."""
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
