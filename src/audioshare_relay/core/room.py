"""
Room state machine for the AudioShare relay.

A Room holds one publisher slot, a set of subscribers and a bounded
audio buffer. All mutations for a room are applied by a single worker
task draining the room's mailbox, so an ingest, broadcast or removal
always runs to completion before the next event for that room starts.
"""

import asyncio
import logging
import time
from typing import Callable, Iterable, List, Optional, Set

from audioshare_relay.audio.buffers import AudioBuffer
from audioshare_relay.infrastructure.exceptions import (
    NoPublisherError,
    RoleConflictError,
)
from audioshare_relay.utils.performance import PacketRateMonitor

from .connection import Connection
from .frames import (
    AudioFrame,
    CloseEvent,
    ControlFrame,
    ErrorEvent,
    Frame,
    MessageEvent,
    RoomEvent,
)
from .types import (
    CLOSE_GOING_AWAY,
    CLOSE_NORMAL,
    DEFAULT_BUFFER_CAPACITY,
    DEFAULT_MAX_FRAME_SIZE,
    DEFAULT_MIN_PACKET_INTERVAL,
    DEFAULT_SEND_TIMEOUT,
    MSG_HOST_DISCONNECTED,
    REASON_INACTIVE,
    REASON_REMOVED,
)

logger = logging.getLogger(__name__)


class Room:
    """One publisher, many subscribers, one bounded buffer."""

    def __init__(
        self,
        room_id: str,
        buffer_capacity: int = DEFAULT_BUFFER_CAPACITY,
        max_frame_size: int = DEFAULT_MAX_FRAME_SIZE,
        min_packet_interval: float = DEFAULT_MIN_PACKET_INTERVAL,
        send_timeout: float = DEFAULT_SEND_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
        on_empty: Optional[Callable[["Room"], None]] = None,
    ) -> None:
        """
        Initialize an empty room.

        Args:
            room_id: Opaque room identifier
            buffer_capacity: Byte limit of the audio buffer
            max_frame_size: Audio frames larger than this are dropped
            min_packet_interval: Inter-arrival time below which a frame
                counts as a fast packet (instrumentation only)
            send_timeout: Seconds a single send may take before the
                recipient is treated as failed
            clock: Monotonic time source
            on_empty: Called once when the room loses its last connection
        """
        self.room_id = room_id
        self.publisher: Optional[Connection] = None
        self.subscribers: Set[Connection] = set()

        self.buffer = AudioBuffer(buffer_capacity)
        self.max_frame_size = max_frame_size
        self.send_timeout = send_timeout
        self.rate_monitor = PacketRateMonitor(min_packet_interval, clock)

        self._clock = clock
        self.created_at = clock()
        self.last_activity_at = self.created_at
        self.oversized_frames = 0
        self.failed_sends = 0

        self.closed = False
        self._on_empty = on_empty
        self._inbox: Optional[asyncio.Queue] = None
        self._worker: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def has_publisher(self) -> bool:
        return self.publisher is not None

    @property
    def is_empty(self) -> bool:
        return self.publisher is None and not self.subscribers

    @property
    def last_packet_at(self) -> Optional[float]:
        return self.rate_monitor.last_packet_at

    @property
    def packets_received(self) -> int:
        return self.rate_monitor.packets_received

    def __contains__(self, connection: Connection) -> bool:
        return connection is self.publisher or connection in self.subscribers

    def touch(self) -> None:
        """Refresh the activity timestamp."""
        self.last_activity_at = self._clock()

    def idle_for(self, now: Optional[float] = None) -> float:
        """Seconds since the last inbound message."""
        if now is None:
            now = self._clock()
        return now - self.last_activity_at

    # ------------------------------------------------------------------
    # Slot assignment
    # ------------------------------------------------------------------

    def assign_publisher(self, connection: Connection) -> None:
        """
        Put a connection in the publisher slot.

        Raises:
            RoleConflictError: If the slot is already taken
        """
        if self.publisher is not None:
            raise RoleConflictError()
        self.subscribers.discard(connection)
        self.publisher = connection
        logger.info(f"Room {self.room_id}: publisher {connection.connection_id} attached")

    def add_subscriber(self, connection: Connection) -> None:
        """
        Add a connection to the subscriber set.

        Raises:
            NoPublisherError: If the room has no active publisher
        """
        if self.publisher is None:
            raise NoPublisherError()
        self.subscribers.add(connection)
        logger.info(
            f"Room {self.room_id}: subscriber {connection.connection_id} attached "
            f"({len(self.subscribers)} total)"
        )

    # ------------------------------------------------------------------
    # Relay
    # ------------------------------------------------------------------

    def ingest(self, frame: AudioFrame, from_connection: Connection) -> bool:
        """
        Buffer an audio frame from the publisher.

        Returns:
            True if the frame was accepted and should be forwarded
        """
        if self.closed or from_connection is not self.publisher:
            return False

        self.touch()

        if len(frame) > self.max_frame_size:
            self.oversized_frames += 1
            logger.debug(
                f"Room {self.room_id}: dropped oversized frame "
                f"({len(frame)} > {self.max_frame_size} bytes)"
            )
            return False

        if self.rate_monitor.record(len(frame)):
            logger.debug(f"Room {self.room_id}: fast packet from publisher")

        self.buffer.put(frame.data)
        return True

    async def broadcast(self, frame: Frame, sender: Optional[Connection]) -> int:
        """
        Relay a frame to the other side of the room.

        Frames from the publisher go to every subscriber; frames from
        anyone else go to the publisher only.

        Returns:
            Number of recipients the frame was delivered to
        """
        if sender is not None and sender is self.publisher:
            targets: List[Connection] = list(self.subscribers)
        elif self.publisher is not None:
            targets = [self.publisher]
        else:
            targets = []
        return await self._deliver(targets, frame)

    async def _deliver(self, targets: Iterable[Connection], frame: Frame) -> int:
        """Send to every target concurrently; drop only those that fail."""
        targets = list(targets)
        if not targets:
            return 0

        results = await asyncio.gather(*(self._send(t, frame) for t in targets))

        failed = [target for target, ok in zip(targets, results) if not ok]
        for target in failed:
            self.failed_sends += 1
            logger.warning(
                f"Room {self.room_id}: send to {target.connection_id} failed, removing it"
            )
            await self.remove_connection(target)

        return len(targets) - len(failed)

    async def _send(self, target: Connection, frame: Frame) -> bool:
        try:
            return await asyncio.wait_for(target.send(frame), self.send_timeout)
        except asyncio.TimeoutError:
            logger.debug(f"Room {self.room_id}: send to {target.connection_id} timed out")
            return False
        except Exception as e:
            logger.error(f"Room {self.room_id}: error sending to {target.connection_id}: {e}")
            return False

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------

    async def remove_connection(self, connection: Connection) -> bool:
        """
        Detach a connection and close it.

        Losing the publisher clears the buffer and tells every subscriber
        with a host_disconnected control frame.

        Returns:
            True if the connection was attached to this room
        """
        removed = False
        if connection is not None and connection is self.publisher:
            self.publisher = None
            self.buffer.clear()
            removed = True
            logger.info(f"Room {self.room_id}: publisher {connection.connection_id} left")
            await self._deliver(
                list(self.subscribers), ControlFrame(MSG_HOST_DISCONNECTED)
            )
        elif connection in self.subscribers:
            self.subscribers.discard(connection)
            removed = True
            logger.info(f"Room {self.room_id}: subscriber {connection.connection_id} left")

        await self._close_quietly(connection, CLOSE_NORMAL, REASON_REMOVED)
        self._release_if_empty()
        return removed

    async def evict(self, code: int = CLOSE_GOING_AWAY, reason: str = REASON_INACTIVE) -> int:
        """
        Force-close every connection and shut the room down.

        Returns:
            Number of connections closed
        """
        connections = list(self.subscribers)
        if self.publisher is not None:
            connections.insert(0, self.publisher)

        self.publisher = None
        self.subscribers.clear()
        self.buffer.clear()
        self.shutdown()

        await asyncio.gather(
            *(self._close_quietly(c, code, reason) for c in connections)
        )
        return len(connections)

    async def _close_quietly(self, connection: Connection, code: int, reason: str) -> None:
        try:
            await connection.close(code, reason)
        except Exception as e:
            logger.debug(f"Error closing {connection!r}: {e}")

    def _release_if_empty(self) -> None:
        if self.closed or not self.is_empty:
            return
        logger.info(f"Room {self.room_id} is empty")
        if self._on_empty is not None:
            self._on_empty(self)
        self.shutdown()

    # ------------------------------------------------------------------
    # Mailbox
    # ------------------------------------------------------------------

    def post(self, event: RoomEvent) -> bool:
        """
        Queue an event for the room worker, starting it if needed.

        Returns:
            False if the room is already closed and the event was dropped
        """
        if self.closed:
            logger.debug(f"Room {self.room_id} closed, dropping {type(event).__name__}")
            return False

        if self._inbox is None:
            self._inbox = asyncio.Queue()
        self._inbox.put_nowait(event)

        if self._worker is None or self._worker.done():
            self._worker = asyncio.get_running_loop().create_task(
                self._run(), name=f"room-{self.room_id}"
            )
        return True

    async def _run(self) -> None:
        while not self.closed:
            event = await self._inbox.get()
            try:
                if event is not None:
                    await self.process(event)
            except Exception as e:
                logger.error(
                    f"Room {self.room_id}: error handling {type(event).__name__}: {e}",
                    exc_info=True,
                )
            finally:
                self._inbox.task_done()

        # Events still queued after shutdown are discarded
        while not self._inbox.empty():
            self._inbox.get_nowait()
            self._inbox.task_done()

    async def drain(self) -> None:
        """Wait until every event posted so far has been handled."""
        if self._inbox is not None:
            await self._inbox.join()

    async def process(self, event: RoomEvent) -> None:
        """Apply one event to the room."""
        if self.closed:
            return

        if isinstance(event, MessageEvent):
            await self._on_message(event.connection, event.frame)
        elif isinstance(event, CloseEvent):
            await self.remove_connection(event.connection)
        elif isinstance(event, ErrorEvent):
            logger.warning(
                f"Room {self.room_id}: transport error on "
                f"{event.connection.connection_id}: {event.error}"
            )
            await self.remove_connection(event.connection)
        else:
            logger.warning(f"Room {self.room_id}: unknown event {event!r}")

    async def _on_message(self, connection: Connection, frame: Frame) -> None:
        if connection not in self:
            logger.debug(f"Room {self.room_id}: ignoring frame from detached {connection!r}")
            return

        self.touch()

        if isinstance(frame, AudioFrame):
            # Only the publisher's audio is relayed
            if self.ingest(frame, connection):
                await self.broadcast(frame, connection)
        else:
            await self.broadcast(frame, connection)

    def shutdown(self) -> None:
        """Mark the room closed and stop its worker."""
        if self.closed:
            return
        self.closed = True
        # Wake a worker blocked on an empty mailbox
        if self._worker is not None and not self._worker.done():
            self._inbox.put_nowait(None)

    async def wait_closed(self) -> None:
        """Wait for the worker task to finish after shutdown."""
        if self._worker is not None and self._worker is not asyncio.current_task():
            await asyncio.gather(self._worker, return_exceptions=True)

    def get_stats(self) -> dict:
        """Get room statistics."""
        return {
            "room_id": self.room_id,
            "has_publisher": self.has_publisher,
            "subscribers": len(self.subscribers),
            "idle_seconds": self.idle_for(),
            "oversized_frames": self.oversized_frames,
            "failed_sends": self.failed_sends,
            "buffer": self.buffer.get_stats(),
            "packets": self.rate_monitor.get_stats(),
        }
