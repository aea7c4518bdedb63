# buffers.py
"""
Audio buffering components for the AudioShare relay.

This module provides the per-room jitter buffer: a FIFO of binary audio
frames bounded by total byte size that drops the oldest frames first.
"""

import logging
import time
from collections import deque
from typing import List

logger = logging.getLogger(__name__)


class AudioBuffer:
    """Byte-bounded drop-oldest buffer for binary audio frames."""

    def __init__(self, capacity: int = 16384):
        """
        Initialize the audio buffer.

        Args:
            capacity: Maximum total size in bytes of the buffered frames
        """
        if capacity <= 0:
            raise ValueError("capacity must be positive")

        self._frames: deque[bytes] = deque()
        self._byte_size = 0
        self.capacity = capacity

        # Performance tracking
        self._total_frames = 0
        self._dropped_frames = 0
        self._last_activity = time.time()

    def put(self, data: bytes) -> int:
        """
        Append a frame, evicting from the front until within capacity.

        Returns:
            Number of frames evicted to make room
        """
        self._total_frames += 1
        self._last_activity = time.time()

        self._frames.append(data)
        self._byte_size += len(data)

        evicted = 0
        while self._byte_size > self.capacity:
            oldest = self._frames.popleft()
            self._byte_size -= len(oldest)
            evicted += 1

        if evicted:
            self._dropped_frames += evicted
            logger.debug(
                f"Audio buffer over {self.capacity} bytes, dropped {evicted} oldest frame(s)"
            )
        return evicted

    def snapshot(self) -> List[bytes]:
        """Return the buffered frames, oldest first, without consuming them."""
        return list(self._frames)

    def clear(self):
        """Clear all buffered frames."""
        self._frames.clear()
        self._byte_size = 0

    @property
    def byte_size(self) -> int:
        """Total size in bytes of the buffered frames."""
        return self._byte_size

    def size(self) -> int:
        """Get the current number of buffered frames."""
        return len(self._frames)

    def is_empty(self) -> bool:
        """Check if the buffer is empty."""
        return not self._frames

    def get_stats(self) -> dict:
        """Get performance statistics."""
        return {
            "total_frames": self._total_frames,
            "dropped_frames": self._dropped_frames,
            "current_frames": len(self._frames),
            "current_bytes": self._byte_size,
            "capacity": self.capacity,
            "last_activity": self._last_activity,
            "drop_rate": self._dropped_frames / max(self._total_frames, 1) * 100,
        }
