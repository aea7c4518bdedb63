"""Packet-rate instrumentation for room publishers."""

import time
from typing import Callable, Optional


class PacketRateMonitor:
    """
    Tracks inter-arrival times of publisher frames.

    Frames arriving closer together than ``min_interval`` are counted as
    fast packets. This is a diagnostic signal only; callers never drop
    or repeat a frame because of it.
    """

    def __init__(
        self,
        min_interval: float = 0.010,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.min_interval = min_interval
        self._clock = clock
        self.last_packet_at: Optional[float] = None
        self.packets_received = 0
        self.fast_packets = 0
        self.bytes_received = 0
        self._start_time = clock()

    def record(self, data_size: int) -> bool:
        """
        Record a frame arrival.

        Returns:
            True if the frame arrived faster than the minimum interval
        """
        now = self._clock()
        fast = (
            self.last_packet_at is not None
            and now - self.last_packet_at < self.min_interval
        )
        if fast:
            self.fast_packets += 1

        self.last_packet_at = now
        self.packets_received += 1
        self.bytes_received += data_size
        return fast

    def get_stats(self) -> dict:
        """Get current packet statistics."""
        uptime = self._clock() - self._start_time
        stats = {
            "uptime": uptime,
            "packets_received": self.packets_received,
            "fast_packets": self.fast_packets,
            "bytes_received": self.bytes_received,
        }
        if uptime > 0:
            stats["packets_per_second"] = self.packets_received / uptime
            stats["bytes_per_second"] = self.bytes_received / uptime
        return stats
