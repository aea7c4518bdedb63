"""Utility helpers for the AudioShare relay."""

from .performance import PacketRateMonitor

__all__ = ["PacketRateMonitor"]
