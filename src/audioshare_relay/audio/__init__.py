"""
Audio handling components for the AudioShare relay.

This package contains the bounded per-room audio buffer.
"""

from .buffers import AudioBuffer

__all__ = [
    "AudioBuffer",
]
