"""
Pytest configuration and shared fixtures for the AudioShare relay test suite.

This module provides common fixtures and configuration for all tests.
"""

import itertools

import pytest
from unittest.mock import AsyncMock, MagicMock

from audioshare_relay.config.settings import RelayConfig
from audioshare_relay.core import Connection, RoomRegistry, ConnectionRouter


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """Create a controllable clock."""
    return FakeClock()


@pytest.fixture
def mock_config():
    """Create a small configuration for testing."""
    return RelayConfig(
        host="127.0.0.1",
        port=0,
        log_level="DEBUG",
        log_file=None,
        buffer_capacity=2000,
        max_frame_size=600,
        min_packet_interval=0.010,
        send_timeout=0.5,
        inactive_timeout=60.0,
        sweep_interval=30.0,
    )


@pytest.fixture
def make_connection():
    """Factory for mock connections that record what they are sent."""
    counter = itertools.count(1)

    def _make(name: str = None, send_ok: bool = True):
        connection = MagicMock(spec=Connection)
        connection.connection_id = name or f"conn-{next(counter)}"
        connection.is_open = True
        connection.send = AsyncMock(return_value=send_ok)
        connection.close = AsyncMock()
        return connection

    return _make


@pytest.fixture
def registry(mock_config, clock):
    """Create a registry using the test configuration and clock."""
    return RoomRegistry.from_config(mock_config, clock=clock)


@pytest.fixture
def router(registry):
    """Create a connection router over the test registry."""
    return ConnectionRouter(registry)


@pytest.fixture
def mock_websocket():
    """Create a mock WebSocket connection for testing."""
    websocket = MagicMock()
    websocket.remote_address = ("127.0.0.1", 12345)
    websocket.id = "0f0e0d0c-0000-0000-0000-000000000000"
    websocket.send = AsyncMock()
    websocket.close = AsyncMock()
    return websocket


@pytest.fixture
def sent_payloads():
    """Return a helper listing payloads delivered to a mock connection, in order."""

    def _payloads(connection):
        return [call.args[0].payload for call in connection.send.await_args_list]

    return _payloads


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
