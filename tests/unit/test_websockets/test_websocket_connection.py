"""
Unit tests for the WebSocket Connection adapter and message dispatch.
"""

import logging

import pytest
from unittest.mock import AsyncMock, MagicMock

from websockets.exceptions import ConnectionClosedOK
from websockets.frames import Close
from websockets.protocol import State

from audioshare_relay.core.frames import AudioFrame, ControlFrame, MessageEvent
from audioshare_relay.websockets.server.connection import WebSocketConnection
from audioshare_relay.websockets.server.process_messages import InboundMessageHandler


class TestWebSocketConnection:
    """Test cases for WebSocketConnection class."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_audio_sent_as_bytes(self, mock_websocket):
        connection = WebSocketConnection(mock_websocket)

        assert await connection.send(AudioFrame(b"\x01\x02")) is True

        mock_websocket.send.assert_awaited_once_with(b"\x01\x02")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_control_sent_as_text(self, mock_websocket):
        connection = WebSocketConnection(mock_websocket)

        assert await connection.send(ControlFrame("host_disconnected")) is True

        mock_websocket.send.assert_awaited_once_with("host_disconnected")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_send_to_closed_connection_fails(self, mock_websocket):
        mock_websocket.send = AsyncMock(
            side_effect=ConnectionClosedOK(Close(1000, ""), Close(1000, ""), True)
        )
        connection = WebSocketConnection(mock_websocket)

        assert await connection.send(AudioFrame(b"x")) is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_send_error_fails(self, mock_websocket):
        mock_websocket.send = AsyncMock(side_effect=RuntimeError("broken pipe"))
        connection = WebSocketConnection(mock_websocket)

        assert await connection.send(AudioFrame(b"x")) is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_close_is_quiet(self, mock_websocket):
        mock_websocket.close = AsyncMock(side_effect=RuntimeError("already closed"))
        connection = WebSocketConnection(mock_websocket)

        await connection.close(4001, "conflict")

        mock_websocket.close.assert_awaited_once_with(4001, "conflict")

    @pytest.mark.unit
    def test_is_open(self, mock_websocket):
        connection = WebSocketConnection(mock_websocket)

        mock_websocket.state = State.OPEN
        assert connection.is_open
        mock_websocket.state = State.CLOSED
        assert not connection.is_open

    @pytest.mark.unit
    def test_connection_id_mentions_peer(self, mock_websocket):
        connection = WebSocketConnection(mock_websocket)

        assert "127.0.0.1" in connection.connection_id


class TestInboundMessageHandler:
    """Test cases for InboundMessageHandler class."""

    @pytest.mark.unit
    def test_dispatch_posts_typed_event(self, make_connection):
        handler = InboundMessageHandler(logging.getLogger(__name__))
        room = MagicMock()
        room.post.return_value = True
        connection = make_connection()

        assert handler.dispatch(room, connection, b"\x00\x01") is True
        assert handler.dispatch(room, connection, "ping") is True

        events = [call.args[0] for call in room.post.call_args_list]
        assert events == [
            MessageEvent(connection, AudioFrame(b"\x00\x01")),
            MessageEvent(connection, ControlFrame("ping")),
        ]

    @pytest.mark.unit
    def test_dispatch_drops_unsupported_and_late_messages(self, make_connection):
        handler = InboundMessageHandler(logging.getLogger(__name__))
        room = MagicMock()
        room.post.return_value = False

        assert handler.dispatch(room, make_connection(), object()) is False
        assert handler.dispatch(room, make_connection(), b"x") is False

        assert handler.get_stats() == {"messages_received": 2, "messages_dropped": 2}
