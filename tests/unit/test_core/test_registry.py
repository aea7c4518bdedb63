"""
Unit tests for the RoomRegistry.
"""

import pytest

from audioshare_relay.core.registry import RoomRegistry
from audioshare_relay.core.room import Room


class TestRoomRegistry:
    """Test cases for RoomRegistry class."""

    @pytest.mark.unit
    def test_create_and_get(self, registry):
        room = registry.create("A")

        assert isinstance(room, Room)
        assert registry.get("A") is room
        assert "A" in registry
        assert len(registry) == 1

    @pytest.mark.unit
    def test_rooms_use_registry_limits(self, registry, mock_config, clock):
        room = registry.create("A")

        assert room.buffer.capacity == mock_config.buffer_capacity
        assert room.max_frame_size == mock_config.max_frame_size
        assert room.send_timeout == mock_config.send_timeout
        assert room.created_at == clock.now

    @pytest.mark.unit
    def test_create_duplicate_raises(self, registry):
        registry.create("A")

        with pytest.raises(ValueError):
            registry.create("A")

    @pytest.mark.unit
    def test_get_unknown(self, registry):
        assert registry.get("missing") is None
        assert "missing" not in registry

    @pytest.mark.unit
    def test_delete_shuts_room_down(self, registry):
        room = registry.create("A")

        assert registry.delete("A") is room

        assert room.closed
        assert "A" not in registry
        assert registry.delete("A") is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_room_removes_itself(self, registry, make_connection):
        room = registry.create("A")
        publisher = make_connection()
        room.assign_publisher(publisher)

        await room.remove_connection(publisher)

        assert "A" not in registry
        assert registry.get_stats()["rooms_deleted"] == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_stale_room_does_not_remove_successor(self, registry, make_connection):
        old = registry.create("A")
        old_publisher = make_connection()
        old.assign_publisher(old_publisher)
        registry.delete("A")
        new = registry.create("A")

        await old.remove_connection(old_publisher)

        assert registry.get("A") is new

    @pytest.mark.unit
    def test_independent_registries(self, mock_config, clock):
        first = RoomRegistry.from_config(mock_config, clock=clock)
        second = RoomRegistry.from_config(mock_config, clock=clock)

        first.create("A")

        assert "A" in first
        assert "A" not in second

    @pytest.mark.unit
    def test_items_is_a_snapshot(self, registry):
        registry.create("A")
        registry.create("B")

        for room_id, _ in registry.items():
            registry.delete(room_id)

        assert len(registry) == 0

    @pytest.mark.unit
    def test_stats(self, registry, make_connection):
        room = registry.create("A")
        room.assign_publisher(make_connection())
        room.add_subscriber(make_connection())
        room.add_subscriber(make_connection())
        registry.create("B")

        stats = registry.get_stats()

        assert stats["rooms"] == 2
        assert stats["publishers"] == 1
        assert stats["subscribers"] == 2
        assert stats["rooms_created"] == 2
