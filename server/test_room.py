"""
Test suite for Room and RoomManager.

Covers:
- Room creation, unique codes and host seating
- Case-insensitive lookup and joining
- Room deletion
- Message broadcast and send_to
- Deferred transitions (stale drop, cancellation on close)

Run with: pytest test_room.py -v
"""

import asyncio

import pytest

from errors import RoomFull, RoomNotFound, RoomNotJoinable
from game import GamePhase
from room import Room, RoomManager, RoomPlayer


# =============================================================================
# Mock helpers
# =============================================================================

class MockWebSocket:
    """Mock WebSocket that collects sent messages."""

    def __init__(self):
        self.messages: list[dict] = []

    async def send_json(self, data: dict):
        self.messages.append(data)


class BrokenWebSocket:
    """WebSocket whose peer has gone away."""

    async def send_json(self, data: dict):
        raise RuntimeError("Cannot call send once a close message has been sent")


def make_room(num_players: int = 2) -> Room:
    room = Room(code="TEST")
    for i in range(num_players):
        room.add_player(f"p{i}", f"Player {i}", MockWebSocket())
    return room


async def drain(room: Room) -> None:
    """Wait until every scheduled transition of the room has run."""
    while room.pending_count():
        await asyncio.gather(*list(room._pending), return_exceptions=True)


# =============================================================================
# RoomManager
# =============================================================================

class TestRoomManagerCreate:

    def test_create_room_seats_host(self):
        rm = RoomManager()
        room = rm.create_room("host", "Alice", 3)

        assert len(room.code) == 4
        assert room.code.isupper()
        assert rm.rooms[room.code] is room
        assert room.host_id == "host"
        assert room.game.settings.limit == 3
        assert room.game.code == room.code

    def test_create_multiple_rooms_unique_codes(self):
        rm = RoomManager()
        codes = {rm.create_room(f"p{i}", f"Player {i}").code for i in range(20)}
        assert len(codes) == 20
        assert rm.room_count() == 20

    def test_remove_room_closes_it(self):
        rm = RoomManager()
        room = rm.create_room("host", "Alice")
        rm.remove_room(room.code)

        assert room.code not in rm.rooms
        assert room.closed

    def test_remove_nonexistent_room(self):
        rm = RoomManager()
        rm.remove_room("ZZZZ")  # Should not raise


class TestRoomManagerLookup:

    def test_get_room_case_insensitive(self):
        rm = RoomManager()
        room = rm.create_room("host", "Alice")

        assert rm.get_room(room.code.lower()) is room
        assert rm.get_room(room.code) is room

    def test_get_room_not_found(self):
        rm = RoomManager()
        assert rm.get_room("ZZZZ") is None

    def test_join_room(self):
        rm = RoomManager()
        room = rm.create_room("host", "Alice")
        joined = rm.join_room(room.code.lower(), "guest", "Bob")

        assert joined is room
        assert [p.id for p in room.game.players] == ["host", "guest"]
        assert room.players["guest"].name == "Bob"

    def test_join_unknown_room(self):
        rm = RoomManager()
        with pytest.raises(RoomNotFound):
            rm.join_room("ZZZZ", "guest", "Bob")

    def test_join_full_room(self):
        rm = RoomManager()
        room = rm.create_room("p0", "Player 0")
        for i in range(1, 4):
            rm.join_room(room.code, f"p{i}", f"Player {i}")

        with pytest.raises(RoomFull):
            rm.join_room(room.code, "p4", "Player 4")
        assert "p4" not in room.players

    def test_join_started_room(self):
        rm = RoomManager()
        room = rm.create_room("p0", "Player 0")
        rm.join_room(room.code, "p1", "Player 1")
        room.game.start_game("p0")

        with pytest.raises(RoomNotJoinable):
            rm.join_room(room.code, "p2", "Player 2")

    def test_join_closed_room(self):
        rm = RoomManager()
        room = rm.create_room("host", "Alice")
        room.close()

        with pytest.raises(RoomNotFound):
            rm.join_room(room.code, "guest", "Bob")
        assert "guest" not in room.players


# =============================================================================
# Room membership
# =============================================================================

class TestRoomPlayers:

    def test_add_player_binds_connection(self):
        room = Room(code="TEST")
        ws = MockWebSocket()
        player = room.add_player("p0", "Alice", ws)

        assert isinstance(player, RoomPlayer)
        assert player.websocket is ws
        assert room.host_id == "p0"

    def test_failed_seat_leaves_no_binding(self):
        room = make_room(4)
        with pytest.raises(RoomFull):
            room.add_player("p4", "Late", MockWebSocket())
        assert "p4" not in room.players

    def test_remove_player(self):
        room = make_room(3)
        outcome = room.remove_player("p0")

        assert "p0" not in room.players
        assert outcome.new_host_id == "p1"
        assert room.host_id == "p1"

    def test_remove_last_player(self):
        room = make_room(1)
        outcome = room.remove_player("p0")
        assert outcome.room_empty
        assert room.players == {}


# =============================================================================
# Messaging
# =============================================================================

class TestRoomMessaging:

    @pytest.mark.asyncio
    async def test_broadcast_reaches_everyone(self):
        room = make_room(3)
        await room.broadcast({"type": "systemMessage", "message": "hi"})
        for player in room.players.values():
            assert player.websocket.messages == [{"type": "systemMessage", "message": "hi"}]

    @pytest.mark.asyncio
    async def test_broadcast_exclude(self):
        room = make_room(2)
        await room.broadcast({"type": "systemMessage", "message": "hi"}, exclude="p0")
        assert room.players["p0"].websocket.messages == []
        assert len(room.players["p1"].websocket.messages) == 1

    @pytest.mark.asyncio
    async def test_send_to_single_player(self):
        room = make_room(2)
        await room.send_to("p1", {"type": "showContinueModal"})
        assert room.players["p0"].websocket.messages == []
        assert room.players["p1"].websocket.messages == [{"type": "showContinueModal"}]

    @pytest.mark.asyncio
    async def test_send_to_unknown_player(self):
        room = make_room(1)
        await room.send_to("nobody", {"type": "systemMessage", "message": "x"})

    @pytest.mark.asyncio
    async def test_closed_socket_does_not_stop_broadcast(self):
        room = make_room(0)
        room.add_player("gone", "Gone", BrokenWebSocket())
        room.add_player("here", "Here", MockWebSocket())

        await room.broadcast({"type": "systemMessage", "message": "hi"})

        assert len(room.players["here"].websocket.messages) == 1


# =============================================================================
# Deferred transitions
# =============================================================================

class TestSchedule:

    @pytest.mark.asyncio
    async def test_action_runs_under_lock(self):
        room = make_room(2)
        seen = []

        async def action():
            seen.append(room.game_lock.locked())

        room.schedule(0, action)
        await drain(room)

        assert seen == [True]
        assert room.pending_count() == 0

    @pytest.mark.asyncio
    async def test_stale_action_is_dropped(self):
        room = make_room(2)
        seen = []

        async def action():
            seen.append(True)

        room.schedule(0, action)
        room.game.start_game("p0")  # phase change before the timer fires
        await drain(room)

        assert seen == []
        assert room.game.phase == GamePhase.PLAYING

    @pytest.mark.asyncio
    async def test_action_dropped_after_close(self):
        room = make_room(2)
        seen = []

        async def action():
            seen.append(True)

        room.schedule(0, action)
        room.closed = True
        await drain(room)

        assert seen == []

    @pytest.mark.asyncio
    async def test_close_cancels_pending(self):
        room = make_room(2)

        async def action():
            pass

        task = room.schedule(60, action)
        room.close()

        with pytest.raises(asyncio.CancelledError):
            await task
        await asyncio.sleep(0)
        assert task.cancelled()
        assert room.pending_count() == 0

    @pytest.mark.asyncio
    async def test_failing_action_is_contained(self):
        room = make_room(2)

        async def action():
            raise RuntimeError("boom")

        task = room.schedule(0, action)
        await drain(room)

        assert task.done()
        assert task.exception() is None
