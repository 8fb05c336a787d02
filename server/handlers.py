"""WebSocket message handlers for the Daifugo room server.

Each handler corresponds to a single message type from the client.
Handlers are looked up in the HANDLERS dict by dispatch(), which turns
rejected actions into an errorMessage for the sender only.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import WebSocket
from pydantic import ValidationError

import session
from errors import AlreadyInRoom, GameError, InvariantViolation, RoomNotFound
from events import (
    ContinueGameEvent,
    CreateRoomEvent,
    JoinRoomEvent,
    PlayCardsEvent,
)
from room import Room

logger = logging.getLogger(__name__)


@dataclass
class ConnectionContext:
    """State tracked per WebSocket connection.

    ``current_room`` is bound once, by createRoom or joinRoom, and never
    changes for the lifetime of the connection.
    """

    websocket: WebSocket
    connection_id: str
    player_id: str
    current_room: Optional[Room] = None


def seated_room(ctx: ConnectionContext) -> Optional[Room]:
    """The connection's room, if the connection is still seated in it."""
    room = ctx.current_room
    if room is None or room.closed or ctx.player_id not in room.players:
        return None
    return room


# ---------------------------------------------------------------------------
# Lobby / Room handlers
# ---------------------------------------------------------------------------

async def handle_create_room(data: dict, ctx: ConnectionContext, *, room_manager, **kw) -> None:
    if ctx.current_room:
        raise AlreadyInRoom()

    event = CreateRoomEvent.model_validate(data)
    room = room_manager.create_room(ctx.player_id, event.name, event.game_limit, ctx.websocket)
    ctx.current_room = room

    async with room.game_lock:
        await session.broadcast_game_state(room)


async def handle_join_room(data: dict, ctx: ConnectionContext, *, room_manager, **kw) -> None:
    if ctx.current_room:
        raise AlreadyInRoom()

    event = JoinRoomEvent.model_validate(data)
    room = room_manager.get_room(event.room_code)
    if room is None:
        raise RoomNotFound(event.room_code)

    async with room.game_lock:
        # The room may have been deleted while we waited for the lock
        if room.closed:
            raise RoomNotFound(event.room_code)
        room = room_manager.join_room(event.room_code, ctx.player_id, event.name, ctx.websocket)
        ctx.current_room = room

        await session.broadcast_system(room, f"{event.name} has joined.")
        await session.broadcast_game_state(room)


# ---------------------------------------------------------------------------
# Game lifecycle handlers
# ---------------------------------------------------------------------------

async def handle_start_game(data: dict, ctx: ConnectionContext, **kw) -> None:
    room = seated_room(ctx)
    if not room:
        return

    async with room.game_lock:
        room.game.start_game(ctx.player_id)
        await session.broadcast_system(room, "The host started the game!")
        await session.broadcast_game_state(room)


async def handle_continue_game(data: dict, ctx: ConnectionContext, **kw) -> None:
    room = seated_room(ctx)
    if not room:
        return

    event = ContinueGameEvent.model_validate(data)
    async with room.game_lock:
        room.game.continue_decision(ctx.player_id, event.decision)
        if event.decision:
            await session.broadcast_system(room, "The host continued the series. Exchanging cards...")
            await session.begin_exchange(room)
        else:
            await session.broadcast_system(room, "The host ended the series.")
            await session.broadcast_game_state(room)


# ---------------------------------------------------------------------------
# Turn action handlers
# ---------------------------------------------------------------------------

async def handle_play_cards(data: dict, ctx: ConnectionContext, **kw) -> None:
    room = seated_room(ctx)
    if not room:
        return

    event = PlayCardsEvent.model_validate(data)
    async with room.game_lock:
        try:
            outcome = room.game.play_cards(ctx.player_id, event.to_cards())
        except InvariantViolation:
            await session.recover_from_invariant_violation(room)
            return
        await session.announce_play(room, outcome)


async def handle_pass(data: dict, ctx: ConnectionContext, **kw) -> None:
    room = seated_room(ctx)
    if not room:
        return

    async with room.game_lock:
        try:
            outcome = room.game.pass_turn(ctx.player_id)
        except InvariantViolation:
            await session.recover_from_invariant_violation(room)
            return
        await session.announce_pass(room, outcome)


# ---------------------------------------------------------------------------
# Handler dispatch table
# ---------------------------------------------------------------------------

HANDLERS = {
    "createRoom": handle_create_room,
    "joinRoom": handle_join_room,
    "startGame": handle_start_game,
    "playCards": handle_play_cards,
    "pass": handle_pass,
    "continueGame": handle_continue_game,
}


async def dispatch(data: dict, ctx: ConnectionContext, **deps) -> None:
    """
    Route one inbound message to its handler.

    Unknown message types are ignored. Malformed payloads and rejected
    actions are reported to the sender only; the room is left untouched.
    """
    msg_type = data.get("type") if isinstance(data, dict) else None
    handler = HANDLERS.get(msg_type) if isinstance(msg_type, str) else None
    if handler is None:
        logger.debug(f"Ignoring unknown message type from {ctx.connection_id}")
        return

    try:
        await handler(data, ctx, **deps)
    except ValidationError as e:
        logger.debug(f"Invalid {msg_type} payload: {e.error_count()} errors")
        await ctx.websocket.send_json(session.error_message("Invalid request."))
    except GameError as e:
        await ctx.websocket.send_json(session.error_message(e.message))
