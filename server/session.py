"""
Room-wide fan-out and phase progression.

Everything here runs with the room's game_lock held: either inside a
message handler or inside a deferred transition scheduled with
Room.schedule(). None of these functions acquire the lock themselves,
except handle_player_leave, which is the entry point for disconnects.
"""

from config import config
from errors import InvariantViolation
from game import GamePhase, PassOutcome, PlayOutcome, SeriesOutcome
from logging_config import get_logger
from room import Room, RoomManager

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Outbound messages
# ---------------------------------------------------------------------------

def system_message(message: str) -> dict:
    return {"type": "systemMessage", "message": message}


def error_message(message: str) -> dict:
    return {"type": "errorMessage", "message": message}


async def broadcast_system(room: Room, message: str) -> None:
    await room.broadcast(system_message(message))


async def broadcast_game_state(room: Room) -> None:
    """Send every seated player their own view of the room."""
    for player_id in list(room.players):
        await room.send_to(player_id, room.game.get_state(player_id))


def _name(room: Room, player_id: str) -> str:
    player = room.game.get_player(player_id)
    return player.name if player else "A player"


# ---------------------------------------------------------------------------
# Turn announcements
# ---------------------------------------------------------------------------

async def announce_play(room: Room, outcome: PlayOutcome) -> None:
    name = _name(room, outcome.player_id)
    if outcome.cleared_by_eight:
        await broadcast_system(room, f"{name} played an 8! The table clears.")
    if outcome.finished_rank is not None:
        await broadcast_system(room, f"{name} is out in place {outcome.finished_rank}!")
    if outcome.table_cleared:
        await broadcast_system(room, "Nobody can answer. The table clears.")
    await broadcast_game_state(room)
    if outcome.round_over:
        await handle_round_finished(room)


async def announce_pass(room: Room, outcome: PassOutcome) -> None:
    if outcome.table_cleared:
        await broadcast_system(room, "Everyone passed. The table clears.")
    await broadcast_game_state(room)


# ---------------------------------------------------------------------------
# Round and series progression
# ---------------------------------------------------------------------------

async def handle_round_finished(room: Room) -> None:
    """
    Apply the round-limit policy after a round ends.

    - Limit reached: announce series over, back to the lobby after a delay.
    - Endless series: ask the host whether to continue.
    - Otherwise: move on to the exchange automatically after a delay.
    """
    game = room.game
    order = ", ".join(_name(room, pid) for pid in game.ranks if game.get_player(pid))
    await broadcast_system(room, f"Round {game.game_count} is over. Finishing order: {order}")

    outcome = game.series_outcome()
    logger.with_context(room_code=room.code).info(
        f"Round {game.game_count} finished -> {outcome.value}"
    )

    if outcome == SeriesOutcome.SERIES_OVER:
        await room.broadcast({
            "type": "seriesOver",
            "message": f"All {game.settings.limit} rounds have been played. Returning to the lobby.",
        })
        room.schedule(config.SERIES_RESET_DELAY, lambda: reset_room(room), "series reset")
    elif outcome == SeriesOutcome.ASK_HOST:
        await room.send_to(room.host_id, {"type": "showContinueModal"})
    else:
        room.schedule(config.ROUND_END_DELAY, lambda: begin_exchange(room), "exchange")


async def reset_room(room: Room) -> None:
    room.game.reset_to_waiting()
    await broadcast_game_state(room)


async def begin_exchange(room: Room) -> None:
    """Enter the exchange phase and schedule the card swap."""
    if room.game.phase == GamePhase.FINISHED:
        room.game.enter_exchange()
    await broadcast_game_state(room)
    room.schedule(config.EXCHANGE_DELAY, lambda: run_exchange(room), "card exchange")


async def run_exchange(room: Room) -> None:
    """Swap cards between richest and poorest, then schedule the next round."""
    result = room.game.run_exchange()
    if result is None:
        await start_next_round(room)
        return

    richest = _name(room, result.richest_id)
    poorest = _name(room, result.poorest_id)
    await broadcast_system(
        room,
        f"{poorest} gave their 2 strongest cards to {richest}, "
        f"and received {richest}'s 2 weakest.",
    )
    await broadcast_game_state(room)
    room.schedule(config.NEXT_ROUND_DELAY, lambda: start_next_round(room), "next round")


async def start_next_round(room: Room) -> None:
    game = room.game
    game.start_round()
    leader = game.current_player()
    await broadcast_system(room, f"Round {game.game_count} begins. {leader.name} leads.")
    await broadcast_game_state(room)


# ---------------------------------------------------------------------------
# Recovery and departures
# ---------------------------------------------------------------------------

async def recover_from_invariant_violation(room: Room) -> None:
    """
    Abort the round after an internal inconsistency.

    Must be called from the ``except InvariantViolation`` block so the
    traceback is logged.
    """
    logger.with_context(room_code=room.code).exception("Game invariant violated, resetting room")
    room.game.reset_to_waiting()
    await broadcast_system(room, "Something went wrong. The round has been reset.")
    await broadcast_game_state(room)


async def handle_player_leave(room: Room, player_id: str, room_manager: RoomManager) -> None:
    """Handle a player leaving a room (disconnect)."""
    async with room.game_lock:
        try:
            outcome = room.remove_player(player_id)
        except InvariantViolation:
            await recover_from_invariant_violation(room)
            return

        if outcome is None:
            return

        if outcome.room_empty:
            room_manager.remove_room(room.code)
            return

        logger.with_context(room_code=room.code, player_id=player_id).info(
            f"{outcome.player.name} left"
        )
        await broadcast_system(room, f"{outcome.player.name} has disconnected.")

        if outcome.new_host_id:
            await broadcast_system(room, f"{_name(room, outcome.new_host_id)} is now the host.")
        if outcome.forced_reset:
            await broadcast_system(room, "Not enough players left. Returning to the lobby.")

        await broadcast_game_state(room)

        game = room.game
        if outcome.round_over:
            await handle_round_finished(room)
        elif (
            outcome.new_host_id
            and game.phase == GamePhase.FINISHED
            and game.series_outcome() == SeriesOutcome.ASK_HOST
        ):
            # The old host never answered; ask the new one
            await room.send_to(outcome.new_host_id, {"type": "showContinueModal"})
