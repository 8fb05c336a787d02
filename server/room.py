"""
Room management for multiplayer Daifugo games.

This module handles room creation, player management, and WebSocket
communication for multiplayer game sessions.

A Room contains:
    - A unique 4-letter code for joining
    - A collection of RoomPlayers (connection bindings)
    - A Game instance with the actual game state
    - A lock serializing every mutation of that game
    - The room's pending deferred transitions (next round, lobby reset)
"""

import asyncio
import random
import string
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

from fastapi import WebSocket

from constants import ROOM_CODE_LENGTH
from errors import RoomNotFound
from game import Game, RemoveOutcome
from logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class RoomPlayer:
    """
    A player in a game room (connection-level representation).

    This is separate from game.Player - RoomPlayer tracks where to send
    messages, while game.Player tracks the hand, status and role.

    Attributes:
        id: Unique player identifier (the connection id).
        name: Display name.
        websocket: WebSocket connection.
    """

    id: str
    name: str
    websocket: Optional[WebSocket] = None


@dataclass
class Room:
    """
    A game room that hosts one Daifugo series.

    Attributes:
        code: 4-letter room code for joining (e.g., "ABCD").
        players: Dict mapping player IDs to RoomPlayer objects.
        game: The Game instance containing actual game state.
        game_lock: asyncio.Lock for serializing game mutations to prevent race conditions.
        closed: Set once the room is deleted from the manager.
    """

    code: str
    players: dict[str, RoomPlayer] = field(default_factory=dict)
    game: Game = field(default_factory=Game)
    game_lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    closed: bool = False
    _pending: set = field(default_factory=set, repr=False)

    def __post_init__(self) -> None:
        self.game.code = self.code

    def add_player(
        self,
        player_id: str,
        name: str,
        websocket: Optional[WebSocket] = None,
    ) -> RoomPlayer:
        """
        Seat a player and bind their connection.

        The first player to join becomes the host.

        Raises:
            RoomFull, RoomNotJoinable, AlreadySeated: from Game.add_player.
        """
        self.game.add_player(player_id, name)
        room_player = RoomPlayer(id=player_id, name=name, websocket=websocket)
        self.players[player_id] = room_player
        return room_player

    def remove_player(self, player_id: str) -> Optional[RemoveOutcome]:
        """
        Remove a player from the room.

        Host reassignment and any forced reset are handled by the Game.

        Returns:
            The Game's RemoveOutcome, or None if the player was not found.
        """
        self.players.pop(player_id, None)
        return self.game.remove_player(player_id)

    @property
    def host_id(self) -> Optional[str]:
        return self.game.settings.host_id

    async def broadcast(self, message: dict, exclude: Optional[str] = None) -> None:
        """
        Send the same message to every player in the room.

        Args:
            message: JSON-serializable message dict.
            exclude: Optional player ID to skip.
        """
        for player_id in list(self.players):
            if player_id != exclude:
                await self.send_to(player_id, message)

    async def send_to(self, player_id: str, message: dict) -> None:
        """
        Send a message to a specific player.

        A connection that has gone away is skipped; its disconnect is
        handled by the endpoint that owns it.
        """
        player = self.players.get(player_id)
        if not player or not player.websocket:
            return
        try:
            await player.websocket.send_json(message)
        except Exception as e:
            logger.with_context(room_code=self.code, player_id=player_id).debug(
                f"Send failed: {e}"
            )

    # -------------------------------------------------------------------------
    # Deferred transitions
    # -------------------------------------------------------------------------

    def schedule(
        self,
        delay: float,
        action: Callable[[], Awaitable[None]],
        name: str = "transition",
    ) -> asyncio.Task:
        """
        Run ``action`` after ``delay`` seconds under the game lock.

        The action only runs if, when the timer fires, the room still exists
        and the game has not changed phase since scheduling. Otherwise it is
        dropped as stale.

        Args:
            delay: Seconds to wait.
            action: Coroutine function to run.
            name: Label for logs.

        Returns:
            The asyncio Task (also tracked on the room).
        """
        generation = self.game.generation
        task = asyncio.create_task(self._run_later(delay, generation, action, name))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _run_later(
        self,
        delay: float,
        generation: int,
        action: Callable[[], Awaitable[None]],
        name: str,
    ) -> None:
        await asyncio.sleep(delay)
        async with self.game_lock:
            log = logger.with_context(room_code=self.code)
            if self.closed or self.game.generation != generation:
                log.debug(f"Dropping stale {name}")
                return
            try:
                await action()
            except Exception:
                log.exception(f"Deferred {name} failed")

    def pending_count(self) -> int:
        return len(self._pending)

    def close(self) -> None:
        """Mark the room deleted and cancel its pending transitions."""
        self.closed = True
        for task in list(self._pending):
            task.cancel()


class RoomManager:
    """
    Manages all active game rooms.

    Provides room creation with unique codes, lookup, and cleanup.
    A single RoomManager instance is used by the server. The rooms dict
    is only touched between awaits, so the event loop serializes access.
    """

    def __init__(self) -> None:
        """Initialize an empty room manager."""
        self.rooms: dict[str, Room] = {}

    def _generate_code(self, max_attempts: int = 100) -> str:
        """Generate a unique room code."""
        for _ in range(max_attempts):
            code = "".join(random.choices(string.ascii_uppercase, k=ROOM_CODE_LENGTH))
            if code not in self.rooms:
                return code
        raise RuntimeError("Could not generate unique room code")

    def create_room(
        self,
        player_id: str,
        host_name: str,
        limit: int = 0,
        websocket: Optional[WebSocket] = None,
    ) -> Room:
        """
        Create a new room with a unique code and seat its host.

        Args:
            player_id: Host's player (connection) ID.
            host_name: Host's display name.
            limit: Round limit for the series (0 = endless).
            websocket: Host's connection.

        Returns:
            The newly created Room.
        """
        code = self._generate_code()
        room = Room(code=code)
        room.game.configure(limit)
        room.add_player(player_id, host_name, websocket)
        self.rooms[code] = room
        logger.with_context(room_code=code, player_id=player_id).info(
            f"Room created (limit={room.game.settings.limit})"
        )
        return room

    def get_room(self, code: str) -> Optional[Room]:
        """
        Get a room by its code (case-insensitive).

        Args:
            code: The room code.

        Returns:
            The Room if found, None otherwise.
        """
        return self.rooms.get(code.upper())

    def join_room(
        self,
        code: str,
        player_id: str,
        name: str,
        websocket: Optional[WebSocket] = None,
    ) -> Room:
        """
        Seat a player in an existing room.

        Raises:
            RoomNotFound: No open room with that code.
            RoomFull, RoomNotJoinable: from the room's game.
        """
        room = self.get_room(code)
        if room is None or room.closed:
            raise RoomNotFound(code)
        room.add_player(player_id, name, websocket)
        return room

    def remove_room(self, code: str) -> None:
        """
        Delete a room and cancel anything it had scheduled.

        Args:
            code: The room code to remove.
        """
        room = self.rooms.pop(code, None)
        if room is not None:
            pending = room.pending_count()
            room.close()
            logger.with_context(room_code=code).info(f"Room closed ({pending} pending transitions cancelled)")

    def room_count(self) -> int:
        return len(self.rooms)
