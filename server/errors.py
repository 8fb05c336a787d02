"""
Exceptions raised by room and game operations.

Every player-facing rejection derives from GameError and carries a message
that is safe to send back to the originating client as an errorMessage.
InvariantViolation is deliberately not a GameError: it signals a server
bug, is logged with a traceback, and forces the round to reset.
"""


class GameError(Exception):
    """Base exception for rejected player actions."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# ---------------------------------------------------------------------------
# Taxonomy
# ---------------------------------------------------------------------------

class ValidationRejection(GameError):
    """A play attempt that breaks the table rules."""


class AuthorizationRejection(GameError):
    """Action attempted by someone who may not take it right now."""


class CapacityRejection(GameError):
    """Room cannot take another player."""


class NotFoundRejection(GameError):
    """Referenced room does not exist."""


class StateRejection(GameError):
    """Action is not valid in the room's current phase."""


# ---------------------------------------------------------------------------
# Concrete errors
# ---------------------------------------------------------------------------

class InvalidPlay(ValidationRejection):
    def __init__(self, rejection):
        self.rejection = rejection
        super().__init__(rejection.message)


class NotYourTurn(AuthorizationRejection):
    def __init__(self):
        super().__init__("It's not your turn.")


class NotHost(AuthorizationRejection):
    def __init__(self, action: str = "do that"):
        super().__init__(f"Only the host can {action}.")


class RoomFull(CapacityRejection):
    def __init__(self):
        super().__init__("This room is full.")


class RoomNotJoinable(CapacityRejection):
    def __init__(self):
        super().__init__("This room has already started a game.")


class RoomNotFound(NotFoundRejection):
    def __init__(self, code: str = ""):
        self.code = code
        super().__init__("Room not found.")


class WrongPhase(StateRejection):
    def __init__(self, message: str = "That action is not available right now."):
        super().__init__(message)


class NotEnoughPlayers(StateRejection):
    def __init__(self, minimum: int):
        super().__init__(f"Need at least {minimum} players.")


class AlreadyInRoom(StateRejection):
    def __init__(self):
        super().__init__("You are already in a room.")


class AlreadySeated(StateRejection):
    def __init__(self):
        super().__init__("You are already seated in this room.")


class InvariantViolation(Exception):
    """Internal state no longer satisfies a game invariant."""
