# engine_py/src/tienlen_engine/errors.py

class GameError(Exception):
    """Base exception for game-related errors."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class InvalidPlayError(GameError):
    """A rejected play; the room is left unchanged."""


class StateInvariantViolation(GameError):
    """Room state is corrupted; the room is flagged errored."""
    def __init__(self, message: str):
        super().__init__(INTERNAL_ERROR, message)


# Specific error codes
ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
SEAT_TAKEN = "SEAT_TAKEN"
INVALID_SEAT = "INVALID_SEAT"
NOT_SEATED = "NOT_SEATED"
NOT_YOUR_TURN = "NOT_YOUR_TURN"
OWNERSHIP_MISMATCH = "OWNERSHIP_MISMATCH"
MISSING_LOWEST_CARD = "MISSING_LOWEST_CARD"
PATTERN_MISMATCH = "PATTERN_MISMATCH"
RANK_TOO_LOW = "RANK_TOO_LOW"
ACTION_NOT_ALLOWED = "ACTION_NOT_ALLOWED"
NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
UNKNOWN_PERSONA = "UNKNOWN_PERSONA"
INVALID_IDENTITY = "INVALID_IDENTITY"
ROOM_ERRORED = "ROOM_ERRORED"
INTERNAL_ERROR = "INTERNAL_ERROR"
