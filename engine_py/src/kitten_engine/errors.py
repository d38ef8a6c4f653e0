# engine_py/src/kitten_engine/errors.py

class GameError(Exception):
    """Base exception for game-related errors."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class InvariantViolation(GameError):
    """A game instance reached a state correct use can never produce."""
    def __init__(self, message: str):
        super().__init__(INTERNAL_ERROR, message)


# Specific error codes
NOT_STARTED = "NOT_STARTED"
ALREADY_STARTED = "ALREADY_STARTED"
GAME_FINISHED = "GAME_FINISHED"
GAME_HALTED = "GAME_HALTED"
GAME_IN_PROGRESS = "GAME_IN_PROGRESS"
ROOM_FULL = "ROOM_FULL"
ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
DUPLICATE_PLAYER = "DUPLICATE_PLAYER"
NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
PLAYER_ELIMINATED = "PLAYER_ELIMINATED"
NOT_YOUR_TURN = "NOT_YOUR_TURN"
CARD_NOT_IN_HAND = "CARD_NOT_IN_HAND"
CARD_NOT_PLAYABLE = "CARD_NOT_PLAYABLE"
EFFECT_PENDING = "EFFECT_PENDING"
FAVOR_PENDING = "FAVOR_PENDING"
NO_PENDING_ACTION = "NO_PENDING_ACTION"
NO_PENDING_FAVOR = "NO_PENDING_FAVOR"
NOT_FAVOR_TARGET = "NOT_FAVOR_TARGET"
NO_COUNTER_CARD = "NO_COUNTER_CARD"
INVALID_COMBO = "INVALID_COMBO"
INVALID_PARAMS = "INVALID_PARAMS"
INVALID_SEAT = "INVALID_SEAT"
INTERNAL_ERROR = "INTERNAL_ERROR"
