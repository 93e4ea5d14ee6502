"""Error types raised by the Truco engine."""

from __future__ import annotations

from typing import Optional


class ErrorCode:
    """Stable string codes carried by ``game_error`` events."""

    INVALID_ACTION = "INVALID_ACTION"
    GAME_IN_PROGRESS = "GAME_IN_PROGRESS"
    GAME_FULL = "GAME_FULL"
    PLAYER_EXISTS = "PLAYER_EXISTS"
    PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
    NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
    NOT_ENOUGH_CARDS = "NOT_ENOUGH_CARDS"
    PLAYERS_NOT_READY = "PLAYERS_NOT_READY"
    INVALID_PHASE = "INVALID_PHASE"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    INVALID_CARD = "INVALID_CARD"
    NO_ACTIVE_TRICK = "NO_ACTIVE_TRICK"
    NO_ACTIVE_ROUND = "NO_ACTIVE_ROUND"
    INVALID_TRUCO_CALL = "INVALID_TRUCO_CALL"
    UNKNOWN = "UNKNOWN"


class GameError(RuntimeError):
    """Raised when an action fails validation."""

    def __init__(self, message: str, code: str, player_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.player_id = player_id


class InvalidConfig(ValueError):
    """Raised when an engine is built from a configuration that fails validation."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)


class DeckError(ValueError):
    """Raised when a deck cannot satisfy a deal."""
