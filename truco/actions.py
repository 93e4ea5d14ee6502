"""Actions accepted by ``GameEngine.dispatch``."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Union

from .state import TrucoCall


class ActionType(Enum):
    JOIN_GAME = "join_game"
    LEAVE_GAME = "leave_game"
    READY_PLAYER = "ready_player"
    START_GAME = "start_game"
    PLAY_CARD = "play_card"
    CALL_TRUCO = "call_truco"
    ACCEPT_TRUCO = "accept_truco"
    REJECT_TRUCO = "reject_truco"


@dataclass(frozen=True)
class Action:
    """A player action.

    ``type`` may arrive as a raw string from an outer layer; the engine
    resolves it against ``ActionType`` and rejects anything unknown.
    """

    type: Union[ActionType, str]
    player_id: str
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def join(cls, player_id: str, name: str | None = None) -> Action:
        return cls(ActionType.JOIN_GAME, player_id, {"name": name or player_id})

    @classmethod
    def leave(cls, player_id: str) -> Action:
        return cls(ActionType.LEAVE_GAME, player_id)

    @classmethod
    def ready(cls, player_id: str) -> Action:
        return cls(ActionType.READY_PLAYER, player_id)

    @classmethod
    def start(cls, player_id: str) -> Action:
        return cls(ActionType.START_GAME, player_id)

    @classmethod
    def play_card(cls, player_id: str, card_id: str) -> Action:
        return cls(ActionType.PLAY_CARD, player_id, {"card_id": card_id})

    @classmethod
    def call_truco(cls, player_id: str, call: Union[TrucoCall, str]) -> Action:
        value = call.value if isinstance(call, TrucoCall) else call
        return cls(ActionType.CALL_TRUCO, player_id, {"call": value})

    @classmethod
    def accept_truco(cls, player_id: str) -> Action:
        return cls(ActionType.ACCEPT_TRUCO, player_id)

    @classmethod
    def reject_truco(cls, player_id: str) -> Action:
        return cls(ActionType.REJECT_TRUCO, player_id)
