"""Game state containers for Truco.

The engine owns a single ``GameState`` and mutates it in place; nothing
outside ``truco.game`` should write to these objects.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .cards import Card
from .trick import Trick


class GamePhase(Enum):
    WAITING = "waiting"
    DEALING = "dealing"
    PLAYING = "playing"
    ROUND_END = "round_end"
    GAME_END = "game_end"


class TrucoCall(Enum):
    NONE = "none"
    TRUCO = "truco"
    RETRUCO = "retruco"
    VALE_CUATRO = "vale_cuatro"


CALL_ORDER: list[TrucoCall] = [
    TrucoCall.NONE,
    TrucoCall.TRUCO,
    TrucoCall.RETRUCO,
    TrucoCall.VALE_CUATRO,
]

TRUCO_VALUES: dict[TrucoCall, int] = {
    TrucoCall.NONE: 1,
    TrucoCall.TRUCO: 2,
    TrucoCall.RETRUCO: 3,
    TrucoCall.VALE_CUATRO: 4,
}

# Awarded to the caller when the opponent refuses, whatever the stake.
REJECTED_TRUCO_POINTS = 1


def truco_value(call: TrucoCall) -> int:
    return TRUCO_VALUES[call]


def is_next_call(current: TrucoCall, requested: TrucoCall) -> bool:
    """True if ``requested`` raises ``current`` by exactly one step."""
    return CALL_ORDER.index(requested) == CALL_ORDER.index(current) + 1


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Player:
    id: str
    name: str
    hand: List[Card] = field(default_factory=list)
    score: int = 0
    is_ready: bool = False
    is_active: bool = False


@dataclass
class Team:
    id: str
    name: str
    players: List[Player]

    @property
    def score(self) -> int:
        return sum(player.score for player in self.players)


@dataclass
class Round:
    number: int
    id: str = field(default_factory=_new_id)
    tricks: List[Trick] = field(default_factory=list)
    current_trick: Optional[Trick] = None
    truco_call: TrucoCall = TrucoCall.NONE
    truco_value: int = 1
    called_by: Optional[str] = None
    accepted_by: Optional[str] = None

    def completed_tricks(self) -> List[Trick]:
        return [trick for trick in self.tricks if trick.is_complete]

    def trick_wins(self) -> Dict[str, int]:
        wins: Dict[str, int] = {}
        for trick in self.completed_tricks():
            if trick.winner is not None:
                wins[trick.winner] = wins.get(trick.winner, 0) + 1
        return wins

    def is_complete(self) -> bool:
        """Someone has taken two tricks, or three tricks have been played."""
        if len(self.tricks) < 2:
            return False
        wins = self.trick_wins()
        return max(wins.values(), default=0) >= 2 or len(self.tricks) >= 3

    def leader(self) -> Optional[str]:
        """Player with the most trick wins; the first to reach that count wins ties."""
        counts: Dict[str, int] = {}
        best: Optional[str] = None
        best_count = 0
        for trick in self.completed_tricks():
            if trick.winner is None:
                continue
            counts[trick.winner] = counts.get(trick.winner, 0) + 1
            if counts[trick.winner] > best_count:
                best_count = counts[trick.winner]
                best = trick.winner
        return best

    def cards_played_by(self, player_id: str) -> int:
        return sum(
            1 for trick in self.tricks for play in trick.cards_played if play.player_id == player_id
        )


@dataclass
class GameState:
    max_score: int
    id: str = field(default_factory=_new_id)
    phase: GamePhase = GamePhase.WAITING
    players: List[Player] = field(default_factory=list)
    teams: List[Team] = field(default_factory=list)
    deck: List[Card] = field(default_factory=list)
    current_round: Optional[Round] = None
    rounds: List[Round] = field(default_factory=list)
    current_player_index: int = 0
    created_at: float = field(default_factory=time.time)
    updated_at: float = field(default_factory=time.time)

    @property
    def current_player(self) -> Optional[Player]:
        if 0 <= self.current_player_index < len(self.players):
            return self.players[self.current_player_index]
        return None

    @property
    def active_player(self) -> Optional[Player]:
        return next((player for player in self.players if player.is_active), None)

    def get_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def seat_of(self, player_id: str) -> int:
        for index, player in enumerate(self.players):
            if player.id == player_id:
                return index
        return -1
