"""Trick representation and resolution."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from .cards import Card
from .deck import find_winning_card


class TrickError(RuntimeError):
    """Raised when trick play breaks ordering constraints."""


@dataclass(frozen=True)
class PlayedCard:
    card: Card
    player_id: str
    timestamp: float = field(default_factory=time.time)


@dataclass
class Trick:
    number: int
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    cards_played: List[PlayedCard] = field(default_factory=list)
    winner: Optional[str] = None
    is_complete: bool = False

    def is_empty(self) -> bool:
        return not self.cards_played

    def has_played(self, player_id: str) -> bool:
        return any(play.player_id == player_id for play in self.cards_played)

    def add_play(self, player_id: str, card: Card) -> PlayedCard:
        if self.is_complete:
            raise TrickError("Trick already complete.")
        if self.has_played(player_id):
            raise TrickError("Player cannot play twice in the same trick.")
        play = PlayedCard(card=card, player_id=player_id)
        self.cards_played.append(play)
        return play

    def winning_play(self, eligible: Optional[Set[str]] = None) -> Tuple[str, Card]:
        plays = self.cards_played
        if eligible is not None:
            plays = [play for play in plays if play.player_id in eligible]
        result = find_winning_card((play.player_id, play.card) for play in plays)
        if result is None:
            raise TrickError("Cannot determine winner on empty trick.")
        return result

    def complete(self, eligible: Optional[Set[str]] = None) -> str:
        """Close the trick. Only plays from ``eligible`` players can win when it is given."""
        winner, _ = self.winning_play(eligible)
        self.winner = winner
        self.is_complete = True
        return winner
