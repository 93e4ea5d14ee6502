"""Convenience service layer for UI consumers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .actions import Action
from .cards import Card, card_label, serialize_card
from .config import GameConfig, load_config
from .events import EventType, GameEvent
from .game import GameEngine
from .state import Round
from .trick import Trick

# Events after which a previously shown error is stale.
_CLEARS_ERROR = {
    EventType.PLAYER_JOINED,
    EventType.PLAYER_LEFT,
    EventType.GAME_STARTED,
    EventType.ROUND_STARTED,
    EventType.CARD_PLAYED,
    EventType.TRICK_COMPLETED,
    EventType.ROUND_COMPLETED,
    EventType.GAME_ENDED,
}


@dataclass
class PlayView:
    player_id: str
    card: dict
    label: str


@dataclass
class TrickView:
    number: int
    plays: list[PlayView]
    winner: Optional[str]
    is_complete: bool


@dataclass
class SeatView:
    id: str
    name: str
    score: int
    cards_in_hand: int
    is_ready: bool
    is_active: bool


@dataclass
class TeamView:
    id: str
    name: str
    player_ids: list[str]
    score: int


@dataclass
class TableView:
    phase: str
    round_number: Optional[int]
    truco_call: Optional[str]
    truco_value: Optional[int]
    called_by: Optional[str]
    current_player: Optional[str]
    seats: list[SeatView]
    teams: list[TeamView]
    hand: list[dict]
    hand_labels: list[str]
    trick: Optional[TrickView]
    trick_history: list[TrickView]
    last_error: Optional[str]


class GameService:
    """Facade around a GameEngine for UI consumers.

    Keeps the latest error message the way a screen binding would and
    renders the table from one player's point of view.
    """

    def __init__(self, engine: GameEngine) -> None:
        self.engine = engine
        self.last_error: Optional[str] = None
        self.last_error_code: Optional[str] = None
        self.engine.add_listener(self._on_event)

    @classmethod
    def create(cls, config: GameConfig | str | None = None, **engine_options) -> GameService:
        return cls(GameEngine(load_config(config), **engine_options))

    def close(self) -> None:
        self.engine.remove_listener(self._on_event)
        self.engine.close()

    # Actions -----------------------------------------------------------

    def submit(self, action: Action) -> TableView:
        self.engine.dispatch(action)
        return self.get_table_view(action.player_id)

    def clear_error(self) -> None:
        self.last_error = None
        self.last_error_code = None

    # Views -------------------------------------------------------------

    def get_table_view(self, perspective: Optional[str] = None) -> TableView:
        state = self.engine.get_state()
        round_ = state.current_round
        viewer = state.get_player(perspective) if perspective else None
        hand: List[Card] = list(viewer.hand) if viewer else []
        active = state.active_player

        return TableView(
            phase=state.phase.value,
            round_number=round_.number if round_ else None,
            truco_call=round_.truco_call.value if round_ else None,
            truco_value=round_.truco_value if round_ else None,
            called_by=round_.called_by if round_ else None,
            current_player=active.id if active else None,
            seats=[
                SeatView(
                    id=player.id,
                    name=player.name,
                    score=player.score,
                    cards_in_hand=len(player.hand),
                    is_ready=player.is_ready,
                    is_active=player.is_active,
                )
                for player in state.players
            ],
            teams=[
                TeamView(
                    id=team.id,
                    name=team.name,
                    player_ids=[player.id for player in team.players],
                    score=team.score,
                )
                for team in state.teams
            ],
            hand=[serialize_card(card) for card in hand],
            hand_labels=[card_label(card) for card in hand],
            trick=self._trick_view(round_.current_trick) if round_ and round_.current_trick else None,
            trick_history=self._history(round_),
            last_error=self.last_error,
        )

    # Helpers -----------------------------------------------------------

    def _on_event(self, event: GameEvent) -> None:
        if event.type is EventType.GAME_ERROR:
            self.last_error = event.payload.get("message")
            self.last_error_code = event.payload.get("code")
        elif event.type in _CLEARS_ERROR:
            self.clear_error()

    @staticmethod
    def _trick_view(trick: Trick) -> TrickView:
        return TrickView(
            number=trick.number,
            plays=[
                PlayView(player_id=play.player_id, card=serialize_card(play.card), label=card_label(play.card))
                for play in trick.cards_played
            ],
            winner=trick.winner,
            is_complete=trick.is_complete,
        )

    def _history(self, round_: Optional[Round]) -> list[TrickView]:
        if round_ is None:
            return []
        return [self._trick_view(trick) for trick in round_.completed_tricks()]
