"""Game engine: the single owner of a Truco table's state."""

from __future__ import annotations

import copy
import logging
import threading
import time
from random import Random
from typing import Any, Callable, Dict, List, Optional

from .actions import Action, ActionType
from .cards import Card, serialize_card
from .config import GameConfig, validate_game_config
from .deck import create_deck, deal_cards, deck_size, remove_card_from_hand, shuffle_deck
from .errors import ErrorCode, GameError, InvalidConfig
from .events import EventBus, EventType, GameEvent, Listener
from .scheduling import ScheduledTask, Scheduler, ThreadingScheduler
from .state import (
    REJECTED_TRUCO_POINTS,
    GamePhase,
    GameState,
    Player,
    Round,
    Team,
    TrucoCall,
    is_next_call,
    truco_value,
)
from .trick import Trick

logger = logging.getLogger(__name__)

ROUND_DELAY_SECONDS = 2.0


class GameEngine:
    """Validate and apply actions against one table, emitting events for each change.

    ``dispatch`` never raises: rejected actions surface as ``game_error``
    events and leave the state untouched. After a round completes the next
    one starts on its own after ``round_delay`` seconds via ``scheduler``.
    """

    def __init__(
        self,
        config: GameConfig,
        *,
        rng: Optional[Random] = None,
        seed: Optional[int] = None,
        scheduler: Optional[Scheduler] = None,
        round_delay: float = ROUND_DELAY_SECONDS,
    ) -> None:
        validation = validate_game_config(config)
        if not validation.is_valid:
            raise InvalidConfig(validation.errors)

        self.config = config
        self.rng = rng if rng is not None else Random(seed)
        self.scheduler: Scheduler = scheduler or ThreadingScheduler()
        self.round_delay = round_delay

        self._state = GameState(max_score=config.max_score)
        self._bus = EventBus()
        self._lock = threading.RLock()
        self._pending_task: Optional[ScheduledTask] = None
        self._closed = False

        self._handlers: Dict[ActionType, Callable[[Action], None]] = {
            ActionType.JOIN_GAME: self._handle_join_game,
            ActionType.LEAVE_GAME: self._handle_leave_game,
            ActionType.READY_PLAYER: self._handle_ready_player,
            ActionType.START_GAME: self._handle_start_game,
            ActionType.PLAY_CARD: self._handle_play_card,
            ActionType.CALL_TRUCO: self._handle_call_truco,
            ActionType.ACCEPT_TRUCO: self._handle_accept_truco,
            ActionType.REJECT_TRUCO: self._handle_reject_truco,
        }
        missing = set(ActionType) - set(self._handlers)
        assert not missing, f"Unhandled action types: {missing}"

    # Public API --------------------------------------------------------

    def get_state(self) -> GameState:
        """Shallow snapshot of the state. Nested objects are shared; do not mutate them."""
        with self._lock:
            return copy.copy(self._state)

    def add_listener(self, listener: Listener) -> None:
        self._bus.subscribe(listener)

    def remove_listener(self, listener: Listener) -> None:
        self._bus.unsubscribe(listener)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def has_pending_round(self) -> bool:
        return self._pending_task is not None

    def dispatch(self, action: Action) -> None:
        with self._lock:
            logger.debug("Dispatching %s from %s", action.type, action.player_id)
            try:
                action_type = self._resolve_type(action)
                self._handlers[action_type](action)
                self._state.updated_at = time.time()
            except GameError as exc:
                logger.warning("Rejected %s from %s: %s (%s)", action.type, action.player_id, exc.message, exc.code)
                self._emit(
                    EventType.GAME_ERROR,
                    {"message": exc.message, "code": exc.code},
                    exc.player_id,
                )
            except Exception:
                logger.exception("Unexpected failure while handling %s", action.type)
                self._emit(
                    EventType.GAME_ERROR,
                    {"message": "Unknown error occurred", "code": ErrorCode.UNKNOWN},
                    action.player_id,
                )

    def close(self) -> None:
        """Tear the engine down; a pending round start becomes a no-op."""
        with self._lock:
            self._closed = True
            self._cancel_pending_round()

    # Action handlers ---------------------------------------------------

    def _resolve_type(self, action: Action) -> ActionType:
        if isinstance(action.type, ActionType):
            return action.type
        try:
            return ActionType(action.type)
        except ValueError:
            raise GameError(
                f"Unknown action type: {action.type}", ErrorCode.INVALID_ACTION, action.player_id
            ) from None

    def _handle_join_game(self, action: Action) -> None:
        state = self._state
        player_id = action.player_id
        if state.phase != GamePhase.WAITING:
            raise GameError("Cannot join game that has already started", ErrorCode.GAME_IN_PROGRESS, player_id)
        if len(state.players) >= self.config.max_players:
            raise GameError("Game is full", ErrorCode.GAME_FULL, player_id)
        if state.get_player(player_id) is not None:
            raise GameError("Player already in game", ErrorCode.PLAYER_EXISTS, player_id)

        player = Player(id=player_id, name=str(action.data.get("name") or player_id))
        state.players.append(player)
        self._emit(EventType.PLAYER_JOINED, {"player": player})
        self._update_teams()

    def _handle_leave_game(self, action: Action) -> None:
        state = self._state
        player_id = action.player_id
        seat = state.seat_of(player_id)
        if seat == -1:
            raise GameError("Player not in game", ErrorCode.PLAYER_NOT_FOUND, player_id)

        active = state.active_player
        state.players.pop(seat)

        if active is not None and active.id != player_id:
            state.current_player_index = state.seat_of(active.id)
        elif state.current_player_index >= len(state.players):
            state.current_player_index = 0

        self._emit(EventType.PLAYER_LEFT, {"playerId": player_id})

        in_progress = state.phase in (GamePhase.PLAYING, GamePhase.ROUND_END)
        if len(state.players) < self.config.min_players and in_progress:
            self._end_game("Not enough players")
        elif state.phase == GamePhase.PLAYING and state.active_player is None:
            self._resume_after_departure()

        self._update_teams()

    def _handle_ready_player(self, action: Action) -> None:
        player = self._require_player(action.player_id)
        player.is_ready = not player.is_ready
        self._emit(EventType.PLAYER_READY_CHANGED, {"playerId": player.id, "isReady": player.is_ready})

    def _handle_start_game(self, action: Action) -> None:
        state = self._state
        player_id = action.player_id
        if state.phase != GamePhase.WAITING:
            raise GameError("Game already started", ErrorCode.GAME_IN_PROGRESS, player_id)
        if len(state.players) < self.config.min_players:
            raise GameError("Not enough players", ErrorCode.NOT_ENOUGH_PLAYERS, player_id)
        if not all(player.is_ready for player in state.players):
            raise GameError("Not all players are ready", ErrorCode.PLAYERS_NOT_READY, player_id)
        needed = len(state.players) * self.config.hand_size
        if needed > deck_size(self.config.deck_type):
            raise GameError(
                f"The {self.config.deck_type} deck cannot deal {needed} cards",
                ErrorCode.NOT_ENOUGH_CARDS,
                player_id,
            )

        logger.info("Game %s starting with %d players", state.id, len(state.players))
        self._start_new_round()
        self._emit(EventType.GAME_STARTED, {})

    def _handle_play_card(self, action: Action) -> None:
        state = self._state
        player_id = action.player_id
        if state.phase != GamePhase.PLAYING:
            raise GameError("Game not in playing phase", ErrorCode.INVALID_PHASE, player_id)
        player = self._require_player(player_id)
        if not player.is_active:
            raise GameError("Not your turn", ErrorCode.NOT_YOUR_TURN, player_id)
        card_id = action.data.get("card_id", action.data.get("cardId"))
        card = next((held for held in player.hand if held.id == card_id), None)
        if card is None:
            raise GameError("Card not in hand", ErrorCode.INVALID_CARD, player_id)
        if state.current_round is None or state.current_round.current_trick is None:
            raise GameError("No active trick", ErrorCode.NO_ACTIVE_TRICK, player_id)

        self._play_card(player, card)

    def _handle_call_truco(self, action: Action) -> None:
        player_id = action.player_id
        round_ = self._require_active_round(player_id)
        self._require_player(player_id)
        try:
            call = TrucoCall(action.data.get("call"))
        except ValueError:
            raise GameError("Invalid truco call", ErrorCode.INVALID_TRUCO_CALL, player_id) from None
        if not is_next_call(round_.truco_call, call):
            raise GameError("Invalid truco call", ErrorCode.INVALID_TRUCO_CALL, player_id)

        round_.truco_call = call
        round_.called_by = player_id
        round_.truco_value = truco_value(call)
        logger.info("Round %d raised to %s by %s", round_.number, call.value, player_id)
        self._emit(
            EventType.TRUCO_CALLED,
            {"playerId": player_id, "call": call.value, "value": round_.truco_value},
        )

    def _handle_accept_truco(self, action: Action) -> None:
        round_ = self._require_active_round(action.player_id)
        round_.accepted_by = action.player_id
        self._emit(EventType.TRUCO_ACCEPTED, {"playerId": action.player_id, "value": round_.truco_value})

    def _handle_reject_truco(self, action: Action) -> None:
        round_ = self._require_active_round(action.player_id)
        if round_.called_by is not None:
            caller = self._state.get_player(round_.called_by)
            if caller is not None:
                caller.score += REJECTED_TRUCO_POINTS
        self._emit(EventType.TRUCO_REJECTED, {"playerId": action.player_id})
        self._complete_round()

    # Validation helpers ------------------------------------------------

    def _require_player(self, player_id: str) -> Player:
        player = self._state.get_player(player_id)
        if player is None:
            raise GameError("Player not found", ErrorCode.PLAYER_NOT_FOUND, player_id)
        return player

    def _require_active_round(self, player_id: str) -> Round:
        round_ = self._state.current_round
        if round_ is None or self._state.phase != GamePhase.PLAYING:
            raise GameError("No active round", ErrorCode.NO_ACTIVE_ROUND, player_id)
        return round_

    # State machine -----------------------------------------------------

    def _start_new_round(self) -> None:
        """Deal a fresh round and open its first trick.

        Emits ``round_started`` before ``trick_started`` so listeners see the
        round a trick belongs to before the trick itself. On game start both
        precede ``game_started``.
        """
        state = self._state
        state.phase = GamePhase.DEALING

        new_round = Round(number=len(state.rounds) + 1)
        state.deck = shuffle_deck(create_deck(self.config.deck_type), self.rng)
        hands, remaining = deal_cards(state.deck, len(state.players), self.config.hand_size, rng=self.rng)
        for player, hand in zip(state.players, hands):
            player.hand = hand
        state.deck = remaining

        state.current_round = new_round
        state.rounds.append(new_round)
        state.phase = GamePhase.PLAYING
        logger.info("Round %d dealt", new_round.number)

        self._emit(EventType.ROUND_STARTED, {"round": new_round})
        self._start_new_trick()

    def _start_new_trick(self) -> None:
        round_ = self._state.current_round
        if round_ is None:
            return
        trick = Trick(number=len(round_.tricks) + 1)
        round_.tricks.append(trick)
        round_.current_trick = trick
        self._activate_current_player()
        self._emit(EventType.TRICK_STARTED, {"trick": trick})

    def _play_card(self, player: Player, card: Card) -> None:
        round_ = self._state.current_round
        assert round_ is not None and round_.current_trick is not None
        trick = round_.current_trick

        trick.add_play(player.id, card)
        player.hand = remove_card_from_hand(card, player.hand)
        player.is_active = False
        self._emit(
            EventType.CARD_PLAYED,
            {"playerId": player.id, "card": serialize_card(card), "trick": trick},
            player.id,
        )

        if self._all_seated_played(trick):
            self._complete_trick()
        else:
            self._next_player()

    def _complete_trick(self) -> None:
        state = self._state
        round_ = state.current_round
        assert round_ is not None and round_.current_trick is not None
        trick = round_.current_trick

        # Cards left behind by departed players stay on the table but cannot take the trick.
        winner_id = trick.complete(eligible={player.id for player in state.players})
        seat = state.seat_of(winner_id)
        if seat != -1:
            state.current_player_index = seat
        self._emit(EventType.TRICK_COMPLETED, {"trick": trick, "winnerId": winner_id})

        if round_.is_complete():
            self._complete_round()
        else:
            self._start_new_trick()

    def _complete_round(self) -> None:
        state = self._state
        round_ = state.current_round
        if round_ is None:
            return
        state.phase = GamePhase.ROUND_END
        for player in state.players:
            player.is_active = False

        winner_id = round_.leader()
        if winner_id is not None:
            winner = state.get_player(winner_id)
            if winner is not None:
                winner.score += round_.truco_value
        self._update_teams()

        logger.info("Round %d won by %s for %d point(s)", round_.number, winner_id, round_.truco_value)
        self._emit(
            EventType.ROUND_COMPLETED,
            {"round": round_, "winnerId": winner_id, "points": round_.truco_value},
        )

        if any(player.score >= state.max_score for player in state.players):
            self._end_game()
        else:
            self._schedule_next_round(round_.number)

    def _end_game(self, reason: Optional[str] = None) -> None:
        state = self._state
        state.phase = GamePhase.GAME_END
        self._cancel_pending_round()
        for player in state.players:
            player.is_active = False

        winner: Optional[Player] = None
        for player in state.players:
            if winner is None or player.score > winner.score:
                winner = player

        logger.info("Game %s ended (%s), winner %s", state.id, reason or "score reached", winner and winner.id)
        self._emit(
            EventType.GAME_ENDED,
            {
                "winner": winner.id if winner else None,
                "finalScores": [
                    {"id": player.id, "name": player.name, "score": player.score} for player in state.players
                ],
                "reason": reason,
            },
        )

    def _next_player(self) -> None:
        state = self._state
        state.current_player_index = (state.current_player_index + 1) % len(state.players)
        self._hand_turn_to_unplayed_seat()

    def _activate_current_player(self) -> Optional[Player]:
        for player in self._state.players:
            player.is_active = False
        current = self._state.current_player
        if current is not None:
            current.is_active = True
        return current

    def _all_seated_played(self, trick: Trick) -> bool:
        seated = {player.id for player in self._state.players}
        return bool(seated) and seated.issubset(play.player_id for play in trick.cards_played)

    def _hand_turn_to_unplayed_seat(self) -> None:
        """Move the turn forward from the current seat to the first one still owing a card."""
        state = self._state
        round_ = state.current_round
        trick = round_.current_trick if round_ is not None else None
        if trick is not None:
            for _ in range(len(state.players)):
                current = state.current_player
                if current is not None and not trick.has_played(current.id):
                    break
                state.current_player_index = (state.current_player_index + 1) % len(state.players)
        current = self._activate_current_player()
        self._emit(EventType.TURN_CHANGED, {"currentPlayerId": current.id if current else None})

    def _resume_after_departure(self) -> None:
        round_ = self._state.current_round
        if round_ is None or round_.current_trick is None:
            return
        if self._all_seated_played(round_.current_trick):
            self._complete_trick()
        else:
            self._hand_turn_to_unplayed_seat()

    def _update_teams(self) -> None:
        if not self.config.use_teams:
            return
        players = self._state.players
        teams: List[Team] = []
        for index, name in enumerate(("Team 1", "Team 2")):
            members = players[index::2]
            if members:
                teams.append(Team(id=f"team{index + 1}", name=name, players=members))
        self._state.teams = teams

    # Round pacing ------------------------------------------------------

    def _schedule_next_round(self, finished_round: int) -> None:
        self._cancel_pending_round()
        if self._closed:
            return
        task = self.scheduler.schedule(self.round_delay, lambda: self._start_scheduled_round(finished_round))
        # Synchronous schedulers may already have started the next round.
        if self._state.phase == GamePhase.ROUND_END and len(self._state.rounds) == finished_round:
            self._pending_task = task

    def _start_scheduled_round(self, finished_round: int) -> None:
        with self._lock:
            if self._closed:
                return
            state = self._state
            if state.phase != GamePhase.ROUND_END or len(state.rounds) != finished_round:
                return
            self._pending_task = None
            try:
                self._start_new_round()
                state.updated_at = time.time()
            except Exception:
                logger.exception("Failed to start round %d", finished_round + 1)
                self._emit(
                    EventType.GAME_ERROR,
                    {"message": "Unknown error occurred", "code": ErrorCode.UNKNOWN},
                )

    def _cancel_pending_round(self) -> None:
        if self._pending_task is not None:
            self._pending_task.cancel()
            self._pending_task = None

    # Events ------------------------------------------------------------

    def _emit(self, event_type: EventType, payload: Dict[str, Any], player_id: Optional[str] = None) -> None:
        self._bus.emit(GameEvent(type=event_type, payload=payload, player_id=player_id))
