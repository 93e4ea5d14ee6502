"""Domain events and the listener registry that delivers them."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class EventType(Enum):
    PLAYER_JOINED = "player_joined"
    PLAYER_LEFT = "player_left"
    PLAYER_READY_CHANGED = "player_ready_changed"
    GAME_STARTED = "game_started"
    ROUND_STARTED = "round_started"
    TRICK_STARTED = "trick_started"
    CARD_PLAYED = "card_played"
    TRICK_COMPLETED = "trick_completed"
    ROUND_COMPLETED = "round_completed"
    GAME_ENDED = "game_ended"
    TURN_CHANGED = "turn_changed"
    TRUCO_CALLED = "truco_called"
    TRUCO_ACCEPTED = "truco_accepted"
    TRUCO_REJECTED = "truco_rejected"
    GAME_ERROR = "game_error"


@dataclass(frozen=True)
class GameEvent:
    type: EventType
    payload: Dict[str, Any]
    timestamp: float = field(default_factory=time.time)
    player_id: Optional[str] = None


Listener = Callable[[GameEvent], None]


class EventBus:
    """Synchronous observer registry.

    Listeners run inline, in registration order, before ``emit`` returns.
    """

    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._listeners = [registered for registered in self._listeners if registered != listener]

    def emit(self, event: GameEvent) -> None:
        # Snapshot so a listener may unsubscribe itself mid-delivery.
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Listener %r failed on %s", listener, event.type.value)
