from __future__ import annotations

from typing import Callable, List

import pytest

from truco.actions import Action
from truco.config import create_custom_config
from truco.events import GameEvent
from truco.game import GameEngine


class ManualTask:
    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Collect scheduled callbacks and fire them only when asked."""

    def __init__(self) -> None:
        self.tasks: List[ManualTask] = []

    def schedule(self, delay: float, callback: Callable[[], None]) -> ManualTask:
        task = ManualTask(delay, callback)
        self.tasks.append(task)
        return task

    def pending(self) -> List[ManualTask]:
        return [task for task in self.tasks if not task.cancelled]

    def run_pending(self) -> None:
        for task in self.pending():
            task.cancelled = True
            task.callback()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def two_player_config():
    return create_custom_config(min_players=2, max_players=2, max_score=15, hand_size=3, deck_type="spanish")


@pytest.fixture
def engine(two_player_config, scheduler):
    game = GameEngine(two_player_config, seed=7, scheduler=scheduler)
    yield game
    game.close()


@pytest.fixture
def events(engine) -> List[GameEvent]:
    received: List[GameEvent] = []
    engine.add_listener(received.append)
    return received


def _seat(engine: GameEngine, *player_ids: str) -> None:
    for player_id in player_ids:
        engine.dispatch(Action.join(player_id, name=player_id.upper()))
        engine.dispatch(Action.ready(player_id))


@pytest.fixture
def seat_players():
    """Join and ready each id on the given engine."""
    return _seat


@pytest.fixture
def started(engine):
    _seat(engine, "p1", "p2")
    engine.dispatch(Action.start("p1"))
    return engine
