#!/usr/bin/env python3
"""Play a seeded Truco match from the command line, always leading with the first card in hand."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from truco.actions import Action
from truco.cards import card_label, deserialize_card
from truco.config import load_config
from truco.errors import InvalidConfig
from truco.events import EventType, GameEvent
from truco.game import GameEngine
from truco.scheduling import ImmediateScheduler
from truco.state import GamePhase


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulate a Truco match between scripted seats.")
    parser.add_argument("--preset", default="default", help="Preset name or path to a JSON config.")
    parser.add_argument("--players", type=int, default=2, help="Number of seats to fill.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for shuffling.")
    parser.add_argument("--max-actions", type=int, default=2000, help="Safety cap on dispatched plays.")
    parser.add_argument("--log-level", default="WARNING", help="Logging level for the engine.")
    return parser.parse_args()


def print_event(event: GameEvent) -> None:
    payload = event.payload
    if event.type is EventType.CARD_PLAYED:
        print(f"  {payload['playerId']} plays {card_label(deserialize_card(payload['card']))}")
    elif event.type is EventType.TRICK_COMPLETED:
        print(f"  trick {payload['trick'].number} -> {payload['winnerId']}")
    elif event.type is EventType.ROUND_STARTED:
        print(f"Round {payload['round'].number}")
    elif event.type is EventType.ROUND_COMPLETED:
        print(f"  round won by {payload['winnerId']} (+{payload['points']})")
    elif event.type is EventType.GAME_ENDED:
        scores = ", ".join(f"{entry['id']}={entry['score']}" for entry in payload["finalScores"])
        print(f"Game over. Winner: {payload['winner']} [{scores}]")
    elif event.type is EventType.GAME_ERROR:
        print(f"  error {payload['code']}: {payload['message']}")


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        engine = GameEngine(load_config(args.preset), seed=args.seed, scheduler=ImmediateScheduler())
    except InvalidConfig as exc:
        print(f"Invalid configuration: {exc}")
        sys.exit(1)

    engine.add_listener(print_event)
    seats = [f"p{i + 1}" for i in range(args.players)]
    for seat in seats:
        engine.dispatch(Action.join(seat))
        engine.dispatch(Action.ready(seat))
    engine.dispatch(Action.start(seats[0]))

    for _ in range(args.max_actions):
        state = engine.get_state()
        if state.phase != GamePhase.PLAYING:
            break
        player = state.active_player
        if player is None or not player.hand:
            break
        engine.dispatch(Action.play_card(player.id, player.hand[0].id))

    engine.close()
    if engine.get_state().phase != GamePhase.GAME_END:
        sys.exit(1)


if __name__ == "__main__":
    main()
