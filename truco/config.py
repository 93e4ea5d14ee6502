"""Table configuration: presets, overrides and validation."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field

from .deck import NOMINAL_DECK_SIZES


class GameConfig(BaseModel):
    """Immutable table settings handed to the engine at construction."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_players: int = Field(description="Seats available at the table.")
    min_players: int = Field(description="Players required before the game can start.")
    max_score: int = Field(description="Score that ends the game.")
    use_teams: bool = Field(False, description="Split seats into two alternating teams.")
    deck_type: Literal["spanish", "french"] = Field("spanish", description="Deck used for every deal.")
    hand_size: int = Field(3, description="Cards dealt to each player per round.")


DEFAULT_TRUCO_CONFIG = GameConfig(
    max_players=6, min_players=2, max_score=15, use_teams=False, deck_type="spanish", hand_size=3
)
TEAM_TRUCO_CONFIG = GameConfig(
    max_players=4, min_players=4, max_score=15, use_teams=True, deck_type="spanish", hand_size=3
)
QUICK_TRUCO_CONFIG = GameConfig(
    max_players=4, min_players=2, max_score=9, use_teams=False, deck_type="spanish", hand_size=3
)
EXTENDED_TRUCO_CONFIG = GameConfig(
    max_players=6, min_players=2, max_score=30, use_teams=False, deck_type="spanish", hand_size=3
)
POKER_STYLE_CONFIG = GameConfig(
    max_players=8, min_players=2, max_score=100, use_teams=False, deck_type="french", hand_size=5
)
BRIDGE_STYLE_CONFIG = GameConfig(
    max_players=4, min_players=4, max_score=500, use_teams=True, deck_type="french", hand_size=13
)

PRESETS: dict[str, GameConfig] = {
    "default": DEFAULT_TRUCO_CONFIG,
    "team": TEAM_TRUCO_CONFIG,
    "quick": QUICK_TRUCO_CONFIG,
    "extended": EXTENDED_TRUCO_CONFIG,
    "poker": POKER_STYLE_CONFIG,
    "bridge": BRIDGE_STYLE_CONFIG,
}


@dataclass(frozen=True)
class ConfigValidation:
    is_valid: bool
    errors: list[str] = field(default_factory=list)


def get_game_config(name: str) -> GameConfig:
    """Return the preset called ``name``, or the default preset for unknown names."""
    return PRESETS.get(name, DEFAULT_TRUCO_CONFIG)


def validate_game_config(config: GameConfig) -> ConfigValidation:
    errors: list[str] = []

    if config.min_players < 1:
        errors.append("Minimum players must be at least 1")
    if config.max_players < config.min_players:
        errors.append("Maximum players must be greater than or equal to minimum players")
    if config.max_score <= 0:
        errors.append("Maximum score must be greater than 0")
    if config.hand_size <= 0:
        errors.append("Hand size must be greater than 0")
    if config.use_teams and config.max_players % 2 != 0:
        errors.append("Team games require an even number of players")

    available = NOMINAL_DECK_SIZES[config.deck_type]
    if config.hand_size * config.max_players > available:
        errors.append(
            f"{config.deck_type.title()} deck has only {available} cards - not enough for this configuration"
        )

    return ConfigValidation(is_valid=not errors, errors=errors)


def create_custom_config(**overrides: Any) -> GameConfig:
    """Overlay ``overrides`` onto the default preset."""
    return GameConfig(**{**DEFAULT_TRUCO_CONFIG.model_dump(), **overrides})


def load_config(source: Union[str, Path, Mapping[str, Any], GameConfig, None] = None) -> GameConfig:
    """Resolve a config from a preset name, a mapping of overrides or a JSON file.

    A JSON file may carry a ``"preset"`` key; the remaining keys override it.
    """
    if source is None:
        return DEFAULT_TRUCO_CONFIG
    if isinstance(source, GameConfig):
        return source
    if isinstance(source, Mapping):
        return _from_mapping(source)

    path = Path(source)
    if path.suffix == ".json" and path.is_file():
        with path.open("r", encoding="utf-8") as handle:
            return _from_mapping(json.load(handle))
    return get_game_config(str(source))


def _from_mapping(values: Mapping[str, Any]) -> GameConfig:
    overrides = dict(values)
    base = get_game_config(overrides.pop("preset", "default"))
    return GameConfig(**{**base.model_dump(), **overrides})
