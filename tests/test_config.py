import json

import pytest
from pydantic import ValidationError

from truco.config import (
    DEFAULT_TRUCO_CONFIG,
    GameConfig,
    create_custom_config,
    get_game_config,
    load_config,
    validate_game_config,
)
from truco.errors import InvalidConfig
from truco.game import GameEngine


@pytest.mark.parametrize("name", ["default", "team", "quick", "extended", "poker", "bridge"])
def test_presets_are_valid(name):
    result = validate_game_config(get_game_config(name))
    assert result.is_valid, result.errors


def test_unknown_preset_falls_back_to_default():
    assert get_game_config("no-such-table") == DEFAULT_TRUCO_CONFIG


def test_custom_config_overlays_default():
    config = create_custom_config(min_players=2, max_players=2, max_score=9)

    assert config.max_score == 9
    assert config.hand_size == DEFAULT_TRUCO_CONFIG.hand_size
    assert config.deck_type == "spanish"


def test_config_is_immutable():
    with pytest.raises(ValidationError):
        DEFAULT_TRUCO_CONFIG.max_score = 1


def test_unknown_deck_type_is_a_type_error():
    with pytest.raises(ValidationError):
        create_custom_config(deck_type="tarot")


def test_validation_collects_every_error():
    config = GameConfig(max_players=3, min_players=0, max_score=0, use_teams=True, hand_size=0)

    result = validate_game_config(config)

    assert not result.is_valid
    assert len(result.errors) == 4


def test_validation_checks_deck_capacity():
    config = create_custom_config(max_players=6, hand_size=7)
    result = validate_game_config(config)
    assert not result.is_valid
    assert "40 cards" in result.errors[0]


def test_engine_rejects_invalid_config():
    with pytest.raises(InvalidConfig) as excinfo:
        GameEngine(create_custom_config(min_players=3, max_players=2))
    assert excinfo.value.errors


def test_load_config_sources(tmp_path):
    assert load_config("quick") == get_game_config("quick")
    assert load_config({"preset": "team", "max_score": 30}).max_score == 30

    path = tmp_path / "table.json"
    path.write_text(json.dumps({"preset": "quick", "hand_size": 4}), encoding="utf-8")
    config = load_config(path)
    assert config.hand_size == 4
    assert config.max_score == get_game_config("quick").max_score
