from __future__ import annotations

from pathlib import Path

import pytest

from snake.config import DEFAULT_BEST_SCORE_PATH, Config, load_config
from snake.errors import ConfigError


def test_defaults() -> None:
    cfg = load_config()
    assert cfg.grid_size == 20
    assert cfg.tick_ms == {"slow": 200, "medium": 150, "fast": 100}
    assert cfg.food_reward == 10
    assert cfg.obstacle_cap == 10
    assert cfg.placement_attempts == 100
    assert cfg.best_score_path == DEFAULT_BEST_SCORE_PATH
    assert cfg.seed is None
    assert cfg.log_level == "INFO"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SNAKE_BEST_SCORE_PATH", str(tmp_path / "best.json"))
    monkeypatch.setenv("SNAKE_LOG_LEVEL", "debug")
    monkeypatch.setenv("SNAKE_SEED", "42")

    cfg = load_config()
    assert cfg.best_score_path == tmp_path / "best.json"
    assert cfg.log_level == "DEBUG"
    assert cfg.seed == 42


def test_explicit_overrides_beat_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SNAKE_SEED", "42")
    cfg = load_config(seed=3, best_score_path=str(tmp_path / "x.json"), log_level=None)
    assert cfg.seed == 3
    assert cfg.best_score_path == tmp_path / "x.json"
    assert cfg.log_level == "INFO"


def test_bad_seed_in_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SNAKE_SEED", "abc")
    with pytest.raises(ConfigError):
        load_config()


def test_unknown_override() -> None:
    with pytest.raises(ConfigError, match="colour"):
        load_config(colour="green")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"grid_size": 1},
        {"tick_ms": {"slow": 200, "medium": 0, "fast": 100}},
        {"tick_ms": {"slow": 200}},
        {"food_reward": 0},
        {"obstacle_cap": -1},
        {"level_max": 0},
        {"placement_attempts": 0},
    ],
)
def test_validation(kwargs) -> None:
    with pytest.raises(ConfigError):
        Config(**kwargs).validate()
