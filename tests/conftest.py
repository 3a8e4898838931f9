from __future__ import annotations

import os
import random

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from snake.config import Config
from snake.engine import Direction, SnakeEngine
from snake.scores import MemoryBestScoreStore


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("SNAKE_BEST_SCORE_PATH", "SNAKE_LOG_LEVEL", "SNAKE_SEED"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def store() -> MemoryBestScoreStore:
    return MemoryBestScoreStore()


@pytest.fixture
def engine(store: MemoryBestScoreStore) -> SnakeEngine:
    return SnakeEngine(Config(seed=7), store, random.Random(7))


@pytest.fixture
def force_state():
    """Overwrite the live session's board so a test can stage an exact position."""

    def _force(engine: SnakeEngine, snake, direction: Direction, food, obstacles=()) -> None:
        s = engine._session
        s.snake = list(snake)
        s.direction = direction
        s.pending = direction
        s.food = food
        s.obstacles = tuple(obstacles)
        s.obstacle_set = set(obstacles)

    return _force
