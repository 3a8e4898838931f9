from __future__ import annotations

import csv
import random
from pathlib import Path

import numpy as np
import pytest

from autopilot.env import OBS_DIM, left_of, observe, right_of, would_hit
from autopilot.policies import POLICIES, policy_eps_greedy, policy_greedy, policy_random
from autopilot.policies.greedy import best_move_toward_food
from autopilot.run import main, run_batch, run_episode, write_csv
from snake.config import Config
from snake.engine import Direction, Phase, SnakeEngine
from snake.scores import MemoryBestScoreStore


def _staged(engine: SnakeEngine, force_state, snake, direction, food, obstacles=()):
    engine.start("medium", 1)
    force_state(engine, snake, direction, food, obstacles)
    return engine.get_state()


def test_rotations() -> None:
    assert left_of(Direction.RIGHT) is Direction.UP
    assert right_of(Direction.RIGHT) is Direction.DOWN
    assert left_of(Direction.UP) is Direction.LEFT
    assert right_of(Direction.UP) is Direction.RIGHT
    for d in Direction:
        assert left_of(right_of(d)) is d


def test_observe_layout(engine: SnakeEngine, force_state) -> None:
    snap = _staged(engine, force_state, [(19, 0)], Direction.RIGHT, food=(0, 19), obstacles=[(18, 1)])
    obs = observe(snap)

    assert obs.shape == (OBS_DIM,)
    assert obs.dtype == np.float32
    assert obs[:4].tolist() == [1.0, 0.0, 0.0, 1.0]
    assert obs[4:6].tolist() == [1.0, 0.0]
    # wall ahead and to the left (up); right (down) is free
    assert obs[6:].tolist() == [1.0, 1.0, 0.0]


def test_obstacles_count_as_danger(engine: SnakeEngine, force_state) -> None:
    snap = _staged(engine, force_state, [(5, 5)], Direction.RIGHT, food=(0, 0), obstacles=[(6, 5)])
    assert would_hit(snap, Direction.RIGHT) is True
    assert would_hit(snap, Direction.UP) is False


def test_best_move_toward_food() -> None:
    prefs = best_move_toward_food((5, 5), (2, 9))
    assert prefs[:2] == [Direction.LEFT, Direction.DOWN]
    assert sorted(prefs, key=lambda d: d.name) == sorted(Direction, key=lambda d: d.name)


def test_greedy_heads_for_food(engine: SnakeEngine, force_state) -> None:
    snap = _staged(engine, force_state, [(5, 5)], Direction.RIGHT, food=(5, 2))
    assert policy_greedy(snap, np.random.default_rng(0)) is Direction.UP


def test_greedy_steers_around_obstacle(engine: SnakeEngine, force_state) -> None:
    snap = _staged(engine, force_state, [(5, 5)], Direction.RIGHT, food=(5, 2), obstacles=[(5, 4)])
    choice = policy_greedy(snap, np.random.default_rng(0))
    assert choice not in (Direction.UP, Direction.LEFT)
    assert not would_hit(snap, choice)


def test_greedy_never_reverses(engine: SnakeEngine, force_state) -> None:
    snap = _staged(engine, force_state, [(5, 5), (6, 5)], Direction.LEFT, food=(9, 5))
    assert policy_greedy(snap, np.random.default_rng(0)) is not Direction.RIGHT


def test_random_and_eps_greedy_return_directions(engine: SnakeEngine) -> None:
    engine.start("medium", 1)
    snap = engine.get_state()
    rng = np.random.default_rng(1)
    for _ in range(20):
        assert policy_random(snap, rng) in Direction
        assert policy_eps_greedy(snap, rng, epsilon=0.5) in Direction
    assert policy_eps_greedy(snap, rng, epsilon=0.0) is policy_greedy(snap, rng)


def test_run_episode_ends_in_collision_or_cap() -> None:
    engine = SnakeEngine(Config(seed=3), MemoryBestScoreStore(), random.Random(3))
    result = run_episode(engine, policy_greedy, np.random.default_rng(3), max_steps=2_000)

    assert 1 <= result.steps <= 2_000
    assert result.score % 10 == 0
    if result.collision is None:
        assert result.steps == 2_000
        assert engine.phase is Phase.RUNNING
    else:
        assert engine.phase is Phase.GAMEOVER
    assert engine.best_score == result.score


def test_run_episode_respects_step_cap() -> None:
    engine = SnakeEngine(Config(), MemoryBestScoreStore(), random.Random(0))
    result = run_episode(engine, policy_greedy, np.random.default_rng(0), max_steps=3)
    assert result.steps <= 3


def test_run_batch_unknown_policy() -> None:
    with pytest.raises(ValueError):
        run_batch(1, "dqn")


@pytest.mark.parametrize("name", sorted(POLICIES))
def test_run_batch_each_policy(name: str) -> None:
    results = run_batch(3, name, seed=5, max_steps=500)
    assert len(results) == 3
    assert all(r.steps >= 1 for r in results)


def test_write_csv(tmp_path: Path) -> None:
    results = run_batch(2, "random", seed=1, max_steps=200)
    out = tmp_path / "runs" / "out.csv"
    write_csv(results, str(out))

    rows = list(csv.reader(out.open(newline="")))
    assert rows[0] == ["ep", "steps", "score", "collision"]
    assert [r[0] for r in rows[1:]] == ["1", "2"]


def test_main_writes_csv(tmp_path: Path) -> None:
    out = tmp_path / "auto.csv"
    main(["--episodes", "2", "--policy", "greedy", "--seed", "9", "--max-steps", "300", "--out", str(out)])
    assert len(out.read_text().splitlines()) == 3
