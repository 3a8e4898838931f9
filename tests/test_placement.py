from __future__ import annotations

import logging
import random

import pytest

from snake.engine import place_food, place_obstacles


def test_food_avoids_snake_and_obstacles() -> None:
    rng = random.Random(0)
    snake = [(x, 0) for x in range(10)]
    obstacles = [(x, 1) for x in range(10)]
    for _ in range(200):
        cell = place_food(snake, obstacles, 10, rng)
        assert cell not in snake
        assert cell not in obstacles
        assert 0 <= cell[0] < 10 and 0 <= cell[1] < 10


def test_food_finds_the_single_free_cell() -> None:
    free = (2, 3)
    blocked = [(x, y) for x in range(4) for y in range(4) if (x, y) != free]
    assert place_food(blocked, [], 4, random.Random(5), attempts=1000) == free


def test_exhausted_placement_accepts_last_candidate(caplog: pytest.LogCaptureFixture) -> None:
    snake = [(x, y) for x in range(3) for y in range(3)]
    attempts = 25

    replay = random.Random(11)
    last = None
    for _ in range(attempts):
        last = (replay.randrange(3), replay.randrange(3))

    with caplog.at_level(logging.WARNING, logger="snake.engine"):
        cell = place_food(snake, [], 3, random.Random(11), attempts=attempts)

    assert cell == last
    assert "no free cell" in caplog.text


def test_obstacles_are_distinct_and_avoid_snake_and_food() -> None:
    rng = random.Random(2)
    snake = [(10, 10), (9, 10), (8, 10)]
    food = (3, 3)
    obstacles = place_obstacles(10, snake, 20, rng, food=food)

    assert len(obstacles) == 10
    assert len(set(obstacles)) == 10
    assert not set(obstacles) & set(snake)
    assert food not in obstacles


def test_obstacle_batch_fills_a_small_grid() -> None:
    # 2x2 grid with one snake cell leaves exactly three free cells
    obstacles = place_obstacles(3, [(0, 0)], 2, random.Random(4), attempts=500)
    assert sorted(obstacles) == [(0, 1), (1, 0), (1, 1)]


def test_zero_obstacles() -> None:
    assert place_obstacles(0, [(1, 1)], 5, random.Random(0)) == ()
