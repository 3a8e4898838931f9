# src/autopilot/policies/greedy.py
from typing import Dict, List, Tuple

import numpy as np  # type: ignore

from snake.engine import Direction, Snapshot
from autopilot.env import left_of, right_of, observe


def best_move_toward_food(head: Tuple[int, int], food: Tuple[int, int]) -> List[Direction]:
    """
    Returns a preference ordering of moves that reduce Manhattan distance to food.
    Does NOT check collisions; caller should filter unsafe moves.
    """
    hx, hy = head
    fx, fy = food
    prefs = []
    if fx < hx:
        prefs.append(Direction.LEFT)
    elif fx > hx:
        prefs.append(Direction.RIGHT)
    if fy < hy:
        prefs.append(Direction.UP)
    elif fy > hy:
        prefs.append(Direction.DOWN)
    # Orthogonal options go last so the caller still has moves when the primary axis is blocked.
    for d in Direction:
        if d not in prefs:
            prefs.append(d)
    return prefs  # length 4


def policy_greedy(snap: Snapshot, rng: np.random.Generator, epsilon: float = 0.0) -> Direction:
    """
    Greedy on food distance with simple safety:
    - prefer directions that reduce Manhattan distance
    - avoid any move flagged dangerous if possible
    - if all preferred moves are dangerous, choose any safe move
    - if every move looks dangerous, keep going straight (we're boxed in)
    """
    obs = observe(snap)
    dan_f, dan_l, dan_r = (bool(v) for v in obs[6:9])

    forward = snap.direction
    danger: Dict[Direction, bool] = {
        forward: dan_f,
        left_of(forward): dan_l,
        right_of(forward): dan_r,
        # the engine ignores 180° turns, so never pick it
        forward.opposite: True,
    }

    food = snap.food if snap.food is not None else snap.head
    prefs = best_move_toward_food(snap.head, food)

    for d in prefs:
        if not danger[d]:
            return d

    return forward
