# src/autopilot/env.py
from __future__ import annotations

from typing import Tuple

import numpy as np  # type: ignore

from snake.engine import Direction, Snapshot

# Observation layout, see observe()
OBS_DIM = 9


# -----------------------------------------------------------------------------
# Small geometry helpers
# -----------------------------------------------------------------------------
def left_of(direction: Direction) -> Direction:
    """Rotate a direction 90° CCW (screen coordinates, y down)."""
    dx, dy = direction.delta
    return Direction((dy, -dx))


def right_of(direction: Direction) -> Direction:
    """Rotate a direction 90° CW (screen coordinates, y down)."""
    dx, dy = direction.delta
    return Direction((-dy, dx))


def in_bounds(snap: Snapshot, x: int, y: int) -> bool:
    return 0 <= x < snap.grid_size and 0 <= y < snap.grid_size


def would_hit(snap: Snapshot, direction: Direction) -> bool:
    """
    True if moving the head one cell in `direction` would be fatal:
    a wall, the snake's own body, or an obstacle.
    """
    hx, hy = snap.head
    dx, dy = direction.delta
    nx, ny = hx + dx, hy + dy
    if not in_bounds(snap, nx, ny):
        return True
    return (nx, ny) in snap.snake or (nx, ny) in snap.obstacles


def manhattan(a: Tuple[int, int], b: Tuple[int, int]) -> int:
    """Manhattan (L1) distance on the grid."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


# -----------------------------------------------------------------------------
# Observation function
# -----------------------------------------------------------------------------
def observe(snap: Snapshot) -> np.ndarray:
    """
    Compact 9-D observation of a snapshot.

    Features:
      0: hx_n  - head x normalized in [0, 1]
      1: hy_n  - head y normalized in [0, 1]
      2: fx_n  - food x normalized in [0, 1] (head x when there is no food)
      3: fy_n  - food y normalized in [0, 1] (head y when there is no food)
      4: dx    - committed direction x component in {-1, 0, 1}
      5: dy    - committed direction y component in {-1, 0, 1}
      6: danger_ahead  - 1.0 if the next cell forward would be fatal
      7: danger_left   - 1.0 if the next cell to the left would be fatal
      8: danger_right  - 1.0 if the next cell to the right would be fatal
    """
    hx, hy = snap.head
    fx, fy = snap.food if snap.food is not None else snap.head

    denom = max(snap.grid_size - 1, 1)
    dx, dy = snap.direction.delta

    return np.array(
        [
            hx / denom, hy / denom, fx / denom, fy / denom,
            float(dx), float(dy),
            float(would_hit(snap, snap.direction)),
            float(would_hit(snap, left_of(snap.direction))),
            float(would_hit(snap, right_of(snap.direction))),
        ],
        dtype=np.float32,
    )
