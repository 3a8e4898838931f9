# src/autopilot/policies/random.py
import numpy as np  # type: ignore

from snake.engine import Direction, Snapshot

DIRECTIONS = list(Direction)


def policy_random(snap: Snapshot, rng: np.random.Generator, epsilon: float = 0.0) -> Direction:
    """
    Random policy: pick a uniformly random direction.
    Reversals are ignored by the engine, so this wanders and usually dies early.
    """
    return DIRECTIONS[int(rng.integers(len(DIRECTIONS)))]
