# src/autopilot/policies/eps_greedy.py
import numpy as np  # type: ignore

from snake.engine import Direction, Snapshot
from autopilot.policies.random import policy_random
from autopilot.policies.greedy import policy_greedy


def policy_eps_greedy(snap: Snapshot, rng: np.random.Generator, epsilon: float = 0.1) -> Direction:
    """
    Epsilon-greedy policy: with probability epsilon, pick random; else pick greedy.
    """
    if rng.random() < epsilon:
        return policy_random(snap, rng)
    return policy_greedy(snap, rng)
