# src/autopilot/run.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional
import argparse
import csv
import logging
import os
import random

import numpy as np  # type: ignore

from snake.config import load_config
from snake.engine import Difficulty, Direction, SnakeEngine, TickOutcome
from snake.logging_setup import setup_logging
from snake.scores import MemoryBestScoreStore
from autopilot.policies import POLICIES

logger = logging.getLogger(__name__)

Policy = Callable[..., Direction]


@dataclass
class EpisodeResult:
    steps: int
    score: int
    collision: Optional[str]  # None when the step cap was hit


# --------------------------
# Episode loop
# --------------------------
def run_episode(
    engine: SnakeEngine,
    policy: Policy,
    rng: np.random.Generator,
    epsilon: float = 0.1,
    difficulty: Difficulty = Difficulty.MEDIUM,
    level: int = 1,
    max_steps: int = 10_000,
) -> EpisodeResult:
    """
    Play one session: ask the policy for a direction, hand it to the engine
    exactly as a keypress would, then tick. Stops on collision or max_steps.
    """
    engine.start(difficulty, level)
    steps = 0
    snap = engine.get_state()

    while steps < max_steps:
        engine.set_pending_direction(policy(snap, rng, epsilon))
        outcome = engine.tick()
        steps += 1
        snap = engine.get_state()
        if outcome is TickOutcome.COLLIDED:
            break

    collision = snap.collision.value if snap.collision is not None else None
    return EpisodeResult(steps=steps, score=snap.score, collision=collision)


def run_batch(
    episodes: int,
    policy_name: str,
    epsilon: float = 0.1,
    difficulty: Difficulty = Difficulty.MEDIUM,
    level: int = 1,
    seed: Optional[int] = None,
    max_steps: int = 10_000,
) -> List[EpisodeResult]:
    if policy_name not in POLICIES:
        raise ValueError(f"Unknown policy: {policy_name}")
    policy = POLICIES[policy_name]

    cfg = load_config(seed=seed)
    engine = SnakeEngine(cfg, MemoryBestScoreStore(), random.Random(cfg.seed))
    rng = np.random.default_rng(cfg.seed)

    results = []
    for ep in range(1, episodes + 1):
        res = run_episode(engine, policy, rng, epsilon, difficulty, level, max_steps)
        logger.info("ep=%d steps=%d score=%d collision=%s", ep, res.steps, res.score, res.collision)
        results.append(res)
    return results


def write_csv(results: List[EpisodeResult], out_csv: str) -> None:
    rows = [("ep", "steps", "score", "collision")]
    for ep, res in enumerate(results, start=1):
        rows.append((ep, res.steps, res.score, res.collision or ""))

    parent = os.path.dirname(out_csv)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(out_csv, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerows(rows)


# --------------------------
# Main
# --------------------------
def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Run the snake autopilot headless.")
    parser.add_argument("--episodes", type=int, default=50)
    parser.add_argument("--policy", type=str, default="greedy", choices=sorted(POLICIES))
    parser.add_argument("--epsilon", type=float, default=0.1, help="epsilon for eps-greedy")
    parser.add_argument("--difficulty", type=str, default="medium", choices=[d.value for d in Difficulty])
    parser.add_argument("--level", type=int, default=1)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--max-steps", type=int, default=10_000)
    parser.add_argument("--out", type=str, default="data/runs/autopilot.csv", help="CSV output path")
    parser.add_argument("--log-level", type=str, default=None)
    args = parser.parse_args(argv)

    setup_logging(args.log_level or load_config().log_level)
    logger.info(
        "running %d episode(s) policy=%s epsilon=%.2f difficulty=%s level=%d",
        args.episodes, args.policy, args.epsilon, args.difficulty, args.level,
    )

    results = run_batch(
        args.episodes, args.policy, args.epsilon,
        Difficulty(args.difficulty), args.level, args.seed, args.max_steps,
    )
    write_csv(results, args.out)

    if results:
        scores = [r.score for r in results]
        logger.info("mean score %.1f, best %d", float(np.mean(scores)), max(scores))
    logger.info("saved results -> %s", args.out)


if __name__ == "__main__":
    main()
