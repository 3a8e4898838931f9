# main.py
from __future__ import annotations

from typing import List, Optional
import argparse
import logging
import random

import numpy as np  # type: ignore
import pygame  # type: ignore

from .config import WIDTH, HEIGHT, load_config
from .controls import Controller
from .engine import Difficulty, GameEvent, Phase, SnakeEngine, Snapshot
from .logging_setup import setup_logging
from .render import draw_snapshot
from .scheduler import TickScheduler
from .scores import JsonBestScoreStore
from autopilot.policies import policy_greedy

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Classroom Snake")
    parser.add_argument("--difficulty", type=str, default="medium", choices=[d.value for d in Difficulty])
    parser.add_argument("--level", type=int, default=1)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--best-score-path", type=str, default=None)
    parser.add_argument("--demo", action="store_true", help="start with the autopilot steering")
    parser.add_argument("--log-level", type=str, default=None)
    return parser.parse_args(argv)


def log_event(event: GameEvent, snap: Snapshot) -> None:
    if event is GameEvent.FOOD_EATEN:
        logger.debug("food eaten, score=%d length=%d", snap.score, len(snap.snake))
    elif event is GameEvent.NEW_BEST:
        logger.info("new best score %d", snap.best_score)
    elif event is GameEvent.COLLISION:
        logger.debug("collision with %s", snap.collision.value if snap.collision else "?")


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    cfg = load_config(seed=args.seed, best_score_path=args.best_score_path, log_level=args.log_level)
    setup_logging(cfg.log_level)

    engine = SnakeEngine(cfg, JsonBestScoreStore(cfg.best_score_path), random.Random(cfg.seed))
    engine.subscribe(log_event)
    engine.select(difficulty=args.difficulty, level=args.level)
    scheduler = TickScheduler(engine)
    demo_rng = np.random.default_rng(cfg.seed)

    pygame.init()
    font = pygame.font.SysFont(None, 24)
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    pygame.display.set_caption("Snake")
    clock = pygame.time.Clock()

    controller = Controller(engine, scheduler, pygame.time.get_ticks, autopilot=args.demo)
    running = True

    while running:
        # 1) input
        running = controller.handle_input()
        if not running:
            break

        # demo mode keeps itself going
        if controller.autopilot and engine.phase in (Phase.READY, Phase.GAMEOVER):
            controller.handle_key(pygame.K_RETURN)

        # 2) update
        if controller.autopilot and engine.phase is Phase.RUNNING:
            engine.set_pending_direction(policy_greedy(engine.get_state(), demo_rng))
        scheduler.pump(pygame.time.get_ticks())

        # 3) render
        draw_snapshot(screen, engine.get_state(), font)
        pygame.display.flip()
        clock.tick(60)  # high FPS; movement gated by the scheduler

    pygame.quit()


if __name__ == "__main__":
    main()
