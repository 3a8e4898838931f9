# controls.py
from __future__ import annotations

from typing import Callable, Dict, Optional

import pygame  # type: ignore

from .engine import Difficulty, Direction, Phase, SnakeEngine
from .scheduler import TickScheduler

DIRECTION_KEYS: Dict[int, Direction] = {
    pygame.K_UP: Direction.UP,
    pygame.K_w: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_s: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_a: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_d: Direction.RIGHT,
}

DIFFICULTY_KEYS: Dict[int, Difficulty] = {
    pygame.K_1: Difficulty.SLOW,
    pygame.K_2: Difficulty.MEDIUM,
    pygame.K_3: Difficulty.FAST,
}

PAUSE_KEYS = (pygame.K_p, pygame.K_SPACE)
START_KEYS = (pygame.K_r, pygame.K_RETURN, pygame.K_KP_ENTER)
LEVEL_UP_KEYS = (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS)
LEVEL_DOWN_KEYS = (pygame.K_MINUS, pygame.K_KP_MINUS)


class Controller:
    """Translates key presses into engine calls. Holds no game rules of its own."""

    def __init__(
        self,
        engine: SnakeEngine,
        scheduler: TickScheduler,
        clock: Optional[Callable[[], int]] = None,
        autopilot: bool = False,
    ) -> None:
        self.engine = engine
        self.scheduler = scheduler
        self.clock = clock or pygame.time.get_ticks
        self.autopilot = autopilot

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Return False to quit."""
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.KEYDOWN:
            return self.handle_key(event.key)
        return True

    def handle_key(self, key: int) -> bool:
        if key == pygame.K_ESCAPE:
            return False
        if key == pygame.K_TAB:
            self.autopilot = not self.autopilot
            return True

        phase = self.engine.phase
        if key in DIRECTION_KEYS:
            if not self.autopilot:
                self.engine.set_pending_direction(DIRECTION_KEYS[key])
        elif key in PAUSE_KEYS:
            self.engine.toggle_pause()
        elif key in START_KEYS:
            if phase is Phase.READY:
                snap = self.engine.get_state()
                self.engine.start(snap.difficulty, snap.level)
                self.scheduler.start(self.clock())
            elif phase is Phase.GAMEOVER:
                self.engine.restart()
                self.scheduler.start(self.clock())
        elif key in DIFFICULTY_KEYS:
            self.engine.select(difficulty=DIFFICULTY_KEYS[key])
        elif key in LEVEL_UP_KEYS:
            self.engine.select(level=self.engine.get_state().level + 1)
        elif key in LEVEL_DOWN_KEYS:
            self.engine.select(level=self.engine.get_state().level - 1)
        return True

    def handle_input(self) -> bool:
        """Drain the pygame event queue. Return False to quit."""
        for event in pygame.event.get():
            if not self.handle_event(event):
                return False
        return True
