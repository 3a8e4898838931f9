from __future__ import annotations

from typing import Optional
import logging

from .engine import Phase, SnakeEngine, TickOutcome

logger = logging.getLogger(__name__)


class TickScheduler:
    """
    Fixed-period tick driver.

    The caller feeds it a millisecond clock (pygame.time.get_ticks() in the
    game loop, plain integers in tests) and it runs at most one engine tick
    per period. Ticks are only issued while the scheduler is started and the
    engine is RUNNING; while paused the clock is re-armed so resuming does
    not fire a burst of catch-up ticks.
    """

    def __init__(self, engine: SnakeEngine) -> None:
        self.engine = engine
        self.running = False
        self.last_tick: Optional[int] = None
        self._in_flight = False

    @property
    def period_ms(self) -> int:
        return self.engine.get_state().tick_ms

    def start(self, now_ms: int) -> None:
        self.running = True
        self.last_tick = now_ms

    def stop(self) -> None:
        self.running = False
        self.last_tick = None

    def pump(self, now_ms: int) -> Optional[TickOutcome]:
        """Run one tick if a period has elapsed. Returns the outcome, or None if nothing ran."""
        if not self.running or self._in_flight:
            return None
        if self.engine.phase is not Phase.RUNNING:
            # re-arm so the first tick after resume waits a full period
            self.last_tick = now_ms
            return None
        if self.last_tick is None:
            self.last_tick = now_ms
            return None
        if now_ms - self.last_tick < self.period_ms:
            return None  # not time to move yet

        self._in_flight = True
        try:
            outcome = self.engine.tick()
        finally:
            self._in_flight = False
        self.last_tick = now_ms

        if outcome is TickOutcome.COLLIDED:
            logger.debug("collision, stopping scheduler")
            self.stop()
        return outcome
