# engine.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Callable, Iterable, List, Optional, Set, Tuple, Union
import logging
import random
import threading

import numpy as np  # type: ignore

from .config import Config
from .scores import BestScoreStore, MemoryBestScoreStore

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]


# ---------- Enums ----------
class Direction(Enum):
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def delta(self) -> Tuple[int, int]:
        return self.value

    @property
    def opposite(self) -> "Direction":
        dx, dy = self.value
        return Direction((-dx, -dy))


class Difficulty(str, Enum):
    SLOW = "slow"
    MEDIUM = "medium"
    FAST = "fast"


class Phase(Enum):
    READY = "ready"
    RUNNING = "running"
    PAUSED = "paused"
    GAMEOVER = "gameover"


class TickOutcome(Enum):
    CONTINUED = "continued"
    FOOD_EATEN = "food_eaten"
    COLLIDED = "collided"
    IGNORED = "ignored"  # tick outside RUNNING, nothing changed


class CollisionKind(Enum):
    WALL = "wall"
    SELF = "self"
    OBSTACLE = "obstacle"


class GameEvent(Enum):
    FOOD_EATEN = "food_eaten"
    COLLISION = "collision"
    PHASE_CHANGED = "phase_changed"
    NEW_BEST = "new_best"


class CellState(IntEnum):
    EMPTY    = 0
    HEAD     = 1
    BODY     = 2
    FOOD     = 3
    OBSTACLE = 4


# ---------- Helpers ----------
def is_opposite(a: Direction, b: Direction) -> bool:
    return a.opposite is b


def coerce_difficulty(value: Union[Difficulty, str]) -> Difficulty:
    if isinstance(value, Difficulty):
        return value
    return Difficulty(str(value).lower())


def _sample_free(blocked: Set[Cell], grid_size: int, rng: random.Random, attempts: int) -> Cell:
    """
    Rejection-sample a cell outside `blocked`. After `attempts` draws the last
    candidate is returned even if it is blocked, so placement always terminates.
    """
    cand = None
    for _ in range(max(attempts, 1)):
        cand = (rng.randrange(grid_size), rng.randrange(grid_size))
        if cand not in blocked:
            return cand
    logger.warning("no free cell after %d attempts, accepting %s", attempts, cand)
    return cand


def place_food(
    snake: Iterable[Cell],
    obstacles: Iterable[Cell],
    grid_size: int,
    rng: random.Random,
    attempts: int = 100,
) -> Cell:
    return _sample_free(set(snake) | set(obstacles), grid_size, rng, attempts)


def place_obstacles(
    count: int,
    snake: Iterable[Cell],
    grid_size: int,
    rng: random.Random,
    attempts: int = 100,
    food: Optional[Cell] = None,
) -> Tuple[Cell, ...]:
    """Place `count` obstacles as one batch, each avoiding the snake, the food and earlier picks."""
    blocked = set(snake)
    if food is not None:
        blocked.add(food)
    placed: List[Cell] = []
    for _ in range(count):
        cell = _sample_free(blocked, grid_size, rng, attempts)
        placed.append(cell)
        blocked.add(cell)
    return tuple(placed)


# ---------- State ----------
@dataclass
class SessionState:
    snake: List[Cell]              # head at index 0
    direction: Direction
    pending: Direction
    food: Optional[Cell]
    obstacles: Tuple[Cell, ...]
    difficulty: Difficulty
    level: int
    score: int = 0
    phase: Phase = Phase.READY
    collision: Optional[CollisionKind] = None
    ticks: int = 0
    obstacle_set: Set[Cell] = field(default_factory=set)


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of a session handed to renderers, policies and observers."""
    snake: Tuple[Cell, ...]
    food: Optional[Cell]
    obstacles: Tuple[Cell, ...]
    score: int
    best_score: int
    phase: Phase
    direction: Direction
    pending: Direction
    difficulty: Difficulty
    level: int
    tick_ms: int
    grid_size: int
    collision: Optional[CollisionKind] = None
    ticks: int = 0

    @property
    def head(self) -> Cell:
        return self.snake[0]

    def as_grid(self) -> np.ndarray:
        """Grid of CellState values indexed [y, x]."""
        grid = np.zeros((self.grid_size, self.grid_size), dtype=np.int8)
        for x, y in self.obstacles:
            grid[y, x] = CellState.OBSTACLE
        if self.food is not None:
            fx, fy = self.food
            grid[fy, fx] = CellState.FOOD
        for x, y in self.snake[1:]:
            grid[y, x] = CellState.BODY
        hx, hy = self.head
        grid[hy, hx] = CellState.HEAD
        return grid


Listener = Callable[[GameEvent, Snapshot], None]


# ---------- Engine ----------
class SnakeEngine:
    """
    Discrete-time Snake simulation.

    Phases: READY -> RUNNING <-> PAUSED -> GAMEOVER, and restart() back to a
    fresh RUNNING session. Only RUNNING accepts ticks and direction changes.
    The whole session sits behind one lock; listeners are called after the
    lock is released with a snapshot of the fully applied state.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        store: Optional[BestScoreStore] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or Config()
        self.store = store if store is not None else MemoryBestScoreStore()
        self.rng = rng or random.Random(self.config.seed)
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []
        self._best = self.store.load_best_score()
        self._session = self._ready_session(Difficulty.MEDIUM, 1)

    # ----- Observers -----
    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    def _dispatch(self, events: List[GameEvent], snap: Optional[Snapshot]) -> None:
        if snap is None:
            return
        for event in events:
            for listener in list(self._listeners):
                listener(event, snap)

    # ----- Construction helpers -----
    def _center(self) -> Cell:
        return (self.config.grid_size // 2, self.config.grid_size // 2)

    def _clamp_level(self, level: int) -> int:
        clamped = max(1, min(int(level), self.config.level_max))
        if clamped != level:
            logger.debug("level %s clamped to %d", level, clamped)
        return clamped

    def _ready_session(self, difficulty: Difficulty, level: int) -> SessionState:
        return SessionState(
            snake=[self._center()],
            direction=Direction.RIGHT,
            pending=Direction.RIGHT,
            food=None,
            obstacles=(),
            difficulty=difficulty,
            level=level,
        )

    def _snapshot(self) -> Snapshot:
        s = self._session
        return Snapshot(
            snake=tuple(s.snake),
            food=s.food,
            obstacles=s.obstacles,
            score=s.score,
            best_score=self._best,
            phase=s.phase,
            direction=s.direction,
            pending=s.pending,
            difficulty=s.difficulty,
            level=s.level,
            tick_ms=self.config.tick_ms[s.difficulty.value],
            grid_size=self.config.grid_size,
            collision=s.collision,
            ticks=s.ticks,
        )

    # ----- Public API -----
    def get_state(self) -> Snapshot:
        with self._lock:
            return self._snapshot()

    @property
    def phase(self) -> Phase:
        return self._session.phase

    @property
    def best_score(self) -> int:
        return self._best

    def select(self, difficulty: Union[Difficulty, str, None] = None, level: Optional[int] = None) -> None:
        """Change difficulty/level for the next session; ignored while a session is live."""
        with self._lock:
            s = self._session
            if s.phase not in (Phase.READY, Phase.GAMEOVER):
                return
            if difficulty is not None:
                s.difficulty = coerce_difficulty(difficulty)
            if level is not None:
                s.level = self._clamp_level(level)
            snap = self._snapshot()
        self._dispatch([GameEvent.PHASE_CHANGED], snap)

    def start(self, difficulty: Union[Difficulty, str] = Difficulty.MEDIUM, level: int = 1) -> None:
        diff = coerce_difficulty(difficulty)
        with self._lock:
            snap = self._start_locked(diff, level)
        self._dispatch([GameEvent.PHASE_CHANGED], snap)

    def _start_locked(self, diff: Difficulty, level: int) -> Snapshot:
        """Build and install a fresh RUNNING session. Caller holds the lock."""
        lvl = self._clamp_level(level)
        s = self._ready_session(diff, lvl)
        cfg = self.config

        count = min(lvl * 2, cfg.obstacle_cap)
        s.obstacles = place_obstacles(count, s.snake, cfg.grid_size, self.rng, cfg.placement_attempts)
        s.obstacle_set = set(s.obstacles)
        s.food = place_food(s.snake, s.obstacles, cfg.grid_size, self.rng, cfg.placement_attempts)
        s.phase = Phase.RUNNING

        self._session = s
        logger.info(
            "session started difficulty=%s level=%d obstacles=%d best=%d",
            diff.value, lvl, count, self._best,
        )
        return self._snapshot()

    def restart(self) -> None:
        """Discard the current session and start a fresh one with the same difficulty and level."""
        with self._lock:
            snap = self._start_locked(self._session.difficulty, self._session.level)
        self._dispatch([GameEvent.PHASE_CHANGED], snap)

    def set_pending_direction(self, direction: Direction) -> None:
        """Last write wins; reversals and input outside RUNNING are ignored."""
        with self._lock:
            s = self._session
            if s.phase is not Phase.RUNNING:
                return
            if is_opposite(direction, s.direction):
                return
            s.pending = direction

    def request_pause(self) -> None:
        self._transition(Phase.RUNNING, Phase.PAUSED)

    def request_resume(self) -> None:
        self._transition(Phase.PAUSED, Phase.RUNNING)

    def toggle_pause(self) -> None:
        with self._lock:
            snap = (
                self._transition_locked(Phase.RUNNING, Phase.PAUSED)
                or self._transition_locked(Phase.PAUSED, Phase.RUNNING)
            )
        self._dispatch([GameEvent.PHASE_CHANGED], snap)

    def _transition(self, src: Phase, dst: Phase) -> None:
        with self._lock:
            snap = self._transition_locked(src, dst)
        self._dispatch([GameEvent.PHASE_CHANGED], snap)

    def _transition_locked(self, src: Phase, dst: Phase) -> Optional[Snapshot]:
        """Move src -> dst if the session is in src. Caller holds the lock."""
        if self._session.phase is not src:
            return None
        self._session.phase = dst
        logger.debug("phase %s -> %s", src.value, dst.value)
        return self._snapshot()

    def tick(self) -> TickOutcome:
        with self._lock:
            outcome, events = self._advance()
            snap = self._snapshot() if events else None
        self._dispatch(events, snap)
        return outcome

    # ----- Simulation step -----
    def _collision(self, cell: Cell) -> Optional[CollisionKind]:
        s = self._session
        x, y = cell
        n = self.config.grid_size
        if not (0 <= x < n and 0 <= y < n):
            return CollisionKind.WALL
        if cell in s.snake:
            return CollisionKind.SELF
        if cell in s.obstacle_set:
            return CollisionKind.OBSTACLE
        return None

    def _advance(self) -> Tuple[TickOutcome, List[GameEvent]]:
        s = self._session
        if s.phase is not Phase.RUNNING:
            return TickOutcome.IGNORED, []

        # Commit direction once per tick
        s.direction = s.pending

        hx, hy = s.snake[0]
        dx, dy = s.direction.delta
        new_head = (hx + dx, hy + dy)

        kind = self._collision(new_head)
        if kind is not None:
            s.phase = Phase.GAMEOVER
            s.collision = kind
            logger.info("game over (%s) score=%d length=%d", kind.value, s.score, len(s.snake))
            return TickOutcome.COLLIDED, [GameEvent.COLLISION, GameEvent.PHASE_CHANGED]

        s.snake.insert(0, new_head)
        s.ticks += 1

        if new_head != s.food:
            s.snake.pop()
            return TickOutcome.CONTINUED, []

        # Eat & grow: the tail stays
        events = [GameEvent.FOOD_EATEN]
        s.score += self.config.food_reward
        s.food = place_food(
            s.snake, s.obstacles, self.config.grid_size, self.rng, self.config.placement_attempts
        )
        if s.score > self._best:
            self._best = s.score
            events.append(GameEvent.NEW_BEST)
            # the board is final here; store errors are logged, never raised
            try:
                self.store.save_best_score(self._best)
            except Exception:
                logger.exception("failed to persist best score %d", self._best)
        return TickOutcome.FOOD_EATEN, events
