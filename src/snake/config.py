from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Dict, Optional
import os

from .errors import ConfigError

# ----- Grid & window -----
GRID_SIZE = 20
CELL_SIZE = 20
HUD_HEIGHT = 48
WIDTH, HEIGHT = GRID_SIZE * CELL_SIZE, GRID_SIZE * CELL_SIZE + HUD_HEIGHT

# ----- Colors -----
BG        = (26, 26, 26)
GRID_LINE = (42, 42, 42)
HEAD      = (34, 197, 94)
BODY      = (74, 222, 128)
FOOD      = (239, 68, 68)
OBSTACLE  = (120, 113, 108)
TEXT      = (220, 220, 230)
GOLD      = (250, 204, 21)

DEFAULT_BEST_SCORE_PATH = Path.home() / ".classroom_snake" / "best_score.json"


# ----- Tunables -----
@dataclass
class Config:
    seed: Optional[int] = None
    grid_size: int = GRID_SIZE
    tick_ms: Dict[str, int] = field(
        default_factory=lambda: {"slow": 200, "medium": 150, "fast": 100}
    )
    food_reward: int = 10
    obstacle_cap: int = 10
    level_max: int = 5
    placement_attempts: int = 100
    best_score_path: Path = DEFAULT_BEST_SCORE_PATH
    log_level: str = "INFO"

    def validate(self) -> "Config":
        if self.grid_size < 2:
            raise ConfigError(f"grid_size must be at least 2, got {self.grid_size}")
        for name in ("slow", "medium", "fast"):
            period = self.tick_ms.get(name)
            if period is None or period <= 0:
                raise ConfigError(f"tick_ms[{name!r}] must be a positive integer")
        if self.food_reward <= 0:
            raise ConfigError("food_reward must be positive")
        if self.obstacle_cap < 0:
            raise ConfigError("obstacle_cap must not be negative")
        if self.level_max < 1:
            raise ConfigError("level_max must be at least 1")
        if self.placement_attempts < 1:
            raise ConfigError("placement_attempts must be at least 1")
        return self


def load_config(**overrides) -> Config:
    """
    Build a Config from defaults, then environment, then explicit overrides.

    Environment:
      SNAKE_BEST_SCORE_PATH - where the best score is kept
      SNAKE_LOG_LEVEL       - logging level name
      SNAKE_SEED            - integer RNG seed
    Overrides whose value is None are skipped so argparse defaults can be
    passed straight through.
    """
    cfg = Config()

    env_path = os.environ.get("SNAKE_BEST_SCORE_PATH")
    if env_path:
        cfg.best_score_path = Path(env_path).expanduser()
    env_level = os.environ.get("SNAKE_LOG_LEVEL")
    if env_level:
        cfg.log_level = env_level.upper()
    env_seed = os.environ.get("SNAKE_SEED")
    if env_seed:
        try:
            cfg.seed = int(env_seed)
        except ValueError as exc:
            raise ConfigError(f"SNAKE_SEED must be an integer, got {env_seed!r}") from exc

    known = {f.name for f in fields(Config)}
    unknown = set(overrides) - known
    if unknown:
        raise ConfigError(f"unknown config option(s): {', '.join(sorted(unknown))}")
    updates = {k: v for k, v in overrides.items() if v is not None}
    if "best_score_path" in updates:
        updates["best_score_path"] = Path(updates["best_score_path"]).expanduser()
    return replace(cfg, **updates).validate()
