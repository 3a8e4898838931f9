from __future__ import annotations

from pathlib import Path
from typing import Protocol
import json
import logging
import os
import tempfile

logger = logging.getLogger(__name__)

BEST_SCORE_KEY = "snakeHighScore"


class BestScoreStore(Protocol):
    def load_best_score(self) -> int: ...

    def save_best_score(self, score: int) -> None: ...


class MemoryBestScoreStore:
    """Keeps the best score in memory; used by tests and headless runs."""

    def __init__(self, initial: int = 0) -> None:
        self.value = initial
        self.saves = 0

    def load_best_score(self) -> int:
        return self.value

    def save_best_score(self, score: int) -> None:
        self.value = score
        self.saves += 1


class JsonBestScoreStore:
    """
    Best score kept in a small JSON key-value file, e.g. {"snakeHighScore": 120}.

    A missing file reads as 0. A file that cannot be parsed, or that holds a
    negative or non-integer value, is logged and also reads as 0. Other keys
    in the file are preserved on save.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError:
            logger.warning("could not read best score file %s", self.path, exc_info=True)
            return {}
        except UnicodeDecodeError:
            logger.warning("ignoring undecodable best score file %s", self.path)
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("ignoring malformed best score file %s", self.path)
            return {}
        if not isinstance(data, dict):
            logger.warning("ignoring best score file %s: expected an object", self.path)
            return {}
        return data

    def load_best_score(self) -> int:
        value = self._read().get(BEST_SCORE_KEY, 0)
        # bool is an int subclass
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            logger.warning("ignoring invalid best score %r in %s", value, self.path)
            return 0
        return value

    def save_best_score(self, score: int) -> None:
        data = self._read()
        data[BEST_SCORE_KEY] = int(score)
        tmp = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".best_score.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp, self.path)
        except OSError:
            logger.exception("failed to save best score to %s", self.path)
            if tmp is not None and os.path.exists(tmp):
                os.unlink(tmp)
