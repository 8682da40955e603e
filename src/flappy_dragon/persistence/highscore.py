"""High score storage backends."""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from flappy_dragon.core.hooks import HighScoreStore

logger = logging.getLogger(__name__)


def _parse_score(value: Any) -> Optional[int]:
    """Accept non-negative integers only; bools are not scores."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


class MemoryHighScoreStore(HighScoreStore):
    """Keeps the high score for the lifetime of the process."""

    def __init__(self, initial: Optional[int] = None) -> None:
        self._score = initial

    def load_high_score(self) -> Optional[int]:
        return self._score

    def save_high_score(self, score: int) -> None:
        self._score = score


class JsonHighScoreStore(HighScoreStore):
    """Stores {"high_score": n} in a JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load_high_score(self) -> Optional[int]:
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read high score from {self.path}: {e}")
            return None

        score = _parse_score(data.get("high_score")) if isinstance(data, dict) else None
        if score is None:
            logger.warning(f"Ignoring malformed high score in {self.path}")
        else:
            logger.info(f"Loaded high score {score}")
        return score

    def save_high_score(self, score: int) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump({"high_score": int(score)}, f)
        except OSError as e:
            logger.error(f"Failed to save high score: {e}")
