"""Obstacle stream: spawning, scrolling and culling."""

import logging
import math
import random
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from flappy_dragon.core.config import GameConfig, Viewport

logger = logging.getLogger(__name__)


@dataclass
class Obstacle:
    """A gated column: blocked above top_height and below bottom_y."""

    x: float
    width: float
    top_height: float
    bottom_y: float
    passed: bool = False

    @property
    def right(self) -> float:
        """Trailing edge."""
        return self.x + self.width

    @property
    def gap(self) -> float:
        return self.bottom_y - self.top_height

    def mark_passed(self) -> bool:
        """Flag the obstacle as cleared. Returns True only the first time."""
        if self.passed:
            return False
        self.passed = True
        return True


@dataclass(frozen=True)
class ObstacleSnapshot:
    x: float
    width: float
    top_height: float
    bottom_y: float
    passed: bool


class ObstacleField:
    """
    Ordered obstacles, oldest (leftmost) first.

    Gap and width are copied into each obstacle when it spawns, so config
    changes only affect later obstacles. Speed is applied to all of them
    at advance time.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()
        self._obstacles: List[Obstacle] = []
        self.accumulator_ms: float = 0.0

    def __iter__(self) -> Iterator[Obstacle]:
        return iter(self._obstacles)

    def __len__(self) -> int:
        return len(self._obstacles)

    def __getitem__(self, index: int) -> Obstacle:
        return self._obstacles[index]

    def try_spawn(self, elapsed_ms: float, config: GameConfig, viewport: Viewport) -> Optional[Obstacle]:
        """Accumulate elapsed time and spawn once the interval is reached.

        The accumulator restarts from zero rather than carrying the overshoot.
        """
        self.accumulator_ms += elapsed_ms
        if self.accumulator_ms < config.spawn_interval_ms:
            return None

        self.accumulator_ms = 0.0
        return self.spawn(config, viewport)

    def spawn(self, config: GameConfig, viewport: Viewport) -> Obstacle:
        """Append a new obstacle at the right edge of the viewport."""
        top_height = self._random_top_height(config, viewport)
        obstacle = Obstacle(
            x=viewport.width,
            width=config.obstacle_width,
            top_height=top_height,
            bottom_y=top_height + config.obstacle_gap,
        )
        self._obstacles.append(obstacle)
        logger.debug(f"Obstacle spawned: top={top_height:.0f} gap={config.obstacle_gap:.0f}")
        return obstacle

    def _random_top_height(self, config: GameConfig, viewport: Viewport) -> float:
        """Whole-pixel height drawn uniformly from [min, height - gap - min]."""
        low = config.obstacle_min_height
        high = viewport.height - config.obstacle_gap - config.obstacle_min_height
        low_px, high_px = math.ceil(low), math.floor(high)
        if high_px < low_px:
            # Viewport too short for the gap; pin to the minimum
            return float(low)
        return float(self._rng.randint(low_px, high_px))

    def advance(self, dt: float, speed: float) -> None:
        """Scroll every obstacle left by speed * dt."""
        step = speed * dt
        for obstacle in self._obstacles:
            obstacle.x -= step

    def cull(self) -> int:
        """Drop obstacles whose trailing edge reached the left boundary."""
        before = len(self._obstacles)
        self._obstacles = [o for o in self._obstacles if o.right > 0]
        return before - len(self._obstacles)

    def clear(self) -> None:
        """Remove all obstacles and restart the spawn accumulator."""
        self._obstacles.clear()
        self.accumulator_ms = 0.0

    def snapshot(self) -> Tuple[ObstacleSnapshot, ...]:
        return tuple(
            ObstacleSnapshot(o.x, o.width, o.top_height, o.bottom_y, o.passed)
            for o in self._obstacles
        )
