"""Collision detection and pass scoring between the player and obstacles."""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, List, Literal

from flappy_dragon.core.config import GameConfig
from flappy_dragon.core.obstacles import Obstacle
from flappy_dragon.core.player import BodyContact, PlayerBody


class CollisionReason(Enum):
    """What the player ran into."""
    OBSTACLE = auto()
    FLOOR = auto()
    CEILING = auto()


@dataclass(frozen=True)
class HitBox:
    left: float
    top: float
    right: float
    bottom: float

    def overlaps_x(self, left: float, right: float) -> bool:
        return self.right > left and self.left < right


def hit_box(player: PlayerBody, ratio: float, y_scale: float = 1.0) -> HitBox:
    """Player box inset by a fraction of its size, so near misses count as misses."""
    pad_x = player.width * ratio
    pad_y = player.height * ratio * y_scale
    return HitBox(
        left=player.x + pad_x,
        top=player.y + pad_y,
        right=player.x + player.width - pad_x,
        bottom=player.y + player.height - pad_y,
    )


@dataclass
class FrameOutcome:
    """Passes and collisions found in one evaluation."""
    passed: List[Obstacle] = field(default_factory=list)
    collisions: List[CollisionReason] = field(default_factory=list)

    @property
    def collided(self) -> bool:
        return bool(self.collisions)


class CollisionScorer:
    """
    Evaluates one frame of player/obstacle interaction.

    Obstacles are only borrowed for the duration of evaluate(); nothing is
    kept between frames.
    """

    def __init__(
        self,
        floor_mode: Literal["physics", "scorer"] = "physics",
        ceiling_is_lethal: bool = False,
    ) -> None:
        self.floor_mode = floor_mode
        self.ceiling_is_lethal = ceiling_is_lethal

    def evaluate(
        self,
        player: PlayerBody,
        obstacles: Iterable[Obstacle],
        config: GameConfig,
        contact: BodyContact,
        floor_y: float,
    ) -> FrameOutcome:
        outcome = FrameOutcome()
        box = hit_box(player, config.hit_padding_ratio, config.hit_padding_y_scale)

        for obstacle in obstacles:
            if not obstacle.passed and obstacle.right < box.left:
                obstacle.mark_passed()
                outcome.passed.append(obstacle)
            elif box.overlaps_x(obstacle.x, obstacle.right):
                if box.top < obstacle.top_height or box.bottom > obstacle.bottom_y:
                    outcome.collisions.append(CollisionReason.OBSTACLE)

        if self.floor_mode == "physics":
            if contact.floor:
                outcome.collisions.append(CollisionReason.FLOOR)
        elif box.bottom >= floor_y:
            outcome.collisions.append(CollisionReason.FLOOR)

        if self.ceiling_is_lethal and contact.ceiling:
            outcome.collisions.append(CollisionReason.CEILING)

        return outcome
