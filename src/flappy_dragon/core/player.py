"""Player body: position, vertical velocity and wing animation."""

from dataclasses import dataclass
from typing import Tuple

from flappy_dragon.core.config import GameConfig, Viewport

# Wing cycle over the seven sprite frames, flapping down and back up
ANIMATION_SEQUENCE: Tuple[int, ...] = (0, 1, 2, 3, 4, 5, 6, 5, 4, 3, 2, 1)

MAX_TILT = 0.5  # radians
TILT_FACTOR = 0.05


@dataclass(frozen=True)
class BodyContact:
    """Boundary contacts reported by one integration step."""
    floor: bool = False
    ceiling: bool = False


@dataclass
class PlayerBody:
    """The player's dragon. Coordinates are the top-left corner of its box."""

    x: float = -50.0  # Unplaced until the first reset
    y: float = -50.0
    width: float = 0.0
    height: float = 0.0
    velocity: float = 0.0
    frame_index: int = 0
    frame_timer: float = 0.0
    frame_interval_ms: float = 60.0

    @property
    def has_size(self) -> bool:
        return self.width > 0 and self.height > 0

    @property
    def sprite_frame(self) -> int:
        """Sprite index for the current animation step."""
        return ANIMATION_SEQUENCE[self.frame_index]

    @property
    def tilt(self) -> float:
        """Nose up when rising, down when falling, clamped to avoid a backflip."""
        return max(-MAX_TILT, min(self.velocity * TILT_FACTOR, MAX_TILT))

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def bounds(self) -> Tuple[float, float, float, float]:
        """Visual bounding box as (left, top, right, bottom)."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def resize(self, viewport: Viewport, size_ratio: float = 0.16, aspect_ratio: float = 166 / 129) -> None:
        """Recompute body size from the viewport width."""
        if not viewport.is_valid:
            return
        self.height = viewport.width * size_ratio
        self.width = self.height * aspect_ratio

    def reset(self, viewport: Viewport) -> None:
        """Place the body a fifth of the way in, vertically centred."""
        self.x = viewport.width / 5
        self.y = viewport.height / 2
        self.velocity = 0.0
        self.frame_index = 0
        self.frame_timer = 0.0

    def apply_jump(self, config: GameConfig) -> None:
        """Replace the current velocity with the upward jump impulse."""
        self.velocity = config.jump_impulse

    def integrate(self, dt: float, config: GameConfig, floor_y: float, clamp_floor: bool = True) -> BodyContact:
        """
        Apply gravity for dt nominal frames.

        Args:
            dt: Normalized frame delta
            config: Current physics constants
            floor_y: Y coordinate of the floor boundary
            clamp_floor: Clamp to and report the floor. When False floor
                contact is left to the collision scorer.

        Returns:
            The boundaries touched during this step
        """
        self.velocity += config.gravity * dt
        if self.velocity > config.terminal_velocity:
            self.velocity = config.terminal_velocity
        self.y += self.velocity * dt

        floor = False
        if clamp_floor and self.y + self.height > floor_y:
            self.y = floor_y - self.height
            floor = True

        ceiling = False
        top_limit = -self.height / 2
        if self.y < top_limit:
            self.y = top_limit
            self.velocity = 0.0
            ceiling = True

        return BodyContact(floor=floor, ceiling=ceiling)

    def animate(self, elapsed_ms: float) -> None:
        """Advance the wing cycle by one step once the frame interval has elapsed."""
        self.frame_timer += elapsed_ms
        if self.frame_timer > self.frame_interval_ms:
            self.frame_index = (self.frame_index + 1) % len(ANIMATION_SEQUENCE)
            self.frame_timer = 0.0
