"""Gameplay constants derived from settings and the current viewport."""

from dataclasses import dataclass

from flappy_dragon.config.settings import Settings


@dataclass(frozen=True)
class Viewport:
    """Drawable area in pixels."""
    width: float = 0.0
    height: float = 0.0

    @property
    def is_valid(self) -> bool:
        return self.width > 0 and self.height > 0


@dataclass(frozen=True)
class GameConfig:
    """Per-frame physics and obstacle constants.

    Motion values are in pixels per nominal frame; times are milliseconds.
    """
    gravity: float
    jump_impulse: float
    terminal_velocity: float
    obstacle_speed: float
    obstacle_gap: float
    obstacle_width: float
    obstacle_min_height: float
    spawn_interval_ms: float
    hit_padding_ratio: float
    hit_padding_y_scale: float = 1.0


def derive_config(settings: Settings, viewport: Viewport) -> GameConfig:
    """
    Compute the GameConfig for a viewport.

    With absolute scaling the settings are used as-is. With relative scaling
    vertical quantities follow viewport height and horizontal ones follow
    viewport width, both measured against the reference viewport. An invalid
    viewport falls back to the unscaled values.
    """
    sx = sy = 1.0
    if settings.is_relative and viewport.is_valid:
        sx = viewport.width / settings.reference_width
        sy = viewport.height / settings.reference_height

    physics = settings.physics
    obstacles = settings.obstacles
    return GameConfig(
        gravity=physics.gravity * sy,
        jump_impulse=physics.jump_impulse * sy,
        terminal_velocity=physics.terminal_velocity * sy,
        obstacle_speed=obstacles.speed * sx,
        obstacle_gap=obstacles.gap * sy,
        obstacle_width=obstacles.width * sx,
        obstacle_min_height=obstacles.min_height * sy,
        spawn_interval_ms=obstacles.spawn_interval_ms,
        hit_padding_ratio=settings.player.hit_padding_ratio,
        hit_padding_y_scale=settings.player.hit_padding_y_scale,
    )
