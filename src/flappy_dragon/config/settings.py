"""
Game settings using Pydantic.

Settings are loaded from environment variables with .env file support.
Nested sections use a double underscore, e.g. FLAPPY_PHYSICS__GRAVITY=0.4.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PhysicsSettings(BaseModel):
    """Player physics, in units per nominal frame."""

    gravity: float = Field(default=0.3, gt=0.0)
    jump_impulse: float = Field(default=-8.0, lt=0.0)
    terminal_velocity: float = Field(default=10.0, gt=0.0)


class ObstacleSettings(BaseModel):
    """Obstacle geometry and spawning."""

    speed: float = Field(default=3.0, ge=0.0)
    gap: float = Field(default=150.0, gt=0.0)
    width: float = Field(default=50.0, gt=0.0)
    min_height: float = Field(default=50.0, ge=0.0)
    spawn_interval_ms: float = Field(default=2000.0, gt=0.0)


class PlayerSettings(BaseModel):
    """Player body geometry and collision forgiveness."""

    # Body height as a fraction of viewport width
    size_ratio: float = Field(default=0.16, gt=0.0)
    # Sprite aspect ratio (width / height)
    aspect_ratio: float = Field(default=166 / 129, gt=0.0)
    hit_padding_ratio: float = Field(default=0.25, ge=0.0, lt=0.5)
    hit_padding_y_scale: float = Field(default=1.0, ge=0.0)
    frame_interval_ms: float = Field(default=60.0, gt=0.0)


class TimingSettings(BaseModel):
    """Frame timing and mode delays."""

    fps: int = Field(default=60, gt=0)
    max_delta_ms: float = Field(default=100.0, gt=0.0)
    countdown_from: int = Field(default=3, ge=1)
    countdown_interval_ms: float = Field(default=1000.0, gt=0.0)
    death_delay_ms: float = Field(default=1000.0, ge=0.0)

    @property
    def target_frame_ms(self) -> float:
        """Nominal frame duration in milliseconds."""
        return 1000.0 / self.fps


class WindowSettings(BaseModel):
    """Desktop window settings."""

    width: int = 400
    height: int = 600
    title: str = "Flappy Dragon"
    fullscreen: bool = False


class Settings(BaseSettings):
    """Main game settings."""

    model_config = SettingsConfigDict(
        env_prefix="FLAPPY_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    debug: bool = False

    # "absolute" keeps the physics constants fixed; "relative" rescales them
    # from the current viewport against the reference viewport below.
    scaling: Literal["absolute", "relative"] = "absolute"
    reference_width: float = Field(default=400.0, gt=0.0)
    reference_height: float = Field(default=600.0, gt=0.0)

    # Which component reports floor contact
    floor_collision: Literal["physics", "scorer"] = "physics"
    ceiling_is_lethal: bool = False

    max_particles: int = Field(default=512, ge=0)

    # Paths
    data_path: Path = Field(default_factory=lambda: Path.home() / ".flappy_dragon")

    # Nested settings
    physics: PhysicsSettings = Field(default_factory=PhysicsSettings)
    obstacles: ObstacleSettings = Field(default_factory=ObstacleSettings)
    player: PlayerSettings = Field(default_factory=PlayerSettings)
    timing: TimingSettings = Field(default_factory=TimingSettings)
    window: WindowSettings = Field(default_factory=WindowSettings)

    @property
    def is_relative(self) -> bool:
        """Check if physics scales with the viewport."""
        return self.scaling == "relative"

    @property
    def high_score_file(self) -> Path:
        """Path to the persisted high score."""
        return self.data_path / "highscore.json"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
