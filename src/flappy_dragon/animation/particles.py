"""Particle system for visual effects.

Particles are plain records; advancing and expiring them are pure
functions, and ParticleSystem only owns the collection.
"""

from typing import Optional, List, Tuple
from dataclasses import dataclass, replace
import random

Color = Tuple[int, int, int]


@dataclass(frozen=True)
class Particle:
    """A single fading particle. Motion is per nominal frame."""

    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    size: float = 1.0
    alpha: float = 1.0
    decay: float = 0.02  # alpha lost per nominal frame
    color: Color = (255, 255, 255)


def advance_particle(particle: Particle, dt: float) -> Particle:
    """Move by velocity * dt and fade by decay * dt."""
    return replace(
        particle,
        x=particle.x + particle.vx * dt,
        y=particle.y + particle.vy * dt,
        alpha=particle.alpha - particle.decay * dt,
    )


def is_expired(particle: Particle) -> bool:
    """A particle is gone once fully transparent."""
    return particle.alpha <= 0


@dataclass(frozen=True)
class BurstConfig:
    """Randomization ranges for a burst."""

    count: int = 20
    speed: float = 4.0
    size_min: float = 2.0
    size_max: float = 6.0
    decay_min: float = 0.01
    decay_max: float = 0.03


class ParticleSystem:
    """
    Owns the live particles.

    Independent of the game state: it is advanced every frame so effects
    keep animating through death and game over.
    """

    def __init__(self, rng: Optional[random.Random] = None, max_particles: int = 512) -> None:
        self._rng = rng or random.Random()
        self.max_particles = max_particles
        self.particles: List[Particle] = []

    def __len__(self) -> int:
        return len(self.particles)

    def spawn_burst(
        self,
        origin: Tuple[float, float],
        color: Color,
        count: Optional[int] = None,
        config: Optional[BurstConfig] = None,
    ) -> int:
        """
        Create particles at origin with random velocity, size and decay.

        Returns:
            Number of particles actually created (capped by max_particles)
        """
        cfg = config or BurstConfig()
        wanted = cfg.count if count is None else count
        room = max(0, self.max_particles - len(self.particles))
        created = min(wanted, room)

        ox, oy = origin
        rng = self._rng
        for _ in range(created):
            self.particles.append(Particle(
                x=ox,
                y=oy,
                vx=rng.uniform(-cfg.speed, cfg.speed),
                vy=rng.uniform(-cfg.speed, cfg.speed),
                size=rng.uniform(cfg.size_min, cfg.size_max),
                alpha=1.0,
                decay=rng.uniform(cfg.decay_min, cfg.decay_max),
                color=color,
            ))
        return created

    def advance(self, dt: float) -> None:
        """Advance every particle and drop the expired ones."""
        advanced = (advance_particle(p, dt) for p in self.particles)
        self.particles = [p for p in advanced if not is_expired(p)]

    def snapshot(self) -> Tuple[Particle, ...]:
        return tuple(self.particles)


class ParticlePresets:
    """Factory for the game's burst effects."""

    @staticmethod
    def explosion() -> BurstConfig:
        """Death burst around the dragon."""
        return BurstConfig(count=40, speed=6.0, size_min=3.0, size_max=8.0,
                           decay_min=0.012, decay_max=0.025)

    @staticmethod
    def score_sparkle() -> BurstConfig:
        """Small fast-fading sparkle when an obstacle is cleared."""
        return BurstConfig(count=8, speed=2.5, size_min=1.0, size_max=3.0,
                           decay_min=0.04, decay_max=0.08)

    EXPLOSION_COLOR: Color = (255, 120, 40)
    SPARKLE_COLOR: Color = (0, 240, 255)
