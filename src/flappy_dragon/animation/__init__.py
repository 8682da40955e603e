"""Animation module for Flappy Dragon."""

from flappy_dragon.animation.particles import (
    BurstConfig,
    Particle,
    ParticlePresets,
    ParticleSystem,
    advance_particle,
    is_expired,
)

__all__ = [
    "BurstConfig",
    "Particle",
    "ParticlePresets",
    "ParticleSystem",
    "advance_particle",
    "is_expired",
]
