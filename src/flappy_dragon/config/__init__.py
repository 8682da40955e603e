"""Configuration for Flappy Dragon."""

from flappy_dragon.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
