"""Flappy Dragon: single-lane obstacle-avoidance arcade game."""

__version__ = "0.1.0"
