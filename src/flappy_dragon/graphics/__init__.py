"""Frame buffer rendering."""

from flappy_dragon.graphics.renderer import Renderer

__all__ = ["Renderer"]
