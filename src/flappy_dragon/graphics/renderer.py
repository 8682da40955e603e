"""Draws session snapshots into numpy frame buffers.

No sprite assets are loaded; the dragon and obstacles are drawn with
placeholder shapes.
"""

from typing import Optional
import logging

import numpy as np

from flappy_dragon.core.session import SessionSnapshot
from flappy_dragon.core.state import GameState
from flappy_dragon.graphics.primitives import (
    Buffer, Color, blend_rect, draw_circle, draw_rect, fill, new_buffer
)

logger = logging.getLogger(__name__)

BACKGROUND: Color = (12, 10, 32)
OBSTACLE_FILL: Color = (0, 238, 255)
OBSTACLE_EDGE: Color = (0, 240, 255)
OBSTACLE_ALPHA = 0.77
PLAYER_BODY: Color = (255, 220, 0)
PLAYER_WING: Color = (255, 150, 0)


class Renderer:
    """Renders the world layer of a frame. Text overlays are the window's job."""

    def __init__(self) -> None:
        self._buffer: Optional[Buffer] = None

    def render(self, snapshot: SessionSnapshot) -> Buffer:
        """Draw a snapshot and return the (height, width, 3) buffer."""
        width = int(snapshot.viewport.width)
        height = int(snapshot.viewport.height)

        if self._buffer is None or self._buffer.shape[:2] != (height, width):
            self._buffer = new_buffer(width, height)
            logger.debug(f"Frame buffer reallocated: {width}x{height}")

        buffer = self._buffer
        fill(buffer, BACKGROUND)
        if width <= 0 or height <= 0:
            return buffer

        self._draw_obstacles(buffer, snapshot, height)
        # The body has no placement until the first run starts
        if snapshot.state != GameState.MENU:
            self._draw_player(buffer, snapshot)
        self._draw_particles(buffer, snapshot)
        return buffer

    def _draw_obstacles(self, buffer: Buffer, snapshot: SessionSnapshot, height: int) -> None:
        for obs in snapshot.obstacles:
            x = int(np.floor(obs.x))
            w = int(obs.width)
            top = int(obs.top_height)
            bottom = int(obs.bottom_y)

            blend_rect(buffer, x, 0, w, top, OBSTACLE_FILL, OBSTACLE_ALPHA)
            draw_rect(buffer, x, 0, w, top, OBSTACLE_EDGE, filled=False, thickness=3)
            blend_rect(buffer, x, bottom, w, height - bottom, OBSTACLE_FILL, OBSTACLE_ALPHA)
            draw_rect(buffer, x, bottom, w, height - bottom, OBSTACLE_EDGE, filled=False, thickness=3)

    def _draw_player(self, buffer: Buffer, snapshot: SessionSnapshot) -> None:
        player = snapshot.player
        if player.width <= 0 or player.height <= 0:
            return

        x, y = int(player.x), int(player.y)
        w, h = int(player.width), int(player.height)
        draw_rect(buffer, x, y, w, h, PLAYER_BODY, filled=True)

        # Wing height follows the flap cycle, frames 0..6
        wing_h = max(1, int(h * (0.2 + 0.08 * player.sprite_frame)))
        draw_rect(buffer, x + w // 4, y + h // 2 - wing_h // 2, w // 2, wing_h, PLAYER_WING, filled=True)

        # Eye shifts with tilt
        eye_y = y + h // 3 + int(player.tilt * h * 0.2)
        draw_rect(buffer, x + w - w // 4, eye_y, max(1, w // 10), max(1, h // 10), (20, 20, 20), filled=True)

    def _draw_particles(self, buffer: Buffer, snapshot: SessionSnapshot) -> None:
        for p in snapshot.particles:
            draw_circle(buffer, int(p.x), int(p.y), max(1, int(p.size / 2)), p.color, alpha=p.alpha)
