"""Basic drawing primitives for frame buffers."""

from typing import Tuple
import numpy as np
from numpy.typing import NDArray

# Type aliases
Color = Tuple[int, int, int]
Buffer = NDArray[np.uint8]


def new_buffer(width: int, height: int) -> Buffer:
    """Allocate a black (height, width, 3) buffer."""
    return np.zeros((max(0, height), max(0, width), 3), dtype=np.uint8)


def fill(buffer: Buffer, color: Color) -> None:
    """Fill entire buffer with color."""
    buffer[:, :] = color


def draw_rect(
    buffer: Buffer,
    x: int,
    y: int,
    width: int,
    height: int,
    color: Color,
    filled: bool = True,
    thickness: int = 1,
) -> None:
    """Draw a rectangle on the buffer.

    Args:
        buffer: Target numpy array (height, width, 3)
        x: Left edge x coordinate
        y: Top edge y coordinate
        width: Rectangle width
        height: Rectangle height
        color: RGB color tuple
        filled: If True, fill rectangle; if False, draw outline only
        thickness: Line thickness for outline (when filled=False)
    """
    h, w = buffer.shape[:2]

    # Clamp to buffer bounds
    x1 = max(0, min(x, w))
    y1 = max(0, min(y, h))
    x2 = max(0, min(x + width, w))
    y2 = max(0, min(y + height, h))
    if x1 >= x2 or y1 >= y2:
        return

    if filled:
        buffer[y1:y2, x1:x2] = color
        return

    t = max(1, thickness)
    buffer[y1:min(y1 + t, y2), x1:x2] = color
    buffer[max(y2 - t, y1):y2, x1:x2] = color
    buffer[y1:y2, x1:min(x1 + t, x2)] = color
    buffer[y1:y2, max(x2 - t, x1):x2] = color


def blend_rect(
    buffer: Buffer,
    x: int,
    y: int,
    width: int,
    height: int,
    color: Color,
    alpha: float,
) -> None:
    """Alpha-blend a filled rectangle over the buffer."""
    h, w = buffer.shape[:2]
    x1, y1 = max(0, x), max(0, y)
    x2, y2 = min(w, x + width), min(h, y + height)
    if x1 >= x2 or y1 >= y2 or alpha <= 0:
        return

    a = min(1.0, alpha)
    region = buffer[y1:y2, x1:x2].astype(np.float32)
    region = region * (1.0 - a) + np.array(color, dtype=np.float32) * a
    buffer[y1:y2, x1:x2] = region.astype(np.uint8)


def draw_circle(
    buffer: Buffer,
    cx: int,
    cy: int,
    radius: int,
    color: Color,
    alpha: float = 1.0,
) -> None:
    """Draw a filled circle, alpha-blended when alpha < 1."""
    h, w = buffer.shape[:2]
    if radius <= 0 or alpha <= 0:
        return

    # Work in the circle's bounding box only
    x1, x2 = max(0, cx - radius), min(w, cx + radius + 1)
    y1, y2 = max(0, cy - radius), min(h, cy + radius + 1)
    if x1 >= x2 or y1 >= y2:
        return

    y_idx, x_idx = np.ogrid[y1:y2, x1:x2]
    mask = (x_idx - cx) ** 2 + (y_idx - cy) ** 2 <= radius ** 2
    region = buffer[y1:y2, x1:x2]

    if alpha >= 1.0:
        region[mask] = color
    else:
        blended = region[mask].astype(np.float32) * (1.0 - alpha) + np.array(color, dtype=np.float32) * alpha
        region[mask] = blended.astype(np.uint8)
