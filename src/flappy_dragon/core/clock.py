"""Frame clock producing a capped, normalized time delta."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class FrameDelta:
    """Elapsed time for one frame.

    Attributes:
        raw_ms: Wall-clock time since the previous frame
        effective_ms: Time actually simulated this frame
        dt: effective_ms expressed in nominal frames (1.0 = one frame)
    """
    raw_ms: float = 0.0
    effective_ms: float = 0.0
    dt: float = 0.0


class FrameClock:
    """
    Turns frame timestamps into frame-rate independent deltas.

    A delta above max_delta_ms (tab in background, debugger pause) is
    replaced by a single nominal frame so the simulation never takes a
    huge step.
    """

    def __init__(self, target_frame_ms: float = 1000.0 / 60, max_delta_ms: float = 100.0) -> None:
        self.target_frame_ms = target_frame_ms
        self.max_delta_ms = max_delta_ms
        self._last_timestamp: Optional[float] = None

    def tick(self, timestamp_ms: float) -> FrameDelta:
        """Advance to a new frame timestamp (milliseconds)."""
        if self._last_timestamp is None:
            self._last_timestamp = timestamp_ms
            return FrameDelta()

        raw = max(0.0, timestamp_ms - self._last_timestamp)
        self._last_timestamp = timestamp_ms
        return self.normalize(raw)

    def normalize(self, raw_ms: float) -> FrameDelta:
        """Build a FrameDelta from a raw delta without touching clock state."""
        raw = max(0.0, raw_ms)
        effective = self.target_frame_ms if raw > self.max_delta_ms else raw
        return FrameDelta(raw_ms=raw, effective_ms=effective, dt=effective / self.target_frame_ms)

    def reset(self) -> None:
        """Forget the previous timestamp."""
        self._last_timestamp = None
