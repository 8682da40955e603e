"""
Interfaces for collaborators outside the simulation core.

The core calls these; it never depends on what they do.
"""

from abc import ABC, abstractmethod
from typing import Optional


class AudioNotifier(ABC):
    """Fire-and-forget sound cues. Every method defaults to silence."""

    def on_jump(self) -> None:
        pass

    def on_score(self) -> None:
        pass

    def on_collision(self) -> None:
        pass

    def on_countdown_tick(self, count: int) -> None:
        pass


class HighScoreStore(ABC):
    """Persistent storage for the best score."""

    @abstractmethod
    def load_high_score(self) -> Optional[int]:
        """Return the stored high score, or None if absent or unreadable."""
        pass

    @abstractmethod
    def save_high_score(self, score: int) -> None:
        """Store a new high score. Must not raise."""
        pass
