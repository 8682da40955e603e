"""High score persistence."""

from flappy_dragon.persistence.highscore import JsonHighScoreStore, MemoryHighScoreStore

__all__ = ["JsonHighScoreStore", "MemoryHighScoreStore"]
