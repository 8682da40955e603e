"""Audio cues for Flappy Dragon."""

from flappy_dragon.audio.engine import AudioEngine, GameAudio, get_audio_engine

__all__ = ["AudioEngine", "GameAudio", "get_audio_engine"]
