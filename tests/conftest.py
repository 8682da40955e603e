"""Shared fixtures for Flappy Dragon tests."""

import random

import pytest

from flappy_dragon.config.settings import Settings
from flappy_dragon.core.config import Viewport, derive_config
from flappy_dragon.core.hooks import AudioNotifier
from flappy_dragon.core.session import Session
from flappy_dragon.persistence.highscore import MemoryHighScoreStore

FRAME_MS = 1000.0 / 60


class RecordingStore(MemoryHighScoreStore):
    """In-memory store that remembers every save."""

    def __init__(self, initial=None) -> None:
        super().__init__(initial)
        self.saves: list[int] = []

    def save_high_score(self, score: int) -> None:
        super().save_high_score(score)
        self.saves.append(score)


class RecordingAudio(AudioNotifier):
    """Collects cue names in order."""

    def __init__(self) -> None:
        self.cues: list[str] = []

    def on_jump(self) -> None:
        self.cues.append("jump")

    def on_score(self) -> None:
        self.cues.append("score")

    def on_collision(self) -> None:
        self.cues.append("collision")

    def on_countdown_tick(self, count: int) -> None:
        self.cues.append(f"countdown:{count}")


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def viewport() -> Viewport:
    return Viewport(400, 500)


@pytest.fixture
def config(settings, viewport):
    return derive_config(settings, viewport)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def audio() -> RecordingAudio:
    return RecordingAudio()


@pytest.fixture
def session(settings, store, audio, rng) -> Session:
    return Session(settings=settings, store=store, audio=audio, rng=rng, viewport=(400, 500))


def step_ms(session: Session, ms: float, frames: int = 1) -> None:
    """Step the session by a fixed raw delta, bypassing wall-clock timestamps."""
    for _ in range(frames):
        session.step(session.clock.normalize(ms))
