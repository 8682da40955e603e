"""
Flappy Dragon audio engine - synthesized chiptune cues.

Sounds are generated at startup from simple waveforms, so no audio
files are needed. If the mixer cannot start the engine stays silent
and the game carries on.
"""

import pygame
import array
import math
import logging
from typing import Dict, Optional

from flappy_dragon.core.hooks import AudioNotifier

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100


def square(t: float, freq: float) -> float:
    """Square wave oscillator."""
    return 1 if (t * freq) % 1 < 0.5 else -1


def triangle(t: float, freq: float) -> float:
    """Triangle wave oscillator."""
    p = (t * freq) % 1
    return 4 * abs(p - 0.5) - 1


def sine(t: float, freq: float) -> float:
    """Sine wave oscillator."""
    return math.sin(2 * math.pi * freq * t)


class AudioEngine:
    """Generates and plays the game's sound effects."""

    # Per-cue volumes
    VOLUMES = {
        "jump": 0.2,
        "point": 0.3,
        "death": 0.4,
        "countdown_tick": 0.3,
        "countdown_go": 0.3,
    }

    def __init__(self) -> None:
        self._initialized = False
        self._sounds: Dict[str, pygame.mixer.Sound] = {}
        self._muted = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def init(self) -> bool:
        """Initialize the mixer and generate all sounds."""
        try:
            pygame.mixer.pre_init(SAMPLE_RATE, -16, 2, 512)
            pygame.mixer.init()
            self._initialized = True
            self._generate_all_sounds()
            logger.info(f"Audio engine initialized with {len(self._sounds)} sounds")
            return True
        except Exception as e:
            logger.error(f"Failed to initialize audio: {e}")
            self._initialized = False
            return False

    def _create_sound(self, samples: array.array) -> pygame.mixer.Sound:
        """Create a pygame Sound from mono samples (auto-converted to stereo)."""
        stereo = array.array('h')
        for s in samples:
            stereo.append(s)
            stereo.append(s)
        return pygame.mixer.Sound(buffer=stereo)

    def _generate_all_sounds(self) -> None:
        self._sounds["jump"] = self._create_sound(jump_samples())
        self._sounds["point"] = self._create_sound(point_samples())
        self._sounds["death"] = self._create_sound(death_samples())
        self._sounds["countdown_tick"] = self._create_sound(countdown_tick_samples())
        self._sounds["countdown_go"] = self._create_sound(countdown_go_samples())

    def play(self, sound_name: str) -> Optional[pygame.mixer.Channel]:
        """Play a sound effect, restarting it if already playing."""
        if not self._initialized or self._muted:
            return None

        sound = self._sounds.get(sound_name)
        if not sound:
            logger.warning(f"Sound not found: {sound_name}")
            return None

        sound.stop()
        sound.set_volume(self.VOLUMES.get(sound_name, 1.0))
        return sound.play()

    def toggle_mute(self) -> bool:
        """Toggle mute state."""
        self._muted = not self._muted
        logger.info("Audio muted" if self._muted else "Audio unmuted")
        return self._muted

    def cleanup(self) -> None:
        """Cleanup audio resources."""
        if self._initialized:
            pygame.mixer.quit()
            self._initialized = False
            logger.info("Audio engine cleaned up")


# ===== SOUND SYNTHESIS =====

def jump_samples() -> array.array:
    """Quick rising chirp."""
    samples = array.array('h')
    for i in range(int(SAMPLE_RATE * 0.12)):
        t = i / SAMPLE_RATE
        freq = 300 + t * 3000
        env = max(0, 1 - t * 8)
        val = square(t, freq) * 0.3
        samples.append(int(val * env * 32767))
    return samples


def point_samples() -> array.array:
    """Two-note coin blip."""
    samples = array.array('h')
    for i in range(int(SAMPLE_RATE * 0.15)):
        t = i / SAMPLE_RATE
        freq = 988 if t < 0.05 else 1319
        env = max(0, 1 - t * 6)
        val = square(t, freq) * 0.25
        samples.append(int(val * env * 32767))
    return samples


def death_samples() -> array.array:
    """Falling crunch."""
    samples = array.array('h')
    for i in range(int(SAMPLE_RATE * 0.5)):
        t = i / SAMPLE_RATE
        freq = 400 - t * 600
        env = max(0, 1 - t * 2)
        val = square(t, max(60, freq)) * 0.3 + triangle(t, 55) * 0.2
        samples.append(int(val * env * 32767))
    return samples


def countdown_tick_samples() -> array.array:
    """Countdown tick."""
    samples = array.array('h')
    for i in range(int(SAMPLE_RATE * 0.05)):
        t = i / SAMPLE_RATE
        env = max(0, 1 - t * 25)
        val = sine(t, 1000) * 0.2
        samples.append(int(val * env * 32767))
    return samples


def countdown_go_samples() -> array.array:
    """GO! chord with rising sweep."""
    samples = array.array('h')
    for i in range(int(SAMPLE_RATE * 0.3)):
        t = i / SAMPLE_RATE
        env = max(0, 1 - t * 3.3)
        val = (square(t, 523) + square(t, 659) + square(t, 784)) * 0.12
        val += sine(t, 300 + t * 1500) * 0.1
        samples.append(int(val * env * 32767))
    return samples


class GameAudio(AudioNotifier):
    """Maps session sound cues onto AudioEngine sounds."""

    def __init__(self, engine: "AudioEngine") -> None:
        self.engine = engine

    def on_jump(self) -> None:
        self.engine.play("jump")

    def on_score(self) -> None:
        self.engine.play("point")

    def on_collision(self) -> None:
        self.engine.play("death")

    def on_countdown_tick(self, count: int) -> None:
        self.engine.play("countdown_tick" if count > 0 else "countdown_go")


# Global audio engine instance
_audio_engine: Optional[AudioEngine] = None


def get_audio_engine() -> AudioEngine:
    """Get the global audio engine instance."""
    global _audio_engine
    if _audio_engine is None:
        _audio_engine = AudioEngine()
    return _audio_engine
