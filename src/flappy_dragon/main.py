"""
Main entry point for Flappy Dragon.

Loads settings, wires persistence and audio into a session and opens
the game window.
"""

import asyncio
import logging
from pathlib import Path

from dotenv import load_dotenv

from flappy_dragon.audio.engine import GameAudio, get_audio_engine
from flappy_dragon.config.settings import get_settings
from flappy_dragon.core.session import Session
from flappy_dragon.persistence.highscore import JsonHighScoreStore


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


async def run_game() -> None:
    """Create the session and run the window until it closes."""
    from flappy_dragon.simulator.window import GameWindow

    logger = logging.getLogger(__name__)
    settings = get_settings()

    audio_engine = get_audio_engine()
    if not audio_engine.init():
        logger.warning("Audio unavailable, continuing without sound")

    session = Session(
        settings=settings,
        store=JsonHighScoreStore(settings.high_score_file),
        audio=GameAudio(audio_engine),
    )
    logger.info(f"Scaling: {settings.scaling}, floor collision: {settings.floor_collision}")

    window = GameWindow(
        session=session,
        config=settings.window,
        audio_engine=audio_engine,
        fps=settings.timing.fps,
    )
    await window.run()


def main() -> None:
    """Console script entry point."""
    load_dotenv(Path.cwd() / ".env")
    settings = get_settings()
    setup_logging(settings.debug)

    try:
        asyncio.run(run_game())
    except KeyboardInterrupt:
        logging.getLogger(__name__).info("Interrupted")


if __name__ == "__main__":
    main()
