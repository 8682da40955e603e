"""
Desktop game window using pygame.

Drives the session from the frame loop: pump events, step the world,
draw the snapshot, overlay menus and score text.
"""

import pygame
import asyncio
import logging
from typing import Optional

from flappy_dragon.config.settings import WindowSettings
from flappy_dragon.core.session import Session, SessionSnapshot
from flappy_dragon.core.state import GameState
from flappy_dragon.graphics.renderer import Renderer
from flappy_dragon.audio.engine import AudioEngine
from flappy_dragon.simulator.input import InputMapper

logger = logging.getLogger(__name__)

TEXT_COLOR = (255, 255, 255)
ACCENT_COLOR = (0, 240, 255)
DIM_COLOR = (0, 0, 0)


class GameWindow:
    """
    Resizable game window.

    Keyboard Mapping:
        SPACE / UP: Jump (start, retry, resume)
        P / ESC: Pause / resume
        M: Toggle mute
        Q: Quit
    Mouse click or touch: Jump
    """

    def __init__(
        self,
        session: Session,
        config: Optional[WindowSettings] = None,
        audio_engine: Optional[AudioEngine] = None,
        fps: int = 60,
    ) -> None:
        self.session = session
        self.config = config or WindowSettings()
        self.audio_engine = audio_engine
        self.fps = fps

        self.renderer = Renderer()
        self.input = InputMapper(self.session.handle_action)

        self._screen: Optional[pygame.Surface] = None
        self._clock: Optional[pygame.time.Clock] = None
        self._font: Optional[pygame.font.Font] = None
        self._title_font: Optional[pygame.font.Font] = None
        self._running = False
        self._frame_count = 0

        logger.info("GameWindow created")

    def _init_pygame(self) -> None:
        """Initialize pygame and create window."""
        pygame.init()
        pygame.display.set_caption(self.config.title)

        flags = pygame.RESIZABLE
        if self.config.fullscreen:
            flags |= pygame.FULLSCREEN

        self._screen = pygame.display.set_mode((self.config.width, self.config.height), flags)
        self._clock = pygame.time.Clock()

        pygame.font.init()
        self._font = pygame.font.SysFont(None, 28)
        self._title_font = pygame.font.SysFont(None, 56)

        width, height = self._screen.get_size()
        self.session.handle_resize(width, height)
        logger.info(f"Pygame initialized: {width}x{height}")

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.VIDEORESIZE:
                self.session.handle_resize(event.w, event.h)

            elif event.type == pygame.KEYDOWN and event.key == pygame.K_q:
                self._running = False

            elif event.type == pygame.KEYDOWN and event.key == pygame.K_m:
                if self.audio_engine:
                    self.audio_engine.toggle_mute()

            else:
                self.input.handle_event(event)

    def _render(self) -> None:
        """Render the world and overlays."""
        if not self._screen:
            return

        snapshot = self.session.snapshot()
        buffer = self.renderer.render(snapshot)
        if buffer.size:
            surface = pygame.surfarray.make_surface(buffer.swapaxes(0, 1))
            self._screen.blit(surface, (0, 0))

        self._render_overlay(snapshot)
        pygame.display.flip()

    def _render_overlay(self, snapshot: SessionSnapshot) -> None:
        state = snapshot.state

        if state in (GameState.RUNNING, GameState.DYING):
            self._draw_text(str(snapshot.score), self._title_font, snapshot.viewport.height / 10)
            return

        self._dim()
        mid = snapshot.viewport.height / 2

        if state == GameState.MENU:
            self._draw_text("FLAPPY DRAGON", self._title_font, mid - 60, ACCENT_COLOR)
            self._draw_text(f"BEST: {snapshot.high_score}", self._font, mid)
            self._draw_text("Press SPACE to start", self._font, mid + 40)
        elif state == GameState.PAUSED:
            self._draw_text("Paused", self._title_font, mid - 60, ACCENT_COLOR)
            self._draw_text("Taking a break?", self._font, mid)
            self._draw_text("Press SPACE to resume", self._font, mid + 40)
        elif state == GameState.COUNTDOWN:
            self._draw_text(str(snapshot.countdown), self._title_font, mid, ACCENT_COLOR)
            self._draw_text("Get ready", self._font, mid + 50)
        elif state == GameState.GAME_OVER:
            self._draw_text("uh oh!", self._title_font, mid - 60, ACCENT_COLOR)
            self._draw_text(f"SCORE: {snapshot.score}  |  BEST: {snapshot.high_score}", self._font, mid)
            self._draw_text("Press SPACE to try again", self._font, mid + 40)

    def _dim(self) -> None:
        veil = pygame.Surface(self._screen.get_size(), pygame.SRCALPHA)
        veil.fill((*DIM_COLOR, 140))
        self._screen.blit(veil, (0, 0))

    def _draw_text(self, text: str, font: Optional[pygame.font.Font], y: float, color=TEXT_COLOR) -> None:
        if not font or not self._screen:
            return
        surface = font.render(text, True, color)
        rect = surface.get_rect(center=(self._screen.get_width() // 2, int(y)))
        self._screen.blit(surface, rect)

    async def run(self) -> None:
        """Main game loop."""
        self._init_pygame()
        self._running = True

        logger.info("Game started")

        while self._running:
            self._handle_events()
            self.session.update(pygame.time.get_ticks())
            self._render()

            if self._clock:
                self._clock.tick(self.fps)
            self._frame_count += 1

            # Yield to other tasks
            await asyncio.sleep(0)

        self._cleanup()

    def _cleanup(self) -> None:
        """Clean up pygame resources."""
        if self.audio_engine:
            self.audio_engine.cleanup()
        pygame.quit()
        logger.info(f"Game stopped after {self._frame_count} frames")
