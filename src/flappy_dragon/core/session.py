"""
Session: the single mutable game world.

Owns every simulation component plus score and high score, and runs
one frame at a time from an external per-frame callback:

    clock tick -> mode counters -> (if running) jump, integrate, spawn,
    scroll, cull, collide/score -> particles

Renderers read snapshot(); sound and other observers subscribe to
session.events.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, List, Optional, Sequence, Tuple
import logging
import random

from flappy_dragon.animation.particles import Particle, ParticlePresets, ParticleSystem
from flappy_dragon.config.settings import Settings, get_settings
from flappy_dragon.core.clock import FrameClock, FrameDelta
from flappy_dragon.core.collision import CollisionReason, CollisionScorer
from flappy_dragon.core.config import GameConfig, Viewport, derive_config
from flappy_dragon.core.events import Event, EventBus, EventType
from flappy_dragon.core.hooks import AudioNotifier, HighScoreStore
from flappy_dragon.core.obstacles import Obstacle, ObstacleField, ObstacleSnapshot
from flappy_dragon.core.player import BodyContact, PlayerBody
from flappy_dragon.core.state import Countdown, DelayTimer, GameState, StateMachine

logger = logging.getLogger(__name__)


class Action(Enum):
    """Debounced player intents."""
    JUMP = auto()
    PAUSE = auto()


@dataclass(frozen=True)
class PlayerSnapshot:
    x: float
    y: float
    width: float
    height: float
    velocity: float
    tilt: float
    sprite_frame: int


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of one frame, for renderers."""
    state: GameState
    score: int
    high_score: int
    countdown: int
    viewport: Viewport
    player: PlayerSnapshot
    obstacles: Tuple[ObstacleSnapshot, ...]
    particles: Tuple[Particle, ...]


class Session:
    """
    The game world.

    Args:
        settings: Game settings (defaults to get_settings())
        store: High score persistence (defaults to in-memory)
        audio: Optional sound cue receiver
        rng: Random source for obstacles and particles
        viewport: Optional initial (width, height)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        store: Optional[HighScoreStore] = None,
        audio: Optional[AudioNotifier] = None,
        rng: Optional[random.Random] = None,
        viewport: Optional[Tuple[float, float]] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.rng = rng or random.Random()
        timing = self.settings.timing

        self.events = EventBus()
        self.state_machine = StateMachine()
        self.state_machine.add_listener(self._on_state_changed)

        self.clock = FrameClock(timing.target_frame_ms, timing.max_delta_ms)
        self.viewport = Viewport()
        self.config: GameConfig = derive_config(self.settings, self.viewport)

        self.player = PlayerBody(frame_interval_ms=self.settings.player.frame_interval_ms)
        self.obstacles = ObstacleField(self.rng)
        self.scorer = CollisionScorer(
            floor_mode=self.settings.floor_collision,
            ceiling_is_lethal=self.settings.ceiling_is_lethal,
        )
        self.particles = ParticleSystem(self.rng, self.settings.max_particles)
        self.countdown = Countdown(timing.countdown_from, timing.countdown_interval_ms)
        self.death_timer = DelayTimer(timing.death_delay_ms)

        if store is None:
            from flappy_dragon.persistence.highscore import MemoryHighScoreStore
            store = MemoryHighScoreStore()
        self.store = store
        self.score = 0
        self.high_score = self._load_high_score()
        self._jump_requested = False
        # reset() ran before any valid viewport; place the body on the next resize
        self._placement_pending = False

        if audio is not None:
            self.attach_audio(audio)
        if viewport is not None:
            self.handle_resize(*viewport)

    @property
    def state(self) -> GameState:
        return self.state_machine.state

    @property
    def floor_y(self) -> float:
        return self.viewport.height

    # ===== EXTERNAL INPUT =====

    def handle_action(self, action: Action) -> bool:
        """
        Apply a debounced action.

        Returns:
            True if the action did something, False if it was dropped
        """
        state = self.state

        if state == GameState.DYING:
            logger.debug(f"{action.name} dropped while dying")
            return False

        if action == Action.JUMP:
            if state in (GameState.MENU, GameState.GAME_OVER):
                return self.start_run()
            if state == GameState.RUNNING:
                # Consumed at the start of the next simulated frame
                self._jump_requested = True
                return True
            if state == GameState.PAUSED:
                return self._begin_countdown()

        elif action == Action.PAUSE:
            if state == GameState.RUNNING:
                self._jump_requested = False
                return self.state_machine.transition(GameState.PAUSED)
            if state == GameState.PAUSED:
                return self._begin_countdown()
            if state == GameState.COUNTDOWN:
                self.countdown.cancel()
                return self.state_machine.transition(GameState.PAUSED)

        logger.debug(f"{action.name} ignored in {state.name}")
        return False

    def handle_resize(self, width: float, height: float) -> bool:
        """
        Recompute viewport-derived geometry. Valid in every state.

        Returns:
            False if the size was invalid and the recompute was deferred
        """
        viewport = Viewport(width, height)
        if not viewport.is_valid:
            logger.warning(f"Ignoring invalid viewport {width}x{height}")
            return False

        self.viewport = viewport
        self.config = derive_config(self.settings, viewport)
        self.player.resize(
            viewport,
            self.settings.player.size_ratio,
            self.settings.player.aspect_ratio,
        )
        if self._placement_pending:
            self._placement_pending = False
            self.player.reset(viewport)
        logger.debug(f"Viewport resized to {width}x{height}")
        self.events.emit(Event(EventType.RESIZE, data={"width": width, "height": height}))
        return True

    # ===== FRAME UPDATE =====

    def update(self, timestamp_ms: float) -> FrameDelta:
        """Per-frame entry point: tick the clock and step the world."""
        delta = self.clock.tick(timestamp_ms)
        self.step(delta)
        return delta

    def step(self, delta: FrameDelta) -> None:
        """Advance the world by one frame delta."""
        state = self.state

        if state == GameState.COUNTDOWN:
            self._advance_countdown(delta.effective_ms)
        elif state == GameState.DYING:
            if self.death_timer.advance(delta.effective_ms):
                self.state_machine.transition(GameState.GAME_OVER)
        elif state == GameState.RUNNING and self.viewport.is_valid:
            self._simulate(delta)

        self.particles.advance(delta.dt)

    def _simulate(self, delta: FrameDelta) -> None:
        config = self.config

        if self._jump_requested:
            self._jump_requested = False
            self.player.apply_jump(config)
            self.events.emit(Event(EventType.JUMP))

        self.player.animate(delta.effective_ms)
        contact = self.player.integrate(
            delta.dt,
            config,
            self.floor_y,
            clamp_floor=self.settings.floor_collision == "physics",
        )

        self.obstacles.try_spawn(delta.effective_ms, config, self.viewport)
        self.obstacles.advance(delta.dt, config.obstacle_speed)
        self.obstacles.cull()

        self._evaluate(contact)

    def _evaluate(self, contact: BodyContact) -> None:
        # One collision per life: nothing to evaluate once we left RUNNING
        if not self.state_machine.is_simulating:
            return

        outcome = self.scorer.evaluate(
            self.player, self.obstacles, self.config, contact, self.floor_y
        )
        for obstacle in outcome.passed:
            self._add_point(obstacle)
        if outcome.collided:
            self._on_collision(outcome.collisions)

    def _advance_countdown(self, elapsed_ms: float) -> None:
        for count in self.countdown.advance(elapsed_ms):
            self.events.emit(Event(EventType.COUNTDOWN_TICK, data={"count": count}))
            if count == 0:
                self.state_machine.transition(GameState.RUNNING)

    # ===== FLOW =====

    def reset(self) -> None:
        """Clear the world for a new run. Keeps the high score."""
        self.score = 0
        self.obstacles.clear()
        if self.viewport.is_valid:
            self.player.reset(self.viewport)
        else:
            self._placement_pending = True
        self.countdown.cancel()
        self.death_timer.cancel()
        self._jump_requested = False
        self.events.emit(Event(EventType.GAME_RESET))

    def start_run(self) -> bool:
        """Reset and enter RUNNING from MENU or GAME_OVER."""
        if self.state not in (GameState.MENU, GameState.GAME_OVER):
            return False
        self.reset()
        return self.state_machine.transition(GameState.RUNNING)

    def _begin_countdown(self) -> bool:
        if not self.state_machine.transition(GameState.COUNTDOWN):
            return False
        count = self.countdown.start()
        self.events.emit(Event(EventType.COUNTDOWN_TICK, data={"count": count}))
        return True

    def _add_point(self, obstacle: Obstacle) -> None:
        self.score += 1
        self.events.emit(Event(EventType.SCORE, data={"score": self.score}))
        self.particles.spawn_burst(
            (obstacle.right, obstacle.top_height + obstacle.gap / 2),
            ParticlePresets.SPARKLE_COLOR,
            config=ParticlePresets.score_sparkle(),
        )

        if self.score > self.high_score:
            self.high_score = self.score
            self._save_high_score(self.score)
            self.events.emit(Event(EventType.HIGH_SCORE, data={"score": self.score}))

    def _on_collision(self, reasons: Sequence[CollisionReason]) -> None:
        if not self.state_machine.transition(GameState.DYING):
            return

        self._jump_requested = False
        self.death_timer.start()
        self.particles.spawn_burst(
            self.player.center,
            ParticlePresets.EXPLOSION_COLOR,
            config=ParticlePresets.explosion(),
        )
        self.events.emit(Event(
            EventType.COLLISION,
            data={"reasons": [r.name for r in reasons], "score": self.score},
        ))

    def _on_state_changed(self, old_state: GameState, new_state: GameState) -> None:
        self.events.emit(Event(
            EventType.STATE_CHANGED,
            data={"from": old_state, "to": new_state},
        ))

    # ===== PERSISTENCE =====

    def _load_high_score(self) -> int:
        try:
            stored = self.store.load_high_score()
        except Exception as e:
            logger.error(f"High score store failed to load: {e}")
            return 0
        return stored if stored is not None else 0

    def _save_high_score(self, score: int) -> None:
        try:
            self.store.save_high_score(score)
        except Exception as e:
            logger.error(f"High score store failed to save: {e}")

    # ===== OBSERVERS =====

    def attach_audio(self, audio: AudioNotifier) -> List[Callable[[], None]]:
        """Route sound cues to an AudioNotifier. Returns unsubscribe functions."""
        return [
            self.events.subscribe(EventType.JUMP, lambda e: audio.on_jump()),
            self.events.subscribe(EventType.SCORE, lambda e: audio.on_score()),
            self.events.subscribe(EventType.COLLISION, lambda e: audio.on_collision()),
            self.events.subscribe(
                EventType.COUNTDOWN_TICK,
                lambda e: audio.on_countdown_tick(e.data.get("count", 0)),
            ),
        ]

    def snapshot(self) -> SessionSnapshot:
        player = self.player
        return SessionSnapshot(
            state=self.state,
            score=self.score,
            high_score=self.high_score,
            countdown=self.countdown.remaining,
            viewport=self.viewport,
            player=PlayerSnapshot(
                x=player.x,
                y=player.y,
                width=player.width,
                height=player.height,
                velocity=player.velocity,
                tilt=player.tilt,
                sprite_frame=player.sprite_frame,
            ),
            obstacles=self.obstacles.snapshot(),
            particles=self.particles.snapshot(),
        )
