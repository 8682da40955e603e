"""
State machine for the game flow.

States:
    MENU: Title screen, waiting for the first jump
    COUNTDOWN: Resuming from pause, counting down to play
    RUNNING: Simulation advancing
    PAUSED: Simulation frozen
    DYING: Death sequence playing, input locked
    GAME_OVER: Final score shown, waiting for a retry
"""

from enum import Enum, auto
from typing import Callable, List
import logging

logger = logging.getLogger(__name__)


class GameState(Enum):
    """Game modes."""
    MENU = auto()
    COUNTDOWN = auto()
    RUNNING = auto()
    PAUSED = auto()
    DYING = auto()
    GAME_OVER = auto()


StateListener = Callable[[GameState, GameState], None]


class StateMachine:
    """
    Manages the current game mode and its transitions.

    Only transitions listed in VALID_TRANSITIONS are allowed; anything
    else is refused and logged.
    """

    VALID_TRANSITIONS: list[tuple[GameState, GameState]] = [
        # Start / retry
        (GameState.MENU, GameState.RUNNING),
        (GameState.GAME_OVER, GameState.RUNNING),

        # Death
        (GameState.RUNNING, GameState.DYING),
        (GameState.DYING, GameState.GAME_OVER),

        # Pause / resume
        (GameState.RUNNING, GameState.PAUSED),
        (GameState.PAUSED, GameState.COUNTDOWN),
        (GameState.COUNTDOWN, GameState.RUNNING),
        (GameState.COUNTDOWN, GameState.PAUSED),  # Paused again mid-countdown
    ]

    def __init__(self, initial_state: GameState = GameState.MENU) -> None:
        self._state = initial_state
        self._listeners: list[StateListener] = []
        self._valid_transitions = set(self.VALID_TRANSITIONS)
        logger.info(f"StateMachine initialized with state: {initial_state.name}")

    @property
    def state(self) -> GameState:
        """Get current state."""
        return self._state

    @property
    def is_simulating(self) -> bool:
        """Player, obstacles and collisions only advance while running."""
        return self._state == GameState.RUNNING

    @property
    def input_locked(self) -> bool:
        return self._state == GameState.DYING

    def can_transition(self, to_state: GameState) -> bool:
        """Check if transition to given state is valid."""
        return (self._state, to_state) in self._valid_transitions

    def transition(self, to_state: GameState) -> bool:
        """
        Attempt to transition to a new state.

        Returns:
            True if transition successful, False otherwise
        """
        if not self.can_transition(to_state):
            logger.warning(
                f"Invalid transition: {self._state.name} -> {to_state.name}"
            )
            return False

        old_state = self._state
        self._state = to_state
        logger.info(f"State transition: {old_state.name} -> {to_state.name}")

        for listener in self._listeners:
            try:
                listener(old_state, to_state)
            except Exception as e:
                logger.error(f"Error in state listener: {e}")

        return True

    def add_listener(self, callback: StateListener) -> None:
        """Add a state change listener."""
        self._listeners.append(callback)

    def remove_listener(self, callback: StateListener) -> None:
        """Remove a state change listener."""
        if callback in self._listeners:
            self._listeners.remove(callback)


class Countdown:
    """
    Frame-driven countdown, e.g. 3, 2, 1 before play resumes.

    Advanced by the same clock as everything else, so it stops whenever
    the owning mode is left.
    """

    def __init__(self, start_from: int = 3, interval_ms: float = 1000.0) -> None:
        self.start_from = start_from
        self.interval_ms = interval_ms
        self.remaining = 0
        self._elapsed = 0.0

    @property
    def active(self) -> bool:
        return self.remaining > 0

    def start(self) -> int:
        """Begin counting. Returns the first count to announce."""
        self.remaining = self.start_from
        self._elapsed = 0.0
        return self.remaining

    def cancel(self) -> None:
        """Drop any pending ticks."""
        self.remaining = 0
        self._elapsed = 0.0

    def advance(self, elapsed_ms: float) -> List[int]:
        """
        Advance the countdown.

        Returns:
            Counts reached during this step, in order. A trailing 0 means
            the countdown finished.
        """
        if not self.active:
            return []

        reached = []
        self._elapsed += elapsed_ms
        while self.active and self._elapsed >= self.interval_ms:
            self._elapsed -= self.interval_ms
            self.remaining -= 1
            reached.append(self.remaining)
        if not self.active:
            self._elapsed = 0.0
        return reached


class DelayTimer:
    """One-shot delay, used for the death sequence."""

    def __init__(self, duration_ms: float) -> None:
        self.duration_ms = duration_ms
        self._elapsed = 0.0
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        self._elapsed = 0.0
        self._running = True

    def cancel(self) -> None:
        self._running = False
        self._elapsed = 0.0

    def advance(self, elapsed_ms: float) -> bool:
        """Advance the timer. Returns True once, on the step it expires."""
        if not self._running:
            return False
        self._elapsed += elapsed_ms
        if self._elapsed >= self.duration_ms:
            self._running = False
            return True
        return False
