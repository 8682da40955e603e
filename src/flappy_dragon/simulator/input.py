"""
Keyboard, mouse and touch translation into game actions.

Raw device codes stop here: the session only ever sees Action.JUMP and
Action.PAUSE, one per physical press.
"""

import logging
from typing import Callable, Dict, Optional

import pygame

from flappy_dragon.core.session import Action

logger = logging.getLogger(__name__)

DEFAULT_KEY_MAP: Dict[int, Action] = {
    pygame.K_SPACE: Action.JUMP,
    pygame.K_UP: Action.JUMP,
    pygame.K_p: Action.PAUSE,
    pygame.K_ESCAPE: Action.PAUSE,
}

# Left, middle and right. Wheel scrolls also arrive as buttons 4 and up.
CLICK_BUTTONS = (1, 2, 3)


class ActionButton:
    """
    A debounced virtual button for one action.

    Fires on the press edge only; it must be released before it can
    fire again, so holding a key does not repeat.
    """

    def __init__(self, action: Action) -> None:
        self.action = action
        self._locked = False

    @property
    def locked(self) -> bool:
        return self._locked

    def press(self) -> bool:
        """Returns True if this press should fire the action."""
        if self._locked:
            return False
        self._locked = True
        return True

    def release(self) -> None:
        self._locked = False


class InputMapper:
    """Turns pygame events into actions delivered to a callback."""

    def __init__(
        self,
        on_action: Callable[[Action], None],
        key_map: Optional[Dict[int, Action]] = None,
    ) -> None:
        self._on_action = on_action
        self.key_map = dict(key_map or DEFAULT_KEY_MAP)
        self._buttons = {action: ActionButton(action) for action in Action}

    def handle_event(self, event: pygame.event.Event) -> bool:
        """
        Process one pygame event.

        Returns:
            True if an action was fired
        """
        if event.type == pygame.KEYDOWN:
            action = self.key_map.get(event.key)
            if action is not None and self._buttons[action].press():
                return self._fire(action)
            return False

        if event.type == pygame.KEYUP:
            action = self.key_map.get(event.key)
            if action is not None:
                self._buttons[action].release()
            return False

        # Touch also produces emulated mouse events; only count the finger
        if event.type == pygame.MOUSEBUTTONDOWN and getattr(event, "touch", False):
            return False

        # Clicks and taps are discrete presses, always a jump
        if event.type == pygame.MOUSEBUTTONDOWN and event.button in CLICK_BUTTONS:
            return self._fire(Action.JUMP)
        if event.type == pygame.FINGERDOWN:
            return self._fire(Action.JUMP)

        return False

    def _fire(self, action: Action) -> bool:
        logger.debug(f"Action: {action.name}")
        self._on_action(action)
        return True
