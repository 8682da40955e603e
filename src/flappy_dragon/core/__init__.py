"""Simulation core for Flappy Dragon."""

from .state import GameState, StateMachine
from .events import EventBus, Event, EventType
from .session import Action, Session, SessionSnapshot

__all__ = [
    "Action",
    "Event",
    "EventBus",
    "EventType",
    "GameState",
    "Session",
    "SessionSnapshot",
    "StateMachine",
]
