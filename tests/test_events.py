"""Tests for the event bus."""

from flappy_dragon.core.events import Event, EventBus, EventType


def test_handlers_receive_matching_events():
    bus = EventBus()
    seen = []
    bus.subscribe(EventType.SCORE, seen.append)
    bus.emit(Event(EventType.SCORE, data={"score": 1}))
    bus.emit(Event(EventType.JUMP))
    assert [e.data["score"] for e in seen] == [1]


def test_unsubscribe():
    bus = EventBus()
    seen = []
    unsubscribe = bus.subscribe(EventType.JUMP, seen.append)
    unsubscribe()
    unsubscribe()
    bus.emit(Event(EventType.JUMP))
    assert seen == []


def test_failing_handler_is_isolated(caplog):
    bus = EventBus()
    seen = []

    def broken(event):
        raise ValueError("bad handler")

    bus.subscribe(EventType.JUMP, broken)
    bus.subscribe(EventType.JUMP, seen.append)
    bus.emit(Event(EventType.JUMP))
    assert len(seen) == 1
    assert "bad handler" in caplog.text


def test_history_is_bounded():
    bus = EventBus(history_limit=3)
    for _ in range(5):
        bus.emit(Event(EventType.JUMP))
    bus.emit(Event(EventType.SCORE))
    assert len(bus.get_history(limit=10)) == 3
    assert len(bus.get_history(EventType.SCORE)) == 1
    assert len(bus.get_history(EventType.JUMP, limit=1)) == 1
