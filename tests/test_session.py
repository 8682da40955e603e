"""Tests for the session: game flow, scoring, death and resize."""

import dataclasses

import pytest

from conftest import FRAME_MS, RecordingAudio, RecordingStore, step_ms
from flappy_dragon.config.settings import Settings
from flappy_dragon.core.events import EventType
from flappy_dragon.core.hooks import AudioNotifier
from flappy_dragon.core.session import Action, Session
from flappy_dragon.core.state import GameState
from flappy_dragon.persistence.highscore import MemoryHighScoreStore


def place_obstacle(session, x, top_height=None, bottom_y=None):
    """Spawn an obstacle and move it to a known position."""
    obstacle = session.obstacles.spawn(session.config, session.viewport)
    obstacle.x = x
    if top_height is not None:
        obstacle.top_height = top_height
    if bottom_y is not None:
        obstacle.bottom_y = bottom_y
    return obstacle


@pytest.fixture
def running(session):
    session.handle_action(Action.JUMP)
    assert session.state == GameState.RUNNING
    return session


@pytest.fixture
def dead(running):
    place_obstacle(running, 120, top_height=400, bottom_y=550)
    step_ms(running, FRAME_MS)
    assert running.state == GameState.DYING
    return running


class TestStartup:

    def test_starts_in_menu(self, session):
        assert session.state == GameState.MENU
        assert session.score == 0
        assert session.high_score == 0

    def test_loads_stored_high_score(self, settings):
        session = Session(settings=settings, store=MemoryHighScoreStore(initial=17))
        assert session.high_score == 17

    def test_failing_store_loads_as_zero(self, settings):
        class BrokenStore(MemoryHighScoreStore):
            def load_high_score(self):
                raise OSError("disk gone")

        assert Session(settings=settings, store=BrokenStore()).high_score == 0

    def test_menu_does_not_simulate(self, session):
        step_ms(session, 100.0, frames=50)
        assert len(session.obstacles) == 0
        assert session.player.velocity == 0.0


class TestActions:

    def test_jump_starts_run(self, running):
        assert running.player.x == pytest.approx(80.0)
        assert running.player.y == pytest.approx(250.0)
        assert running.player.velocity == 0.0

    def test_pause_in_menu_is_dropped(self, session):
        assert not session.handle_action(Action.PAUSE)
        assert session.state == GameState.MENU

    def test_jump_is_applied_on_next_frame(self, running, audio):
        assert running.handle_action(Action.JUMP)
        assert running.player.velocity == 0.0
        step_ms(running, FRAME_MS)
        # Impulse replaces velocity, then one frame of gravity
        assert running.player.velocity == pytest.approx(-7.7)
        assert running.player.y == pytest.approx(242.3)
        assert audio.cues == ["jump"]

    def test_pause_clears_buffered_jump(self, running):
        running.handle_action(Action.JUMP)
        running.handle_action(Action.PAUSE)
        running.handle_action(Action.PAUSE)
        step_ms(running, 100.0, frames=30)
        assert running.state == GameState.RUNNING
        step_ms(running, FRAME_MS)
        assert running.player.velocity == pytest.approx(0.3)

    def test_actions_dropped_while_dying(self, dead):
        assert not dead.handle_action(Action.JUMP)
        assert not dead.handle_action(Action.PAUSE)
        assert dead.state == GameState.DYING

    def test_jump_during_countdown_is_dropped(self, running):
        running.handle_action(Action.PAUSE)
        running.handle_action(Action.JUMP)
        assert running.state == GameState.COUNTDOWN
        assert not running.handle_action(Action.JUMP)
        assert running.state == GameState.COUNTDOWN


class TestPauseAndCountdown:

    def test_pause_freezes_world(self, running):
        place_obstacle(running, 300)
        running.player.y = 100.0
        running.handle_action(Action.PAUSE)
        step_ms(running, 100.0, frames=50)
        assert running.state == GameState.PAUSED
        assert running.player.y == 100.0
        assert running.obstacles[0].x == 300

    def test_pause_freezes_spawn_accumulator(self, running):
        running.obstacles.accumulator_ms = 1500.0
        running.player.y = 100.0
        running.player.velocity = 0.0

        running.handle_action(Action.PAUSE)
        step_ms(running, 100.0, frames=50)
        assert running.obstacles.accumulator_ms == 1500.0

        running.handle_action(Action.JUMP)
        step_ms(running, 100.0, frames=30)
        assert running.state == GameState.RUNNING
        assert running.obstacles.accumulator_ms == 1500.0

        step_ms(running, 100.0, frames=4)
        assert len(running.obstacles) == 0
        step_ms(running, 100.0)
        assert len(running.obstacles) == 1

    def test_countdown_resumes_running(self, running, audio):
        running.handle_action(Action.PAUSE)
        running.handle_action(Action.JUMP)
        assert running.snapshot().countdown == 3

        step_ms(running, 100.0, frames=29)
        assert running.state == GameState.COUNTDOWN
        step_ms(running, 100.0)
        assert running.state == GameState.RUNNING
        assert audio.cues == ["countdown:3", "countdown:2", "countdown:1", "countdown:0"]

    def test_pause_during_countdown_cancels_it(self, running, audio):
        running.handle_action(Action.PAUSE)
        running.handle_action(Action.PAUSE)
        step_ms(running, 100.0, frames=15)
        assert running.countdown.remaining == 2

        assert running.handle_action(Action.PAUSE)
        assert running.state == GameState.PAUSED
        assert not running.countdown.active

        step_ms(running, 100.0, frames=50)
        assert running.state == GameState.PAUSED

        running.handle_action(Action.JUMP)
        assert running.countdown.remaining == 3
        assert audio.cues == ["countdown:3", "countdown:2", "countdown:3"]


class TestScoring:

    def test_passing_an_obstacle_scores(self, running, store):
        place_obstacle(running, 40)
        step_ms(running, FRAME_MS)
        assert running.score == 1
        assert running.high_score == 1
        assert store.saves == [1]
        assert running.obstacles[0].passed

    def test_obstacle_scores_only_once(self, running):
        place_obstacle(running, 40)
        step_ms(running, FRAME_MS, frames=5)
        assert running.score == 1

    def test_high_score_saved_only_when_beaten(self, settings, rng):
        store = RecordingStore(initial=2)
        session = Session(settings=settings, store=store, rng=rng, viewport=(400, 500))
        session.handle_action(Action.JUMP)
        for x in (40, 30, 20):
            place_obstacle(session, x)
        step_ms(session, FRAME_MS)
        assert session.score == 3
        assert session.high_score == 3
        assert store.saves == [3]
        assert len(session.events.get_history(EventType.HIGH_SCORE)) == 1

    def test_score_cue_and_sparkle(self, running, audio):
        place_obstacle(running, 40)
        step_ms(running, FRAME_MS)
        assert audio.cues == ["score"]
        assert len(running.particles) > 0

    def test_failing_store_does_not_stop_scoring(self, settings, rng):
        class BrokenStore(MemoryHighScoreStore):
            def save_high_score(self, score):
                raise OSError("read-only")

        session = Session(settings=settings, store=BrokenStore(), rng=rng, viewport=(400, 500))
        session.handle_action(Action.JUMP)
        place_obstacle(session, 40)
        step_ms(session, FRAME_MS)
        assert session.score == 1
        assert session.high_score == 1


class TestDeath:

    def test_single_collision_per_life(self, running, audio):
        place_obstacle(running, 120, top_height=400, bottom_y=550)
        place_obstacle(running, 125, top_height=400, bottom_y=550)
        step_ms(running, FRAME_MS)
        step_ms(running, FRAME_MS, frames=10)

        assert running.state == GameState.DYING
        assert len(running.events.get_history(EventType.COLLISION)) == 1
        assert audio.cues == ["collision"]

    def test_death_delay_then_game_over(self, dead):
        step_ms(dead, 100.0, frames=9)
        assert dead.state == GameState.DYING
        step_ms(dead, 100.0)
        assert dead.state == GameState.GAME_OVER

    def test_world_frozen_while_dying(self, dead):
        y = dead.player.y
        x = dead.obstacles[0].x
        step_ms(dead, 100.0, frames=5)
        assert dead.player.y == y
        assert dead.obstacles[0].x == x

    def test_particles_keep_decaying_after_death(self, dead):
        assert len(dead.particles) > 0
        step_ms(dead, 100.0, frames=30)
        assert dead.state == GameState.GAME_OVER
        assert len(dead.particles) == 0

    def test_floor_kills(self, running):
        step_ms(running, 100.0, frames=5)
        assert running.state == GameState.RUNNING
        step_ms(running, 100.0)
        assert running.state == GameState.DYING
        assert running.player.y == pytest.approx(436.0)
        collision = running.events.get_history(EventType.COLLISION)[-1]
        assert collision.data["reasons"] == ["FLOOR"]

    def test_floor_in_scorer_mode(self, rng):
        settings = Settings(_env_file=None, floor_collision="scorer")
        session = Session(settings=settings, rng=rng, viewport=(400, 500))
        session.handle_action(Action.JUMP)
        step_ms(session, 100.0, frames=6)
        assert session.state == GameState.DYING
        # Not clamped: the body sinks past the floor before the hit-box touches it
        assert session.player.y > 436.0

    def test_retry_resets_world(self, dead):
        score_before = dead.high_score
        step_ms(dead, 100.0, frames=10)
        assert dead.handle_action(Action.JUMP)
        assert dead.state == GameState.RUNNING
        assert dead.score == 0
        assert len(dead.obstacles) == 0
        assert dead.obstacles.accumulator_ms == 0.0
        assert dead.player.y == pytest.approx(250.0)
        assert dead.high_score == score_before


class TestResize:

    def test_invalid_size_is_ignored(self, session):
        assert not session.handle_resize(0, 300)
        assert session.viewport.width == 400
        assert session.player.height == pytest.approx(64.0)

    def test_resize_updates_player_and_config(self, running):
        assert running.handle_resize(800, 1000)
        assert running.player.height == pytest.approx(128.0)
        assert running.floor_y == 1000
        assert running.config.gravity == pytest.approx(0.3)

    def test_relative_scaling_on_resize(self, rng):
        settings = Settings(_env_file=None, scaling="relative", reference_width=400, reference_height=500)
        session = Session(settings=settings, rng=rng, viewport=(400, 500))
        session.handle_resize(800, 1000)
        assert session.config.gravity == pytest.approx(0.6)

    def test_no_simulation_without_viewport(self, settings, rng):
        session = Session(settings=settings, rng=rng)
        session.handle_action(Action.JUMP)
        assert session.state == GameState.RUNNING
        step_ms(session, 100.0, frames=30)
        assert len(session.obstacles) == 0
        assert session.player.velocity == 0.0

        session.handle_resize(400, 500)
        assert session.player.x == pytest.approx(80.0)
        assert session.player.y == pytest.approx(250.0)
        step_ms(session, FRAME_MS)
        assert session.player.velocity == pytest.approx(0.3)

    def test_later_resize_keeps_position(self, running):
        running.player.y = 123.0
        running.handle_resize(800, 1000)
        assert running.player.y == 123.0


class TestObservers:

    def test_failing_audio_does_not_break_session(self, settings, rng):
        class BrokenAudio(AudioNotifier):
            def on_jump(self):
                raise RuntimeError("no sound card")

        session = Session(settings=settings, audio=BrokenAudio(), rng=rng, viewport=(400, 500))
        session.handle_action(Action.JUMP)
        session.handle_action(Action.JUMP)
        step_ms(session, FRAME_MS)
        assert session.state == GameState.RUNNING
        assert session.player.velocity == pytest.approx(-7.7)

    def test_detached_audio_hears_nothing(self, settings, rng):
        audio = RecordingAudio()
        session = Session(settings=settings, rng=rng, viewport=(400, 500))
        for unsubscribe in session.attach_audio(audio):
            unsubscribe()
        session.handle_action(Action.JUMP)
        session.handle_action(Action.JUMP)
        step_ms(session, FRAME_MS)
        assert audio.cues == []

    def test_state_changes_are_published(self, running):
        changes = running.events.get_history(EventType.STATE_CHANGED)
        assert changes[-1].data == {"from": GameState.MENU, "to": GameState.RUNNING}

    def test_snapshot_is_frozen(self, running):
        snapshot = running.snapshot()
        y = snapshot.player.y
        step_ms(running, FRAME_MS)
        assert snapshot.player.y == y
        assert running.player.y != y
        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.score = 5

    def test_update_uses_wall_clock(self, running):
        running.update(1000.0)
        running.update(1000.0 + FRAME_MS)
        assert running.player.velocity == pytest.approx(0.3)
