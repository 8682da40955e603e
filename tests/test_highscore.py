"""Tests for high score storage."""

import json

import pytest

from flappy_dragon.persistence.highscore import JsonHighScoreStore, MemoryHighScoreStore


def test_memory_store_round_trip():
    store = MemoryHighScoreStore(initial=4)
    assert store.load_high_score() == 4
    store.save_high_score(9)
    assert store.load_high_score() == 9


def test_missing_file_is_absent(tmp_path):
    store = JsonHighScoreStore(tmp_path / "highscore.json")
    assert store.load_high_score() is None


def test_save_creates_file(tmp_path):
    path = tmp_path / "nested" / "highscore.json"
    store = JsonHighScoreStore(path)
    store.save_high_score(12)
    assert json.loads(path.read_text()) == {"high_score": 12}
    assert JsonHighScoreStore(path).load_high_score() == 12


@pytest.mark.parametrize("content", [
    "not json",
    "[1, 2, 3]",
    '{"high_score": "ten"}',
    '{"high_score": -3}',
    '{"high_score": true}',
    '{"high_score": 2.5}',
    "{}",
])
def test_malformed_file_is_treated_as_absent(tmp_path, content):
    path = tmp_path / "highscore.json"
    path.write_text(content)
    assert JsonHighScoreStore(path).load_high_score() is None


def test_save_failure_is_logged_not_raised(tmp_path, caplog):
    # A directory where the file should be makes open() fail
    path = tmp_path / "highscore.json"
    path.mkdir()
    JsonHighScoreStore(path).save_high_score(3)
    assert "Failed to save high score" in caplog.text
