# tests/test_sound_board.py

from __future__ import annotations

import pytest

from action_board.audio.player import SOUND_IDS, SoundPlayer
from action_board.audio.sound_board import SoundBoard
from action_board.board.persistence import SOUNDS_KEY, TASKS_KEY, BoardPersistence

from .fakes import FakePlayer, MemoryKeyValueStore


def test_unset_trigger_is_silent() -> None:
    player = FakePlayer()
    SoundBoard(player).play_trigger("checkbox")
    assert player.played == []


def test_choices_persist_independently_of_tasks() -> None:
    kv = MemoryKeyValueStore()
    board = SoundBoard(FakePlayer(), BoardPersistence(kv))

    board.set_sound("Celebration", "fanfare")

    assert [k for k, _ in kv.writes] == [SOUNDS_KEY]
    assert TASKS_KEY not in kv.data

    reloaded = SoundBoard(FakePlayer(), BoardPersistence(kv))
    assert reloaded.preferences.sound_for("celebration") == "fanfare"


def test_off_clears_a_choice() -> None:
    player = FakePlayer()
    board = SoundBoard(player)
    board.set_sound("trigger", "bell")
    board.play_trigger("trigger")
    board.set_sound("trigger", "off")
    board.play_trigger("trigger")
    assert player.played == ["bell"]


def test_unknown_trigger_or_sound_is_rejected() -> None:
    board = SoundBoard(FakePlayer())
    with pytest.raises(ValueError, match="Unknown trigger"):
        board.set_sound("keyboard", "pop")
    with pytest.raises(ValueError, match="Unknown sound"):
        board.set_sound("checkbox", "airhorn")


def test_player_failure_is_logged_not_raised(caplog) -> None:
    board = SoundBoard(FakePlayer(fail=True))
    board.set_sound("checkbox", "click")
    board.play_trigger("checkbox")
    assert "Playing sound click" in caplog.text


def test_disabled_player_is_a_noop() -> None:
    player = SoundPlayer(enabled=False)
    for sound_id in SOUND_IDS:
        player.play(sound_id)
    assert player.enabled is False
    player.shutdown()
