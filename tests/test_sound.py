"""Tests for edufy.ui.sound – volume, mute and missing cue files."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

pytest.importorskip("PySide6.QtMultimedia")

from edufy.ui.sound import SoundPlayer  # noqa: E402


@pytest.fixture()
def sound_dir(tmp_path: Path) -> Path:
    d = tmp_path / "sounds"
    d.mkdir()
    return d


class TestVolume:
    def test_default(self, sound_dir: Path):
        assert SoundPlayer(sound_dir).volume == pytest.approx(0.8)

    @pytest.mark.parametrize("value,expected", [(0.3, 0.3), (1.5, 1.0), (-0.2, 0.0), (0, 0.0), (1, 1.0)])
    def test_clamped(self, sound_dir: Path, value, expected):
        player = SoundPlayer(sound_dir)
        player.set_volume(value)
        assert player.volume == pytest.approx(expected)


class TestMute:
    def test_env_starts_muted(self, sound_dir: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("EDUFY_MUTE", "1")
        assert SoundPlayer(sound_dir).muted is True

    def test_toggle(self, sound_dir: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("EDUFY_MUTE", raising=False)
        player = SoundPlayer(sound_dir)
        assert player.toggle_muted() is True
        assert player.toggle_muted() is False


class TestMissingSounds:
    def test_missing_file_warned_once(self, sound_dir: Path, caplog: pytest.LogCaptureFixture, monkeypatch):
        monkeypatch.delenv("EDUFY_MUTE", raising=False)
        player = SoundPlayer(sound_dir)
        with caplog.at_level(logging.WARNING, logger="edufy.ui.sound"):
            player.play("success")
            player.play("success")
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "success.wav" in warnings[0].getMessage()

    def test_missing_directory_is_silent(self, tmp_path: Path, caplog: pytest.LogCaptureFixture, monkeypatch):
        monkeypatch.delenv("EDUFY_MUTE", raising=False)
        player = SoundPlayer(tmp_path / "nowhere")
        with caplog.at_level(logging.WARNING, logger="edufy.ui.sound"):
            player.play("success")
            player.play("failure")
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_env_directory(self, sound_dir: Path, caplog: pytest.LogCaptureFixture, monkeypatch):
        monkeypatch.delenv("EDUFY_MUTE", raising=False)
        monkeypatch.setenv("EDUFY_SOUNDS_DIR", str(sound_dir))
        player = SoundPlayer()
        with caplog.at_level(logging.WARNING, logger="edufy.ui.sound"):
            player.play("click")
        assert str(sound_dir) in caplog.text
