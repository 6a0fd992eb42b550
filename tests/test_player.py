"""Tests for player detection, dependency checks and previews."""

import shutil
import subprocess

from claude_sounds import player
from claude_sounds.player import PreviewPlayer, find_player, missing_tools


def _which(available):
    return lambda name: f"/usr/bin/{name}" if name in available else None


def test_find_player_prefers_afplay(monkeypatch):
    monkeypatch.setattr(shutil, "which", _which({"afplay", "aplay"}))
    assert find_player() == "afplay"


def test_find_player_linux_fallback(monkeypatch):
    monkeypatch.setattr(shutil, "which", _which({"aplay"}))
    assert find_player() == "aplay"


def test_find_player_none(monkeypatch):
    monkeypatch.setattr(shutil, "which", _which(set()))
    assert find_player() is None


def test_missing_tools(monkeypatch):
    monkeypatch.setattr(shutil, "which", _which({"curl"}))
    assert missing_tools(["curl", "unzip"]) == ["unzip"]


def test_brew_install_without_brew(monkeypatch):
    monkeypatch.setattr(shutil, "which", _which(set()))
    assert player.brew_install(["unzip"]) is False


def test_brew_install_failure(monkeypatch):
    """A failing brew run reports False instead of raising."""
    monkeypatch.setattr(shutil, "which", _which({"brew"}))

    def fake_run(cmd, check):
        raise subprocess.CalledProcessError(1, cmd)

    monkeypatch.setattr(subprocess, "run", fake_run)
    assert player.brew_install(["unzip"]) is False


# ==============================================================================
# PreviewPlayer
# ==============================================================================

def _fake_player(tmp_path):
    """A 'player' that ignores its argument and sleeps."""
    script = tmp_path / "fake-player"
    script.write_text("#!/bin/sh\nexec sleep 30\n")
    script.chmod(0o755)
    return str(script)


def test_preview_missing_file(tmp_path):
    preview = PreviewPlayer(player=_fake_player(tmp_path))
    assert preview.play(tmp_path / "nope.wav") is False
    assert not preview.playing


def test_preview_no_player(tmp_path, monkeypatch):
    monkeypatch.setattr(shutil, "which", _which(set()))
    sound = tmp_path / "a.wav"
    sound.write_bytes(b"RIFF")

    preview = PreviewPlayer()
    assert preview.player is None
    assert preview.play(sound) is False


def test_preview_replaces_previous_and_stops(tmp_path):
    """Starting a new preview kills the one already playing."""
    sound = tmp_path / "a.wav"
    sound.write_bytes(b"RIFF")
    preview = PreviewPlayer(player=_fake_player(tmp_path))

    assert preview.play(sound)
    first = preview._process
    assert preview.playing

    assert preview.play(sound)
    assert first.poll() is not None
    assert preview.playing

    preview.stop()
    assert not preview.playing
    preview.stop()
