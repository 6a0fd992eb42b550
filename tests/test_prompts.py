"""Tests for the terminal selection widgets, driven by scripted key presses."""

import io

import click
import pytest

from claude_sounds import prompts
from claude_sounds.errors import PromptCancelled
from claude_sounds.prompts import Option, confirm, grid_select, multi_select, select

UP = "\x1b[A"
DOWN = "\x1b[B"
LEFT = "\x1b[D"
RIGHT = "\x1b[C"
ENTER = "\r"


def keys(*sequence):
    it = iter(sequence)
    return lambda: next(it)


OPTIONS = [Option("One", "first"), Option("Two"), Option("Three")]


# ==============================================================================
# select
# ==============================================================================

def test_select_enter_picks_first():
    out = io.StringIO()
    assert select("Pick", OPTIONS, read_key=keys(ENTER), out=out) == 0
    assert "One" in out.getvalue()


def test_select_navigation_wraps():
    """Up from the first option lands on the last."""
    assert select("Pick", OPTIONS, read_key=keys(UP, ENTER), out=io.StringIO()) == 2
    assert select("Pick", OPTIONS, read_key=keys(DOWN, "j", DOWN, ENTER), out=io.StringIO()) == 0


def test_select_ignores_unknown_keys():
    assert select("Pick", OPTIONS, read_key=keys("x", "k", "k", ENTER), out=io.StringIO()) == 1


def test_select_quit_cancels():
    out = io.StringIO()
    with pytest.raises(PromptCancelled):
        select("Pick", OPTIONS, read_key=keys(DOWN, "q"), out=out)
    assert out.getvalue().endswith(prompts.SHOW_CURSOR)


def test_select_ctrl_c_interrupts():
    with pytest.raises(KeyboardInterrupt):
        select("Pick", OPTIONS, read_key=keys("\x03"), out=io.StringIO())


def test_select_requires_options():
    with pytest.raises(ValueError):
        select("Pick", [], read_key=keys(ENTER), out=io.StringIO())


# ==============================================================================
# multi_select
# ==============================================================================

def test_multi_select_defaults_and_toggle():
    """Space toggles the highlighted item; defaults start checked."""
    result = multi_select(
        "Sounds", OPTIONS, defaults=[0, 2],
        read_key=keys(" ", DOWN, " ", ENTER), out=io.StringIO(),
    )
    assert result == [1, 2]


def test_multi_select_preview_calls_previewer():
    previewed = []
    result = multi_select(
        "Sounds", OPTIONS, defaults=[],
        previewer=previewed.append,
        read_key=keys(DOWN, "p", ENTER), out=io.StringIO(),
    )
    assert result == []
    assert previewed == [OPTIONS[1]]


def test_multi_select_empty_returns_empty():
    assert multi_select("Sounds", [], defaults=[], read_key=keys(), out=io.StringIO()) == []


def test_multi_select_scrolls_long_lists():
    """Lists longer than the viewport show a position hint."""
    items = [Option(f"sound-{i}.wav") for i in range(prompts.MAX_VISIBLE + 5)]
    out = io.StringIO()
    result = multi_select("Sounds", items, defaults=[], read_key=keys(UP, " ", ENTER), out=out)

    assert result == [len(items) - 1]
    assert f"of {len(items)}" in out.getvalue()
    assert f"sound-{len(items) - 1}.wav" in out.getvalue()


# ==============================================================================
# grid_select
# ==============================================================================

def test_grid_select_toggles_cells():
    rows = [Option("a.wav"), Option("b.wav")]
    columns = ["str", "stp", "end"]
    result = grid_select(
        "Mix", rows, columns, checked={(0, 0)},
        read_key=keys(" ", RIGHT, RIGHT, " ", DOWN, LEFT, " ", ENTER), out=io.StringIO(),
    )
    assert result == {(0, 2), (1, 1)}


def test_grid_select_does_not_mutate_input():
    checked = {(0, 0)}
    grid_select("Mix", [Option("a.wav")], ["str"], checked, read_key=keys(" ", ENTER), out=io.StringIO())
    assert checked == {(0, 0)}


def test_grid_select_shows_column_headers():
    out = io.StringIO()
    grid_select("Mix", [Option("a.wav")], ["str", "tmt"], set(), read_key=keys(ENTER), out=out)
    assert "str" in out.getvalue()
    assert "tmt" in out.getvalue()


def test_grid_select_preview_and_quit():
    previewed = []
    with pytest.raises(PromptCancelled):
        grid_select(
            "Mix", [Option("a.wav"), Option("b.wav")], ["str"], set(),
            previewer=previewed.append, read_key=keys(DOWN, "p", "q"), out=io.StringIO(),
        )
    assert [o.label for o in previewed] == ["b.wav"]


# ==============================================================================
# confirm
# ==============================================================================

def test_confirm_passes_default(monkeypatch):
    calls = []

    def fake_confirm(text, default):
        calls.append((text, default))
        return default

    monkeypatch.setattr(click, "confirm", fake_confirm)
    assert confirm("Install unzip?", default=False) is False
    assert calls == [("  Install unzip?", False)]


def test_confirm_abort_cancels(monkeypatch):
    def fake_confirm(text, default):
        raise click.Abort()

    monkeypatch.setattr(click, "confirm", fake_confirm)
    with pytest.raises(PromptCancelled):
        confirm("Continue?")
