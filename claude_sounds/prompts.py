"""Terminal selection widgets.

Keys are read one at a time with ``click.getchar``; every widget redraws in
place by moving the cursor back over the lines it printed.

Keys:
    up/down (k/j)      move
    left/right (h/l)   move between grid columns
    space              toggle
    p                  preview the highlighted sound
    enter              confirm
    q                  cancel (raises PromptCancelled)
    ctrl+c             raises KeyboardInterrupt
"""

import os
import sys
from typing import Callable, NamedTuple, Optional, TextIO

import click

from claude_sounds.errors import PromptCancelled


def _ansi(code: str) -> str:
    return "" if os.environ.get("NO_COLOR") else f"\033[{code}"


CSI = "\033["
CLEAR_LINE = f"{CSI}2K"
HIDE_CURSOR = f"{CSI}?25l"
SHOW_CURSOR = f"{CSI}?25h"

BOLD = _ansi("1m")
DIM = _ansi("2m")
REVERSE = _ansi("7m")
RESET = _ansi("0m")
RED = _ansi("31m")
GREEN = _ansi("32m")
YELLOW = _ansi("33m")
CYAN = _ansi("36m")

KEY_UP = ("\x1b[A", "\xe0H", "k")
KEY_DOWN = ("\x1b[B", "\xe0P", "j")
KEY_RIGHT = ("\x1b[C", "\xe0M", "l")
KEY_LEFT = ("\x1b[D", "\xe0K", "h")
KEY_ENTER = ("\r", "\n")
KEY_TOGGLE = " "
KEY_PREVIEW = "p"
KEY_QUIT = "q"
KEY_CTRL_C = "\x03"

MAX_VISIBLE = 12


class Option(NamedTuple):
    label: str
    description: str = ""
    file: object = None


Previewer = Callable[[Option], None]
KeyReader = Callable[[], str]


class _Screen:
    """Redraws a fixed-height block of lines in place."""

    def __init__(self, out: TextIO):
        self.out = out
        self.height = 0

    def draw(self, lines: list[str]) -> None:
        if self.height:
            self.out.write(f"{CSI}{self.height}A")
        for line in lines:
            self.out.write(f"\r{CLEAR_LINE}{line}\n")
        self.height = len(lines)
        self.out.flush()

    def finish(self, summary: str) -> None:
        if self.height:
            self.out.write(f"{CSI}{self.height}A")
            for _ in range(self.height):
                self.out.write(f"{CLEAR_LINE}\n")
            self.out.write(f"{CSI}{self.height}A")
        self.out.write(f"{summary}\n\n")
        self.out.write(SHOW_CURSOR)
        self.out.flush()


def _read(read_key: KeyReader) -> str:
    key = read_key()
    if key == KEY_CTRL_C:
        raise KeyboardInterrupt
    if key == KEY_QUIT:
        raise PromptCancelled("Cancelled.")
    return key


def _viewport(cursor: int, top: int, total: int, visible: int) -> int:
    """Return the first visible index so that ``cursor`` stays on screen."""
    if cursor < top:
        return cursor
    if cursor >= top + visible:
        return cursor - visible + 1
    return max(0, min(top, total - visible))


def _scroll_hint(top: int, visible: int, total: int) -> str:
    if total <= visible:
        return ""
    return f"{DIM}    ({top + 1}-{top + visible} of {total}){RESET}"


def select(
    title: str,
    options: list[Option],
    read_key: KeyReader = click.getchar,
    out: Optional[TextIO] = None,
) -> int:
    """Single-choice menu. Returns the index of the chosen option."""
    if not options:
        raise ValueError("select() needs at least one option")
    screen = _Screen(out or sys.stdout)
    cursor = 0

    def render() -> None:
        lines = [f"  {title}", ""]
        for i, option in enumerate(options):
            active = i == cursor
            pointer = f"{CYAN}  ❯ {RESET}" if active else "    "
            label = f"{BOLD}{option.label}{RESET}" if active else option.label
            desc = f" {DIM}— {option.description}{RESET}" if option.description else ""
            lines.append(f"{pointer}{label}{desc}")
        lines.append(f"{DIM}  ↑↓ navigate · enter select · q quit{RESET}")
        screen.draw(lines)

    screen.out.write(HIDE_CURSOR)
    try:
        render()
        while True:
            key = _read(read_key)
            if key in KEY_UP:
                cursor = (cursor - 1) % len(options)
            elif key in KEY_DOWN:
                cursor = (cursor + 1) % len(options)
            elif key in KEY_ENTER:
                screen.finish(f"  {title} {GREEN}{options[cursor].label}{RESET}")
                return cursor
            else:
                continue
            render()
    finally:
        screen.out.write(SHOW_CURSOR)
        screen.out.flush()


def multi_select(
    title: str,
    items: list[Option],
    defaults: list[int],
    previewer: Optional[Previewer] = None,
    read_key: KeyReader = click.getchar,
    out: Optional[TextIO] = None,
) -> list[int]:
    """Checklist with toggle and preview. Returns the checked indices, sorted."""
    if not items:
        return []
    screen = _Screen(out or sys.stdout)
    checked = [i in defaults for i in range(len(items))]
    visible = min(len(items), MAX_VISIBLE)
    cursor = 0
    top = 0

    def render() -> None:
        lines = [f"  {title}", ""]
        for i in range(top, top + visible):
            item = items[i]
            pointer = f"{CYAN}  ❯ {RESET}" if i == cursor else "    "
            box = f"{GREEN}[✓]{RESET}" if checked[i] else f"{DIM}[ ]{RESET}"
            desc = f"  {DIM}{item.description}{RESET}" if item.description else ""
            lines.append(f"{pointer}{box} {item.label}{desc}")
        if len(items) > visible:
            lines.append(_scroll_hint(top, visible, len(items)))
        preview_hint = " · p preview" if previewer else ""
        lines.append(f"{DIM}  ↑↓ navigate · space toggle{preview_hint} · enter confirm{RESET}")
        screen.draw(lines)

    screen.out.write(HIDE_CURSOR)
    try:
        render()
        while True:
            key = _read(read_key)
            if key in KEY_UP:
                cursor = (cursor - 1) % len(items)
            elif key in KEY_DOWN:
                cursor = (cursor + 1) % len(items)
            elif key == KEY_TOGGLE:
                checked[cursor] = not checked[cursor]
            elif key == KEY_PREVIEW and previewer:
                previewer(items[cursor])
                continue
            elif key in KEY_ENTER:
                selected = [i for i, on in enumerate(checked) if on]
                screen.finish(f"  {title} {GREEN}{len(selected)}/{len(items)} selected{RESET}")
                return selected
            else:
                continue
            top = _viewport(cursor, top, len(items), visible)
            render()
    finally:
        screen.out.write(SHOW_CURSOR)
        screen.out.flush()


def grid_select(
    title: str,
    rows: list[Option],
    columns: list[str],
    checked: set[tuple[int, int]],
    previewer: Optional[Previewer] = None,
    read_key: KeyReader = click.getchar,
    out: Optional[TextIO] = None,
) -> set[tuple[int, int]]:
    """Toggle grid of rows (sounds) by columns (hook abbreviations).

    Returns:
        The set of checked ``(row, column)`` cells.
    """
    if not rows or not columns:
        return set()
    screen = _Screen(out or sys.stdout)
    cells = set(checked)
    visible = min(len(rows), MAX_VISIBLE)
    label_width = min(max(len(row.label) for row in rows), 36)
    row_cursor = 0
    col_cursor = 0
    top = 0

    def render() -> None:
        header = " " * (label_width + 5) + " ".join(f"{col:^3}" for col in columns)
        lines = [f"  {title}", "", f"{DIM}{header}{RESET}"]
        for r in range(top, top + visible):
            pointer = f"{CYAN}  ❯ {RESET}" if r == row_cursor else "    "
            label = rows[r].label[:label_width].ljust(label_width)
            marks = []
            for c in range(len(columns)):
                mark = f"{GREEN} ✓ {RESET}" if (r, c) in cells else f"{DIM} · {RESET}"
                if (r, c) == (row_cursor, col_cursor):
                    mark = f"{REVERSE}{' ✓ ' if (r, c) in cells else ' · '}{RESET}"
                marks.append(mark)
            lines.append(f"{pointer}{label} " + " ".join(marks))
        if len(rows) > visible:
            lines.append(_scroll_hint(top, visible, len(rows)))
        preview_hint = " · p preview" if previewer else ""
        lines.append(f"{DIM}  ↑↓←→ navigate · space toggle{preview_hint} · enter confirm{RESET}")
        screen.draw(lines)

    screen.out.write(HIDE_CURSOR)
    try:
        render()
        while True:
            key = _read(read_key)
            if key in KEY_UP:
                row_cursor = (row_cursor - 1) % len(rows)
            elif key in KEY_DOWN:
                row_cursor = (row_cursor + 1) % len(rows)
            elif key in KEY_LEFT:
                col_cursor = (col_cursor - 1) % len(columns)
            elif key in KEY_RIGHT:
                col_cursor = (col_cursor + 1) % len(columns)
            elif key == KEY_TOGGLE:
                cells ^= {(row_cursor, col_cursor)}
            elif key == KEY_PREVIEW and previewer:
                previewer(rows[row_cursor])
                continue
            elif key in KEY_ENTER:
                screen.finish(f"  {title} {GREEN}{len(cells)} assignments{RESET}")
                return cells
            else:
                continue
            top = _viewport(row_cursor, top, len(rows), visible)
            render()
    finally:
        screen.out.write(SHOW_CURSOR)
        screen.out.flush()


def confirm(message: str, default: bool = True) -> bool:
    """Y/n question; Ctrl+C or EOF cancels."""
    try:
        return click.confirm(f"  {message}", default=default)
    except click.Abort as e:
        raise PromptCancelled("Cancelled.") from e
