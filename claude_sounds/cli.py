#!/usr/bin/env python3
"""
claude-code-sounds - themed sound packs for Claude Code hooks.

Usage:
    claude-code-sounds                  # Interactive install
    claude-code-sounds --yes            # Install the default theme, no prompts
    claude-code-sounds --theme wc3-peon # Install a specific theme, no prompts
    claude-code-sounds --mix            # Assign sounds from several themes
    claude-code-sounds --list           # List available themes
    claude-code-sounds --mute           # Silence sounds (--unmute to restore)
    claude-code-sounds --dnd            # Stay quiet during calls (--no-dnd)
    claude-code-sounds --uninstall      # Remove all sounds and hooks
"""

import argparse
import io
import logging
import sys
from typing import Optional

from claude_sounds.constants import HOOKS
from claude_sounds.downloader import download_theme, needs_download
from claude_sounds.errors import MissingDependencyError, PromptCancelled, SoundsError
from claude_sounds.installer import (
    Selection,
    current_selection,
    custom_install,
    quick_install,
    uninstall_all,
)
from claude_sounds.paths import SoundPaths, default_paths
from claude_sounds.player import (
    DOWNLOAD_TOOLS,
    PLAYERS,
    PreviewPlayer,
    brew_install,
    find_player,
    has_command,
    missing_tools,
)
from claude_sounds.prompts import (
    BOLD,
    DIM,
    GREEN,
    RED,
    RESET,
    SHOW_CURSOR,
    YELLOW,
    Option,
    confirm,
    grid_select,
    multi_select,
    select,
)
from claude_sounds.state import ExistingInstall, detect_existing_install
from claude_sounds.themes import (
    SoundChoice,
    ThemeSummary,
    category_files,
    find_theme,
    list_themes,
    read_theme,
    resolve_theme_sound_path,
    theme_sound_choices,
)
from claude_sounds.toggles import is_dnd, is_muted, set_dnd, set_muted
from claude_sounds.transaction import TransactionError

PROG = "claude-code-sounds"
RULE = "─" * 38

logger = logging.getLogger(__name__)


def fix_console_encoding() -> None:
    """Fix Windows cp1252 encoding for Unicode output."""
    if sys.stdout.encoding and sys.stdout.encoding.lower() != "utf-8" and hasattr(sys.stdout, "buffer"):
        sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")
        sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding="utf-8", errors="replace")


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


def print_header():
    print()
    print(f"  {BOLD}{PROG}{RESET}")
    print(f"  {RULE}")
    print()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Play themed sounds on Claude Code lifecycle events.",
        epilog=(
            "examples:\n"
            f"  {PROG}                  interactive install\n"
            f"  {PROG} --yes            install defaults, skip prompts\n"
            f"  {PROG} -t zelda-oot     install a theme, skip prompts\n"
            f"  {PROG} --mix            mix sounds from several themes\n"
            "\n"
            "environment:\n"
            "  CLAUDE_HOME             Claude config dir (default ~/.claude)\n"
            "  CLAUDE_SOUNDS_MIRROR    base URL theme downloads are fetched from\n"
            "  NO_COLOR                disable colored output"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-l", "--list", action="store_true", help="List available themes")
    parser.add_argument("-y", "--yes", action="store_true", help="Skip all prompts, use defaults")
    parser.add_argument("-t", "--theme", metavar="NAME", help="Install a theme without prompts")
    parser.add_argument("-m", "--mix", action="store_true", help="Assign sounds from multiple themes")
    parser.add_argument(
        "--uninstall", "--remove",
        dest="uninstall",
        action="store_true",
        help="Remove all sounds and hooks",
    )

    mute = parser.add_mutually_exclusive_group()
    mute.add_argument("--mute", action="store_true", help="Silence all sounds")
    mute.add_argument("--unmute", action="store_true", help="Re-enable sounds")

    dnd = parser.add_mutually_exclusive_group()
    dnd.add_argument("--dnd", action="store_true", help="Stay quiet while a call app is running")
    dnd.add_argument("--no-dnd", dest="no_dnd", action="store_true", help="Disable do-not-disturb")

    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


# ---------------------------------------------------------------------------
# Non-interactive commands
# ---------------------------------------------------------------------------

def show_list(paths: SoundPaths) -> None:
    print()
    print("  Available themes:")
    print()
    themes = list_themes(paths)
    if not themes:
        print(f"    {DIM}(none found in {paths.themes_dir}){RESET}")
    width = max((len(t.name) for t in themes), default=0)
    for t in themes:
        print(f"    {t.name:<{width}}  {t.display} — {t.description} {DIM}({t.sound_count} sounds){RESET}")
    print()


def uninstall(paths: SoundPaths) -> None:
    print()
    print(f"  Uninstalling {PROG}...")
    removed = uninstall_all(paths)

    if removed.sounds:
        print(f"    Removed {paths.sounds_dir}")
    if removed.hook_script:
        print(f"    Removed {paths.hook_script}")
    if removed.hooks_config:
        print(f"    Removed hooks from {paths.settings_path.name}")
    if removed.commands:
        print(f"    Removed slash commands from {paths.commands_dir}")
    if not any(vars(removed).values()):
        print(f"    {DIM}Nothing to remove.{RESET}")

    print()
    print("  Done. All sounds removed.")
    print()


def apply_toggles(args: argparse.Namespace, paths: SoundPaths) -> None:
    if args.mute or args.unmute:
        set_muted(args.mute, paths)
        print(f"  Sounds {'muted' if is_muted(paths) else 'unmuted'}.")
    if args.dnd or args.no_dnd:
        set_dnd(args.dnd, paths)
        print(f"  Do not disturb {'enabled' if is_dnd(paths) else 'disabled'}.")


# ---------------------------------------------------------------------------
# Dependencies & downloads
# ---------------------------------------------------------------------------

def check_player() -> str:
    player = find_player()
    if player is None:
        raise MissingDependencyError(
            [f"an audio player ({', '.join(PLAYERS)})"],
            "afplay ships with macOS; on Linux install pulseaudio-utils or alsa-utils.",
        )
    logger.debug("Using audio player %s", player)
    return player


def ensure_tools(interactive: bool) -> None:
    missing = missing_tools(DOWNLOAD_TOOLS)
    if not missing:
        return
    for tool in missing:
        print(f"    {RED}✗{RESET} {tool} — required to download sounds")
    if interactive and has_command("brew") and confirm("Install missing dependencies with Homebrew?"):
        print(f"  Installing {', '.join(missing)}...")
        if brew_install(missing):
            print(f"  {GREEN}✓{RESET} Dependencies installed.\n")
            return
    raise MissingDependencyError(missing, "Install them and try again.")


def ensure_downloaded(theme_names: list[str], paths: SoundPaths, interactive: bool) -> None:
    pending = [name for name in theme_names if needs_download(name, paths)]
    if not pending:
        return
    ensure_tools(interactive)
    for name in pending:
        print(f"  Downloading {name}...")
        staged = download_theme(name, paths)
        print(f"  {GREEN}✓{RESET} {staged} sound(s) ready.\n")


def require_tty() -> None:
    if not sys.stdin.isatty():
        raise SoundsError("Interactive mode needs a terminal. Use --yes or --theme <name>.")


# ---------------------------------------------------------------------------
# Install flows
# ---------------------------------------------------------------------------

def print_summary(selection: Selection, total: int) -> None:
    print()
    print(f"  {GREEN}✓{RESET} Installed! Here's what you'll hear:")
    print(f"  {RULE}")
    events = 0
    for hook in HOOKS:
        count = len(selection.get(hook.key, []))
        if count:
            events += 1
        marker = "" if count else f"{DIM}"
        print(f"    {marker}{hook.abbr}  {hook.key:<15} ({count}) — {hook.description}{RESET}")
    print()
    print(f"  {total} sound files across {events} events.")
    print("  Start a new Claude Code session to hear it!")
    print()


def install_theme(theme_name: str, paths: SoundPaths, interactive: bool = False) -> None:
    """Quick-install one theme with its default mapping."""
    theme = find_theme(theme_name, paths)
    check_player()
    print(f"  Theme: {BOLD}{theme.display}{RESET} — {theme.description}\n")
    ensure_downloaded([theme.name], paths, interactive)

    print("  Installing sounds...")
    result = quick_install(theme.name, paths)
    print_summary(theme_sound_choices(theme.name, read_theme(theme.name, paths)), result.total)


def choose_theme(themes: list[ThemeSummary], title: str = "Select a theme:") -> ThemeSummary:
    if len(themes) == 1:
        print(f"  Theme: {BOLD}{themes[0].display}{RESET} — {themes[0].description}\n")
        return themes[0]
    options = [Option(t.display, f"{t.description} ({t.sound_count} sounds)") for t in themes]
    return themes[select(title, options)]


def customize_theme(theme_name: str, paths: SoundPaths, player: PreviewPlayer) -> Selection:
    """Walk each category of one theme and let the user pick its files."""
    theme = read_theme(theme_name, paths)
    selection: Selection = {}
    for category, config in (theme.get("sounds") or {}).items():
        files = category_files(theme, category)
        items = [
            Option(
                f["name"].rsplit(".", 1)[0],
                f.get("description", ""),
                resolve_theme_sound_path(theme_name, f["name"], paths),
            )
            for f in files
        ]
        chosen = multi_select(
            f"{BOLD}{category}{RESET} {DIM}— {config.get('description', '')}{RESET}",
            items,
            defaults=list(range(len(items))),
            previewer=lambda option: player.play(option.file),
        )
        selection[category] = [SoundChoice(theme_name, files[i]["name"]) for i in chosen]
    return selection


def build_grid(theme_names: list[str], paths: SoundPaths) -> tuple[list[Option], list[SoundChoice], Selection]:
    """Rows for the mix grid: every distinct file of every chosen theme.

    Returns:
        (row options, the SoundChoice behind each row, default selection)
    """
    rows: list[Option] = []
    choices: list[SoundChoice] = []
    defaults: Selection = {}
    for theme_name in theme_names:
        theme = read_theme(theme_name, paths)
        display = theme.get("name") or theme_name
        for category in theme.get("sounds") or {}:
            for entry in category_files(theme, category):
                choice = SoundChoice(theme_name, entry["name"])
                defaults.setdefault(category, []).append(choice)
                if choice in choices:
                    continue
                choices.append(choice)
                rows.append(Option(
                    f"{display}: {entry['name'].rsplit('.', 1)[0]}",
                    file=resolve_theme_sound_path(theme_name, entry["name"], paths),
                ))
    return rows, choices, defaults


def mix_install(
    paths: SoundPaths,
    theme_names: Optional[list[str]] = None,
    initial: Optional[Selection] = None,
) -> None:
    """Assign any sound from one or more themes to each hook category."""
    themes = list_themes(paths)
    if not themes:
        raise SoundsError(f"No themes found in {paths.themes_dir}")

    if theme_names is None:
        items = [Option(t.display, f"{t.sound_count} sounds") for t in themes]
        picked = multi_select("Mix sounds from which themes?", items, defaults=list(range(len(items))))
        theme_names = [themes[i].name for i in picked]
    if not theme_names:
        print(f"  {YELLOW}No themes selected, nothing to install.{RESET}\n")
        return

    ensure_downloaded(theme_names, paths, interactive=True)
    rows, choices, defaults = build_grid(theme_names, paths)
    start = initial if initial is not None else defaults

    columns = [hook.abbr for hook in HOOKS]
    checked = {
        (choices.index(choice), col)
        for col, hook in enumerate(HOOKS)
        for choice in start.get(hook.key, [])
        if choice in choices
    }

    player = PreviewPlayer()
    try:
        cells = grid_select(
            "Assign sounds to hooks:",
            rows,
            columns,
            checked,
            previewer=lambda option: player.play(option.file),
        )
    finally:
        player.stop()

    selection: Selection = {
        hook.key: [choices[r] for r in range(len(rows)) if (r, col) in cells]
        for col, hook in enumerate(HOOKS)
    }
    print("  Installing sounds...")
    total = custom_install(selection, paths)
    print_summary(selection, total)


def print_existing(existing: ExistingInstall, paths: SoundPaths) -> None:
    flags = []
    if is_muted(paths):
        flags.append("muted")
    if is_dnd(paths):
        flags.append("dnd")
    state = f" {YELLOW}[{', '.join(flags)}]{RESET}" if flags else ""
    print(f"  Installed: {BOLD}{', '.join(existing.theme_displays)}{RESET}"
          f" {DIM}({existing.total_enabled} sounds, {existing.mode}){RESET}{state}")
    print()


def interactive_install(paths: SoundPaths) -> None:
    require_tty()
    print_header()
    check_player()

    existing = detect_existing_install(paths)
    if existing:
        print_existing(existing, paths)
        actions = [
            Option("Reconfigure", "Change which sounds play for each hook"),
            Option("Switch theme", "Quick install another theme"),
            Option("Mix themes", "Combine sounds from several themes"),
            Option("Uninstall", "Remove all sounds and hooks"),
            Option("Keep current setup"),
        ]
        action = select("What would you like to do?", actions)
        if action == 0:
            mix_install(paths, existing.themes, current_selection(paths, existing.themes))
            return
        if action == 2:
            mix_install(paths)
            return
        if action == 3:
            uninstall(paths)
            return
        if action == 4:
            print("  Nothing changed.\n")
            return

    themes = list_themes(paths)
    if not themes:
        raise SoundsError(f"No themes found in {paths.themes_dir}")
    theme = choose_theme(themes)
    ensure_downloaded([theme.name], paths, interactive=True)

    customize = select(
        "Customize sounds for each hook?",
        [Option("No, use defaults", "Recommended"), Option("Yes, let me pick", "Choose sounds per hook")],
    )
    if customize == 0:
        print("  Installing sounds...")
        result = quick_install(theme.name, paths)
        print_summary(theme_sound_choices(theme.name, read_theme(theme.name, paths)), result.total)
        return

    player = PreviewPlayer()
    try:
        selection = customize_theme(theme.name, paths, player)
    finally:
        player.stop()
    print("  Installing sounds...")
    total = custom_install(selection, paths)
    print_summary(selection, total)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: Optional[list[str]] = None, paths: Optional[SoundPaths] = None) -> int:
    args = build_parser().parse_args(argv)
    fix_console_encoding()
    setup_logging(args.verbose)
    paths = paths or default_paths()
    logger.debug("Claude dir: %s, themes: %s", paths.claude_dir, paths.themes_dir)

    try:
        if args.list:
            show_list(paths)
        elif args.uninstall:
            uninstall(paths)
        elif args.mute or args.unmute or args.dnd or args.no_dnd:
            apply_toggles(args, paths)
        elif args.theme:
            install_theme(args.theme, paths)
        elif args.yes:
            themes = list_themes(paths)
            if not themes:
                raise SoundsError(f"No themes found in {paths.themes_dir}")
            install_theme(themes[0].name, paths)
        elif args.mix:
            require_tty()
            print_header()
            check_player()
            mix_install(paths)
        else:
            interactive_install(paths)
    except (PromptCancelled, KeyboardInterrupt):
        sys.stdout.write(SHOW_CURSOR)
        print("\n  Cancelled.\n")
        return 0
    except (SoundsError, TransactionError, OSError) as e:
        print(f"\n  {RED}Error:{RESET} {e}\n", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
