"""Copy sound selections into ~/.claude and wire them to Claude Code hooks.

Layout after an install::

    ~/.claude/
      sounds/<category>/*.mp3|*.wav   one dir per hook category
      sounds/.installed.json          {"themes": [...], "mode": "quick"|"custom", "sounds": {...}}
      hooks/play-sound.sh             shared playback script
      commands/mute.md, unmute.md     slash commands
      settings.json                   "hooks" key points every event at play-sound.sh

Custom installs also record which theme each copied file came from under
``sounds``, since two themes may supply files with the same name.
"""

import logging
import shlex
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from claude_sounds.constants import COMMAND_FILES, HOOK_KEYS, SOUND_EXTENSIONS, build_hooks_config
from claude_sounds.errors import ThemeError
from claude_sounds.paths import HOOK_SCRIPT_NAME, SoundPaths
from claude_sounds.state import (
    MODE_CUSTOM,
    MODE_QUICK,
    read_installed,
    read_settings,
    write_installed,
    write_settings,
)
from claude_sounds.themes import (
    SoundChoice,
    category_files,
    read_theme,
    resolve_theme_sound_path,
    theme_sound_choices,
)

logger = logging.getLogger(__name__)

Selection = dict[str, list[SoundChoice]]

# Separates theme and file name when two themes supply the same file name
COLLISION_SEP = "--"

# Location written in the bundled slash commands
DEFAULT_SOUNDS_DIR = "~/.claude/sounds"


@dataclass(frozen=True)
class QuickInstallResult:
    total: int
    categories: int


@dataclass
class UninstallResult:
    sounds: bool = False
    hook_script: bool = False
    hooks_config: bool = False
    commands: bool = False


# ---------------------------------------------------------------------------
# Sound files
# ---------------------------------------------------------------------------

def clear_category(category_dir) -> int:
    removed = 0
    for f in category_dir.iterdir():
        if f.is_file() and f.suffix.lower() in SOUND_EXTENSIONS:
            f.unlink()
            removed += 1
    return removed


def copy_selection(selection: Selection, paths: SoundPaths) -> Selection:
    """Replace the sound files of every category in ``selection``.

    Each category directory is emptied of .wav/.mp3 files before copying, so
    re-installing never leaves stale sounds behind.

    Returns:
        The choices actually copied; sources missing on disk are skipped.
    """
    copied: Selection = {}
    for category, choices in selection.items():
        category_dir = paths.sounds_dir / category
        category_dir.mkdir(parents=True, exist_ok=True)
        clear_category(category_dir)

        copied[category] = []
        taken: set[str] = set()
        for choice in choices:
            src = resolve_theme_sound_path(choice.theme_name, choice.file_name, paths)
            if not src.exists():
                logger.warning("%s/%s not found, skipping", choice.theme_name, choice.file_name)
                continue

            dest_name = choice.file_name
            if dest_name in taken:
                dest_name = f"{choice.theme_name}{COLLISION_SEP}{choice.file_name}"
            taken.add(dest_name)

            shutil.copyfile(src, category_dir / dest_name)
            copied[category].append(choice)
    return copied


def install_sounds(selection: Selection, paths: SoundPaths) -> int:
    """Copy ``selection`` into the sounds dir. Returns the number of files copied."""
    return sum(len(choices) for choices in copy_selection(selection, paths).values())


def selection_record(selection: Selection) -> dict[str, list[dict[str, str]]]:
    """Serializable form of ``selection`` for the install state file."""
    return {
        category: [{"theme": c.theme_name, "file": c.file_name} for c in choices]
        for category, choices in selection.items()
        if choices
    }


def _recorded_selection(record: dict[str, Any]) -> Selection:
    selection: Selection = {}
    for category in HOOK_KEYS:
        entries = record.get(category)
        if not isinstance(entries, list):
            continue
        choices = [
            SoundChoice(entry["theme"], entry["file"])
            for entry in entries
            if isinstance(entry, dict) and entry.get("theme") and entry.get("file")
        ]
        if choices:
            selection[category] = choices
    return selection


def current_selection(paths: SoundPaths, theme_names: Iterable[str]) -> Selection:
    """Map the installed sounds back to the themes they came from.

    Used to pre-select the current choices when reconfiguring. The record
    written by a custom install is authoritative; otherwise files on disk are
    matched against the listed themes and unknown files are dropped.
    """
    record = (read_installed(paths) or {}).get("sounds")
    if isinstance(record, dict):
        return _recorded_selection(record)

    catalog: dict[str, str] = {}
    for theme_name in theme_names:
        try:
            theme = read_theme(theme_name, paths)
        except ThemeError:
            continue
        for category in theme.get("sounds") or {}:
            for entry in category_files(theme, category):
                catalog.setdefault(entry["name"], theme_name)
                catalog[f"{theme_name}{COLLISION_SEP}{entry['name']}"] = theme_name

    selection: Selection = {}
    for category in HOOK_KEYS:
        category_dir = paths.sounds_dir / category
        if not category_dir.is_dir():
            continue
        choices = []
        for f in sorted(category_dir.iterdir()):
            if f.suffix.lower() not in SOUND_EXTENSIONS or f.name not in catalog:
                continue
            theme_name = catalog[f.name]
            prefix = f"{theme_name}{COLLISION_SEP}"
            file_name = f.name[len(prefix):] if f.name.startswith(prefix) else f.name
            choices.append(SoundChoice(theme_name, file_name))
        if choices:
            selection[category] = choices
    return selection


# ---------------------------------------------------------------------------
# Hooks, settings.json and slash commands
# ---------------------------------------------------------------------------

def install_commands(paths: SoundPaths) -> list[str]:
    """Copy the slash commands, pointed at this install's sounds dir."""
    paths.commands_dir.mkdir(parents=True, exist_ok=True)
    sounds_dir = None
    if paths.sounds_dir != Path.home() / ".claude" / "sounds":
        sounds_dir = shlex.quote(str(paths.sounds_dir))

    installed = []
    for name in COMMAND_FILES:
        src = paths.pkg_dir / "commands" / name
        if not src.exists():
            logger.warning("Bundled command %s is missing", src)
            continue
        text = src.read_text(encoding="utf-8")
        if sounds_dir:
            text = text.replace(DEFAULT_SOUNDS_DIR, sounds_dir)
        (paths.commands_dir / name).write_text(text, encoding="utf-8")
        installed.append(name)
    return installed


def install_hooks_config(paths: SoundPaths) -> None:
    """Install play-sound.sh and point every hook event at it.

    Only the ``hooks`` key of settings.json is replaced; other keys survive.
    An unparseable settings.json raises before anything is written.
    """
    settings = read_settings(paths, strict=True)

    paths.hooks_dir.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(paths.pkg_dir / "hooks" / HOOK_SCRIPT_NAME, paths.hook_script)
    paths.hook_script.chmod(0o755)

    install_commands(paths)

    settings["hooks"] = build_hooks_config(paths.hook_command)
    write_settings(settings, paths)


def uninstall_all(paths: SoundPaths) -> UninstallResult:
    """Remove everything an install created, reporting what was present.

    settings.json is parsed first; if it is broken nothing is removed.
    """
    settings = read_settings(paths, strict=True) if paths.settings_path.exists() else None
    removed = UninstallResult()

    if paths.sounds_dir.exists():
        shutil.rmtree(paths.sounds_dir)
        removed.sounds = True

    if paths.hook_script.exists():
        paths.hook_script.unlink()
        removed.hook_script = True

    if settings is not None:
        settings.pop("hooks", None)
        write_settings(settings, paths)
        removed.hooks_config = True

    for name in COMMAND_FILES:
        command = paths.commands_dir / name
        if command.exists():
            command.unlink()
            removed.commands = True

    return removed


# ---------------------------------------------------------------------------
# Install flows
# ---------------------------------------------------------------------------

def quick_install(theme_name: str, paths: SoundPaths) -> QuickInstallResult:
    """Install a theme with its default category mapping."""
    theme = read_theme(theme_name, paths)
    selection = theme_sound_choices(theme_name, theme)

    total = install_sounds(selection, paths)
    write_installed({"themes": [theme_name], "mode": MODE_QUICK}, paths)
    install_hooks_config(paths)

    return QuickInstallResult(total=total, categories=len(selection))


def selection_themes(selection: Selection) -> list[str]:
    """Theme names used by ``selection``, in first-use order."""
    names: list[str] = []
    for category in HOOK_KEYS:
        for choice in selection.get(category, []):
            if choice.theme_name not in names:
                names.append(choice.theme_name)
    return names


def custom_install(selection: Selection, paths: SoundPaths) -> int:
    """Install a user-built selection across every hook category.

    Categories absent from ``selection`` are cleared, so the result only
    depends on the selection and not on what was installed before.
    """
    full = {category: list(selection.get(category, [])) for category in HOOK_KEYS}
    copied = copy_selection(full, paths)
    write_installed({
        "themes": selection_themes(full),
        "mode": MODE_CUSTOM,
        "sounds": selection_record(copied),
    }, paths)
    install_hooks_config(paths)
    return sum(len(choices) for choices in copied.values())
