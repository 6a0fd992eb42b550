"""Install state store and settings.json access.

Install state lives in ``~/.claude/sounds/.installed.json``::

    {"themes": ["wc3-peon"], "mode": "quick"}

Custom installs add a ``sounds`` map of category to ``{"theme", "file"}`` entries.

Older installs wrote ``{"theme": "wc3-peon"}``; both shapes are read. Missing
or corrupt files are treated as "nothing installed" rather than errors.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from claude_sounds.constants import SOUND_EXTENSIONS
from claude_sounds.errors import ThemeError
from claude_sounds.paths import SoundPaths
from claude_sounds.themes import read_theme
from claude_sounds.transaction import (
    LockTimeoutError,
    TransactionError,
    atomic_write_json,
    locked_read_json,
)

logger = logging.getLogger(__name__)

MODE_QUICK = "quick"
MODE_CUSTOM = "custom"


@dataclass(frozen=True)
class ExistingInstall:
    themes: list[str]
    theme_displays: list[str]
    total_enabled: int
    mode: str


# ---------------------------------------------------------------------------
# settings.json
# ---------------------------------------------------------------------------

def read_settings(paths: SoundPaths, strict: bool = False) -> dict[str, Any]:
    """Return settings.json as a dict, or ``{}`` if missing.

    Args:
        strict: Raise instead of returning ``{}`` for an unparseable file.
            Callers that write settings back use this so a broken file is
            reported rather than replaced.

    Raises:
        TransactionError: ``strict`` and the file is not a JSON object
    """
    try:
        settings = locked_read_json(paths.settings_path, default={})
    except LockTimeoutError:
        raise
    except TransactionError as e:
        if strict:
            raise TransactionError(f"{e}; fix or remove it and try again") from e
        logger.warning("Ignoring unreadable %s: %s", paths.settings_path, e)
        return {}
    if not isinstance(settings, dict):
        if strict:
            raise TransactionError(f"{paths.settings_path} is not a JSON object; fix or remove it and try again")
        return {}
    return settings


def write_settings(settings: dict[str, Any], paths: SoundPaths) -> None:
    atomic_write_json(paths.settings_path, settings)


# ---------------------------------------------------------------------------
# .installed.json
# ---------------------------------------------------------------------------

def read_installed(paths: SoundPaths) -> Optional[dict[str, Any]]:
    """Return the recorded install state, or None if absent or corrupt."""
    try:
        data = json.loads(paths.installed_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        logger.debug("Ignoring corrupt install state %s: %s", paths.installed_path, e)
        return None
    if not isinstance(data, dict):
        return None
    return data


def write_installed(data: dict[str, Any], paths: SoundPaths) -> None:
    atomic_write_json(paths.installed_path, data)


def installed_theme_names(data: Optional[dict[str, Any]]) -> list[str]:
    """Theme names from either the ``themes`` list or the legacy ``theme`` key."""
    if not data:
        return []
    themes = data.get("themes")
    if isinstance(themes, list):
        return [t for t in themes if isinstance(t, str)]
    theme = data.get("theme")
    if isinstance(theme, str) and theme:
        return [theme]
    return []


def count_sound_files(directory) -> int:
    try:
        return sum(
            1 for f in directory.iterdir()
            if f.is_file() and f.suffix.lower() in SOUND_EXTENSIONS
        )
    except OSError:
        return 0


def detect_existing_install(paths: SoundPaths) -> Optional[ExistingInstall]:
    """Describe the current install, or None when nothing usable is on disk.

    Only the categories declared by the installed themes are counted, so a
    state file with no matching sound files reads as "not installed".
    """
    installed = read_installed(paths)
    theme_names = installed_theme_names(installed)
    if not theme_names:
        return None

    categories: set[str] = set()
    displays = []
    for name in theme_names:
        try:
            theme = read_theme(name, paths)
        except ThemeError:
            displays.append(name)
            continue
        categories.update((theme.get("sounds") or {}).keys())
        displays.append(theme.get("name") or name)

    total = sum(count_sound_files(paths.sounds_dir / cat) for cat in categories)
    if total == 0:
        return None

    return ExistingInstall(
        themes=theme_names,
        theme_displays=displays,
        total_enabled=total,
        mode=installed.get("mode") or MODE_QUICK,
    )
