"""Theme registry: discovery and lookup of sound packs under ``themes/``.

A theme is a directory holding ``theme.json``::

    {
      "name": "Warcraft III Peon",
      "description": "...",
      "sources": ["..."],
      "sounds": {
        "start": {"description": "...", "files": [{"name": "a.mp3", "src": "..."}]}
      }
    }

Its audio lives in ``<theme>/sounds/`` once downloaded.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from claude_sounds.errors import ThemeError, ThemeNotFoundError
from claude_sounds.paths import SoundPaths

logger = logging.getLogger(__name__)

DESCRIPTOR_NAME = "theme.json"


@dataclass(frozen=True)
class ThemeSummary:
    """Display-ready theme metadata."""

    name: str
    display: str
    description: str
    sound_count: int
    sources: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SoundChoice:
    """One sound file picked from a theme."""

    theme_name: str
    file_name: str


def _load_descriptor(path: Path) -> dict[str, Any]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("descriptor is not a JSON object")
    return data


def category_files(theme: dict[str, Any], category: str) -> list[dict[str, Any]]:
    """Return the file entries of ``category``, tolerating sparse descriptors."""
    sounds = theme.get("sounds") or {}
    config = sounds.get(category) or {}
    files = config.get("files") or []
    return [f for f in files if isinstance(f, dict) and f.get("name")]


def count_sounds(theme: dict[str, Any]) -> int:
    sounds = theme.get("sounds") or {}
    return sum(len(category_files(theme, cat)) for cat in sounds)


def list_themes(paths: SoundPaths) -> list[ThemeSummary]:
    """List every theme directory with a readable descriptor, sorted by name.

    Directories without ``theme.json``, or whose descriptor is not valid JSON,
    are skipped rather than failing the listing.
    """
    if not paths.themes_dir.is_dir():
        return []

    themes = []
    for theme_dir in sorted(p for p in paths.themes_dir.iterdir() if p.is_dir()):
        descriptor = theme_dir / DESCRIPTOR_NAME
        if not descriptor.exists():
            continue
        try:
            meta = _load_descriptor(descriptor)
        except (OSError, ValueError) as e:
            logger.debug("Skipping theme %s: %s", theme_dir.name, e)
            continue

        themes.append(ThemeSummary(
            name=theme_dir.name,
            display=meta.get("name") or theme_dir.name,
            description=meta.get("description") or "",
            sound_count=count_sounds(meta),
            sources=list(meta.get("sources") or []),
        ))
    return themes


def read_theme(theme_name: str, paths: SoundPaths) -> dict[str, Any]:
    """Load a theme descriptor.

    Raises:
        ThemeNotFoundError: No descriptor for ``theme_name``
        ThemeError: Descriptor exists but cannot be parsed
    """
    descriptor = paths.themes_dir / theme_name / DESCRIPTOR_NAME
    if not descriptor.exists():
        raise ThemeNotFoundError(theme_name, [t.name for t in list_themes(paths)])
    try:
        return _load_descriptor(descriptor)
    except (OSError, ValueError) as e:
        raise ThemeError(f"Invalid theme descriptor {descriptor}: {e}") from e


def find_theme(theme_name: str, paths: SoundPaths) -> ThemeSummary:
    themes = list_themes(paths)
    for theme in themes:
        if theme.name == theme_name:
            return theme
    raise ThemeNotFoundError(theme_name, [t.name for t in themes])


def theme_sounds_dir(theme_name: str, paths: SoundPaths) -> Path:
    return paths.themes_dir / theme_name / "sounds"


def resolve_theme_sound_path(theme_name: str, file_name: str, paths: SoundPaths) -> Path:
    return theme_sounds_dir(theme_name, paths) / file_name


def theme_sound_choices(theme_name: str, theme: dict[str, Any]) -> dict[str, list[SoundChoice]]:
    """Default category -> files mapping of a theme (quick install)."""
    return {
        category: [SoundChoice(theme_name, f["name"]) for f in category_files(theme, category)]
        for category in (theme.get("sounds") or {})
    }
