"""Mute and do-not-disturb toggles.

Both are marker files in ``~/.claude/sounds``. play-sound.sh exits early when
``.muted`` exists, and when any process listed in ``.dnd`` is running.
"""

from pathlib import Path

from claude_sounds.constants import DND_DEFAULTS, DND_MARKER, MUTE_MARKER
from claude_sounds.paths import SoundPaths


def _set_marker(marker: Path, enabled: bool, content: str = "") -> None:
    if enabled:
        marker.parent.mkdir(parents=True, exist_ok=True)
        marker.write_text(content, encoding="utf-8")
    elif marker.exists():
        marker.unlink()


def mute_marker(paths: SoundPaths) -> Path:
    return paths.sounds_dir / MUTE_MARKER


def dnd_marker(paths: SoundPaths) -> Path:
    return paths.sounds_dir / DND_MARKER


def is_muted(paths: SoundPaths) -> bool:
    return mute_marker(paths).exists()


def set_muted(muted: bool, paths: SoundPaths) -> None:
    """Create or remove the mute marker. Unmuting twice is a no-op."""
    _set_marker(mute_marker(paths), muted)


def is_dnd(paths: SoundPaths) -> bool:
    return dnd_marker(paths).exists()


def set_dnd(enabled: bool, paths: SoundPaths) -> None:
    """Enable DND with the default process list, or remove it."""
    _set_marker(dnd_marker(paths), enabled, "\n".join(DND_DEFAULTS) + "\n")
