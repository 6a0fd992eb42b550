"""Filesystem layout for an install.

All operations take a ``SoundPaths`` bundle explicitly so tests can point
them at a temporary Claude directory.
"""

import os
from dataclasses import dataclass
from pathlib import Path

PACKAGE_DIR = Path(__file__).resolve().parent
HOOK_SCRIPT_NAME = "play-sound.sh"


def get_claude_home() -> Path:
    """Return CLAUDE_HOME, defaulting to ~/.claude."""
    env = os.environ.get("CLAUDE_HOME")
    if env:
        return Path(env).expanduser()
    return Path.home() / ".claude"


@dataclass(frozen=True)
class SoundPaths:
    claude_dir: Path
    sounds_dir: Path
    hooks_dir: Path
    commands_dir: Path
    settings_path: Path
    installed_path: Path
    themes_dir: Path
    pkg_dir: Path

    @property
    def hook_script(self) -> Path:
        return self.hooks_dir / HOOK_SCRIPT_NAME

    @property
    def hook_command(self) -> str:
        """Shell prefix written into settings.json for every hook event."""
        if self.claude_dir == Path.home() / ".claude":
            return f'/bin/bash "$HOME/.claude/hooks/{HOOK_SCRIPT_NAME}"'
        return f'/bin/bash "{self.hook_script}"'


def create_paths(claude_dir: Path | str, pkg_dir: Path | str) -> SoundPaths:
    """Derive every install location from the Claude dir and package dir."""
    claude_dir = Path(claude_dir)
    pkg_dir = Path(pkg_dir)
    sounds_dir = claude_dir / "sounds"
    return SoundPaths(
        claude_dir=claude_dir,
        sounds_dir=sounds_dir,
        hooks_dir=claude_dir / "hooks",
        commands_dir=claude_dir / "commands",
        settings_path=claude_dir / "settings.json",
        installed_path=sounds_dir / ".installed.json",
        themes_dir=pkg_dir / "themes",
        pkg_dir=pkg_dir,
    )


def default_paths() -> SoundPaths:
    return create_paths(get_claude_home(), PACKAGE_DIR)
