"""Fetch theme audio that is not bundled with the package.

A theme may ship ``download.sh``, invoked once as::

    bash download.sh <theme sounds dir> <temp dir>

It leaves raw assets in the temp dir; each descriptor entry's ``src`` then
says where its file is. ``@provider/name.mp3`` sources are flat files named
by their basename, anything else is a path relative to the temp dir.
"""

import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Any

from claude_sounds.errors import DownloadError
from claude_sounds.paths import SoundPaths
from claude_sounds.themes import category_files, read_theme, resolve_theme_sound_path, theme_sounds_dir

logger = logging.getLogger(__name__)

DOWNLOAD_SCRIPT = "download.sh"


def missing_theme_sounds(theme_name: str, theme: dict[str, Any], paths: SoundPaths) -> list[dict[str, Any]]:
    """Descriptor file entries whose audio is not on disk yet."""
    missing = []
    seen = set()
    for category in theme.get("sounds") or {}:
        for entry in category_files(theme, category):
            if entry["name"] in seen:
                continue
            seen.add(entry["name"])
            if not resolve_theme_sound_path(theme_name, entry["name"], paths).exists():
                missing.append(entry)
    return missing


def resolve_source(src: str, download_dir: Path) -> Path:
    if src.startswith("@"):
        return download_dir / Path(src).name
    return download_dir / src


def needs_download(theme_name: str, paths: SoundPaths) -> bool:
    theme = read_theme(theme_name, paths)
    script = paths.themes_dir / theme_name / DOWNLOAD_SCRIPT
    return bool(missing_theme_sounds(theme_name, theme, paths)) and script.exists()


def stage_downloads(theme_name: str, entries: list[dict[str, Any]], download_dir: Path, paths: SoundPaths) -> int:
    """Copy downloaded assets into the theme's sounds dir under their final names."""
    dest_dir = theme_sounds_dir(theme_name, paths)
    dest_dir.mkdir(parents=True, exist_ok=True)
    staged = 0
    for entry in entries:
        # The script may write straight into the theme's sounds dir
        if (dest_dir / entry["name"]).exists():
            staged += 1
            continue
        src = resolve_source(entry.get("src") or entry["name"], download_dir)
        if not src.exists():
            logger.warning("%s: %s not found in download, skipping", theme_name, entry.get("src"))
            continue
        shutil.copyfile(src, dest_dir / entry["name"])
        staged += 1
    return staged


def download_theme(theme_name: str, paths: SoundPaths) -> int:
    """Run the theme's download script if any of its sounds are missing.

    Returns:
        Number of files staged (0 when nothing was missing or no script exists)

    Raises:
        DownloadError: If the script exits non-zero
    """
    theme = read_theme(theme_name, paths)
    missing = missing_theme_sounds(theme_name, theme, paths)
    if not missing:
        return 0

    script = paths.themes_dir / theme_name / DOWNLOAD_SCRIPT
    if not script.exists():
        logger.warning("%s: %d sound(s) missing and no %s", theme_name, len(missing), DOWNLOAD_SCRIPT)
        return 0

    with tempfile.TemporaryDirectory(prefix="claude-sounds-") as tmp:
        download_dir = Path(tmp)
        try:
            subprocess.run(
                ["bash", str(script), str(theme_sounds_dir(theme_name, paths)), str(download_dir)],
                check=True,
            )
        except subprocess.CalledProcessError as e:
            raise DownloadError(f"Download for theme '{theme_name}' failed (exit {e.returncode})") from e
        except OSError as e:
            raise DownloadError(f"Could not run {script}: {e}") from e

        return stage_downloads(theme_name, missing, download_dir, paths)
