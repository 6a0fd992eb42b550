"""Audio player detection, dependency checks, and sound previews."""

import logging
import os
import shutil
import signal
import subprocess
import sys
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Same order play-sound.sh tries them in
PLAYERS = ["afplay", "paplay", "aplay"]
DOWNLOAD_TOOLS = ["curl", "unzip"]


def has_command(name: str) -> bool:
    return shutil.which(name) is not None


def find_player() -> Optional[str]:
    """Return the first available command-line audio player."""
    for player in PLAYERS:
        if has_command(player):
            return player
    return None


def missing_tools(tools: list[str]) -> list[str]:
    return [tool for tool in tools if not has_command(tool)]


def brew_install(packages: list[str]) -> bool:
    """Install packages with Homebrew, streaming its output. Returns success."""
    if not has_command("brew"):
        return False
    try:
        subprocess.run(["brew", "install", *packages], check=True)
    except (subprocess.CalledProcessError, OSError) as e:
        logger.error("brew install %s failed: %s", " ".join(packages), e)
        return False
    return True


class PreviewPlayer:
    """Plays one preview at a time; starting a new one kills the last."""

    def __init__(self, player: Optional[str] = None):
        self.player = player or find_player()
        self._process: Optional[subprocess.Popen] = None

    @property
    def playing(self) -> bool:
        return self._process is not None and self._process.poll() is None

    def play(self, sound_path: Path) -> bool:
        """Start playing ``sound_path`` in the background.

        Returns False when the file or a player is missing.
        """
        self.stop()
        if not self.player or not Path(sound_path).exists():
            return False
        try:
            self._process = subprocess.Popen(
                [self.player, str(sound_path)],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=sys.platform != "win32",
            )
        except OSError as e:
            logger.debug("Preview failed for %s: %s", sound_path, e)
            self._process = None
            return False
        return True

    def stop(self) -> None:
        process, self._process = self._process, None
        if process is None or process.poll() is not None:
            return
        try:
            if sys.platform != "win32":
                os.killpg(process.pid, signal.SIGTERM)
            else:
                process.terminate()
            process.wait(timeout=1)
        except (ProcessLookupError, PermissionError):
            pass
        except subprocess.TimeoutExpired:
            process.kill()
