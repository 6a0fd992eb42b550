"""Crash-safe JSON files for settings.json and the install state.

Claude Code rewrites ``settings.json`` on its own (permissions, model switches),
so the installer never edits it in place:

- reads hold a shared portalocker lock for the duration of the read
- writes go to a sibling ``.<name>.*.tmp`` file that is renamed over the target

A crash mid-write leaves the previous file intact.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

import portalocker

DEFAULT_TIMEOUT = 5.0


class TransactionError(Exception):
    """Raised when a JSON file cannot be written or parsed."""
    pass


class LockTimeoutError(TransactionError):
    """Raised when another process holds the file lock past the timeout."""
    pass


def atomic_write_text(path: Path | str, content: str, fsync: bool = True) -> None:
    """Replace ``path`` with ``content`` in a single rename.

    Args:
        path: Destination; missing parent directories are created
        content: Full new file content
        fsync: Flush to disk before the rename

    Raises:
        TransactionError: The destination was left unchanged
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            tmp.write(content)
            if fsync:
                tmp.flush()
                os.fsync(tmp.fileno())
        os.replace(tmp_name, target)
    except OSError as e:
        Path(tmp_name).unlink(missing_ok=True)
        raise TransactionError(f"Could not write {target}: {e}") from e


def atomic_write_json(path: Path | str, data: Any, fsync: bool = True) -> None:
    """Write ``data`` as 2-space indented JSON ending in a newline.

    Serialization happens before any file is created, so a ``TypeError`` from
    an unserializable value leaves the disk untouched.
    """
    atomic_write_text(path, json.dumps(data, indent=2) + "\n", fsync=fsync)


def locked_read_json(
    path: Path | str,
    timeout: float = DEFAULT_TIMEOUT,
    default: Optional[Any] = None,
) -> Any:
    """Parse a JSON file while holding a shared lock on it.

    Missing and blank files both yield ``default``.

    Raises:
        LockTimeoutError: No shared lock within ``timeout`` seconds
        TransactionError: The file is not valid JSON
    """
    source = Path(path)
    if not source.exists():
        return default

    try:
        with portalocker.Lock(
            str(source),
            mode="r",
            flags=portalocker.LOCK_SH | portalocker.LOCK_NB,
            timeout=timeout,
        ) as fh:
            raw = fh.read()
    except portalocker.exceptions.LockException as e:
        raise LockTimeoutError(f"{source} stayed locked for {timeout}s") from e

    if not raw.strip():
        return default
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise TransactionError(f"Invalid JSON in {source}: {e}") from e
