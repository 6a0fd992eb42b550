"""Shared pytest fixtures: temp Claude dirs and generated fixture themes."""

import dataclasses
import json
import math
import struct
import sys
from pathlib import Path
from typing import Callable

import pytest

# Ensure the package is importable without installing
sys.path.insert(0, str(Path(__file__).parent.parent))

from claude_sounds.constants import HOOK_KEYS
from claude_sounds.paths import PACKAGE_DIR, SoundPaths, create_paths


def generate_wav(frequency: int = 440, duration_ms: int = 20) -> bytes:
    """Generate a tiny mono 16-bit PCM WAV tone."""
    sample_rate = 8000
    num_samples = int(sample_rate * duration_ms / 1000)
    data = b"".join(
        struct.pack("<h", int(0.3 * 32767 * math.sin(2 * math.pi * frequency * i / sample_rate)))
        for i in range(num_samples)
    )
    header = struct.pack(
        "<4sI4s4sIHHIIHH4sI",
        b"RIFF", 36 + len(data), b"WAVE",
        b"fmt ", 16, 1, 1, sample_rate, sample_rate * 2, 2, 16,
        b"data", len(data),
    )
    return header + data


@pytest.fixture
def real_paths(tmp_path: Path) -> SoundPaths:
    """Temp Claude dir, bundled package data (hooks, commands, shipped themes)."""
    return create_paths(tmp_path / ".claude", PACKAGE_DIR)


@pytest.fixture
def paths(real_paths: SoundPaths, tmp_path: Path) -> SoundPaths:
    """Temp Claude dir with an empty temp themes dir."""
    themes_dir = tmp_path / "themes"
    themes_dir.mkdir()
    return dataclasses.replace(real_paths, themes_dir=themes_dir)


@pytest.fixture
def make_theme(paths: SoundPaths) -> Callable[..., Path]:
    """Write a fixture theme: ``make_theme(name, {category: [file, ...]})``."""

    def _make(
        name: str,
        sounds: dict[str, list[str]],
        display: str | None = None,
        with_files: bool = True,
    ) -> Path:
        theme_dir = paths.themes_dir / name
        (theme_dir / "sounds").mkdir(parents=True, exist_ok=True)
        descriptor = {
            "name": display or name.title(),
            "description": f"{name} test theme",
            "sources": ["generated"],
            "sounds": {
                category: {
                    "description": f"{category} sounds",
                    "files": [{"name": f, "src": f"raw/{f}"} for f in files],
                }
                for category, files in sounds.items()
            },
        }
        (theme_dir / "theme.json").write_text(json.dumps(descriptor, indent=2), encoding="utf-8")
        if with_files:
            for i, files in enumerate(sounds.values()):
                for f in files:
                    (theme_dir / "sounds" / f).write_bytes(generate_wav(300 + 40 * i))
        return theme_dir

    return _make


@pytest.fixture
def full_theme(make_theme) -> str:
    """Theme 'alpha' with one sound in each of the 11 categories."""
    make_theme("alpha", {category: [f"{category}.wav"] for category in HOOK_KEYS}, display="Alpha")
    return "alpha"
