"""Tests for the theme registry and the descriptors shipped with the package."""

import json
import re

import pytest

from claude_sounds.constants import HOOK_KEYS
from claude_sounds.errors import ThemeError, ThemeNotFoundError
from claude_sounds.paths import PACKAGE_DIR
from claude_sounds.themes import (
    SoundChoice,
    find_theme,
    list_themes,
    read_theme,
    resolve_theme_sound_path,
    theme_sound_choices,
)

SHIPPED_THEMES = sorted(p.parent.name for p in (PACKAGE_DIR / "themes").glob("*/theme.json"))


# ==============================================================================
# Registry
# ==============================================================================

def test_list_themes_skips_dirs_without_descriptor(paths, make_theme):
    make_theme("good", {"start": ["a.wav"]})
    (paths.themes_dir / "bad").mkdir()

    themes = list_themes(paths)
    assert [t.name for t in themes] == ["good"]


def test_list_themes_skips_corrupted_descriptor(paths, make_theme):
    make_theme("good", {"start": ["a.wav"]})
    corrupt = paths.themes_dir / "corrupt"
    corrupt.mkdir()
    (corrupt / "theme.json").write_text("NOT VALID JSON{{{", encoding="utf-8")
    listy = paths.themes_dir / "listy"
    listy.mkdir()
    (listy / "theme.json").write_text("[1, 2]", encoding="utf-8")

    assert [t.name for t in list_themes(paths)] == ["good"]


def test_list_themes_ignores_plain_files(paths, make_theme):
    make_theme("good", {"start": ["a.wav"]})
    (paths.themes_dir / "README.md").write_text("hi", encoding="utf-8")
    assert len(list_themes(paths)) == 1


def test_list_themes_missing_dir_is_empty(paths):
    paths.themes_dir.rmdir()
    assert list_themes(paths) == []


def test_list_themes_counts_sounds(paths, make_theme):
    make_theme("counted", {"start": ["a.wav", "b.wav"], "end": ["c.wav"]}, display="Counted")

    theme = list_themes(paths)[0]
    assert theme.sound_count == 3
    assert theme.display == "Counted"
    assert theme.description == "counted test theme"
    assert theme.sources == ["generated"]


def test_list_themes_sorted_by_name(paths, make_theme):
    make_theme("zeta", {"start": ["a.wav"]})
    make_theme("beta", {"start": ["a.wav"]})
    assert [t.name for t in list_themes(paths)] == ["beta", "zeta"]


def test_list_themes_tolerates_sparse_descriptor(paths):
    sparse = paths.themes_dir / "sparse"
    sparse.mkdir()
    (sparse / "theme.json").write_text(json.dumps({"sounds": {"start": {}}}), encoding="utf-8")

    theme = list_themes(paths)[0]
    assert theme.display == "sparse"
    assert theme.description == ""
    assert theme.sound_count == 0


def test_read_theme_missing_raises_not_found(paths, make_theme):
    make_theme("alpha", {"start": ["a.wav"]})
    with pytest.raises(ThemeNotFoundError) as exc:
        read_theme("nope", paths)
    assert "nope" in str(exc.value)
    assert "alpha" in str(exc.value)


def test_read_theme_corrupt_raises_theme_error(paths):
    broken = paths.themes_dir / "broken"
    broken.mkdir()
    (broken / "theme.json").write_text("{", encoding="utf-8")
    with pytest.raises(ThemeError):
        read_theme("broken", paths)


def test_find_theme(paths, make_theme):
    make_theme("alpha", {"start": ["a.wav"]})
    assert find_theme("alpha", paths).name == "alpha"
    with pytest.raises(ThemeNotFoundError) as exc:
        find_theme("badname", paths)
    assert exc.value.available == ["alpha"]


def test_resolve_theme_sound_path(paths):
    result = resolve_theme_sound_path("my-theme", "sound.wav", paths)
    assert result == paths.themes_dir / "my-theme" / "sounds" / "sound.wav"


def test_theme_sound_choices(paths, make_theme):
    make_theme("alpha", {"start": ["a.wav", "b.wav"], "end": ["c.wav"]})
    choices = theme_sound_choices("alpha", read_theme("alpha", paths))
    assert choices == {
        "start": [SoundChoice("alpha", "a.wav"), SoundChoice("alpha", "b.wav")],
        "end": [SoundChoice("alpha", "c.wav")],
    }


# ==============================================================================
# Shipped descriptors
# ==============================================================================

def test_package_ships_themes(real_paths):
    assert SHIPPED_THEMES
    assert [t.name for t in list_themes(real_paths)] == SHIPPED_THEMES
    for theme in list_themes(real_paths):
        assert theme.sound_count > 0


@pytest.mark.parametrize("theme_name", SHIPPED_THEMES)
def test_shipped_theme_descriptor_is_complete(theme_name, real_paths):
    data = read_theme(theme_name, real_paths)
    assert data["name"]
    assert data["description"]
    assert isinstance(data["sources"], list)
    assert set(HOOK_KEYS) <= set(data["sounds"])

    for category, config in data["sounds"].items():
        assert config["description"], category
        names = [f["name"] for f in config["files"]]
        assert names, f"{category}: files is empty"
        assert len(set(names)) == len(names), f"{category}: duplicate filenames"
        for f in config["files"]:
            assert re.search(r"\.(wav|mp3)$", f["name"]), f["name"]
            assert f["src"], f"{category}: {f['name']} has no src"


@pytest.mark.parametrize("theme_name", SHIPPED_THEMES)
def test_shipped_theme_has_download_script(theme_name):
    assert (PACKAGE_DIR / "themes" / theme_name / "download.sh").exists()


def test_shipped_display_names_unique(real_paths):
    displays = [t.display for t in list_themes(real_paths)]
    assert len(set(displays)) == len(displays)
