"""Tests for the vault file store and the settings record."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from rss_blog_importer.errors import PostExistsError
from rss_blog_importer.storage.settings import ImporterSettings, SettingsStore
from rss_blog_importer.storage.vault import VaultStore, join_path, normalize_path


def test_normalize_and_join_paths():
    assert normalize_path("Blog Posts//2024 - A.md") == "Blog Posts/2024 - A.md"
    assert normalize_path("\\Images\\") == "Images"
    assert join_path("Blog Posts/", "/x.md") == "Blog Posts/x.md"
    assert join_path("", "x.md") == "x.md"


def test_create_text_never_overwrites(tmp_path: Path):
    store = VaultStore(tmp_path)
    store.create_text("Posts/a.md", "first")

    with pytest.raises(PostExistsError) as excinfo:
        store.create_text("Posts/a.md", "second")

    assert isinstance(excinfo.value, FileExistsError)
    assert excinfo.value.path == "Posts/a.md"
    assert (tmp_path / "Posts" / "a.md").read_text(encoding="utf-8") == "first"


def test_create_binary_and_ensure_dir(tmp_path: Path):
    store = VaultStore(tmp_path)
    store.ensure_dir("Images/nested")
    store.create_binary("Images/nested/a.png", b"\x00\x01")

    assert (tmp_path / "Images" / "nested").is_dir()
    assert store.exists("Images/nested/a.png")
    with pytest.raises(FileExistsError):
        store.create_binary("Images/nested/a.png", b"\x02")


def test_paths_cannot_escape_vault(tmp_path: Path):
    store = VaultStore(tmp_path / "vault")

    with pytest.raises(ValueError):
        store.create_text("../outside.md", "nope")


def test_settings_missing_file_yields_defaults(tmp_path: Path):
    settings = SettingsStore(tmp_path / "data.json").load()

    assert settings == ImporterSettings()
    assert settings.folder_path == "Blog Posts"
    assert settings.image_folder == "Blog Images"
    assert settings.fetch_on_startup is True
    assert settings.last_fetch_time == 0


def test_settings_merge_ignores_unknown_keys(tmp_path: Path):
    path = tmp_path / "data.json"
    path.write_text(
        json.dumps({"feed_url": "https://x.example.com/rss", "last_fetch_time": 55, "legacy": 1}),
        encoding="utf-8",
    )

    settings = SettingsStore(path).load()

    assert settings.feed_url == "https://x.example.com/rss"
    assert settings.last_fetch_time == 55
    assert settings.folder_path == "Blog Posts"


def test_settings_round_trip_and_reset(tmp_path: Path):
    store = SettingsStore(tmp_path / "nested" / "data.json")
    store.save(ImporterSettings(feed_url="https://x.example.com/rss", last_fetch_time=99))

    reset = store.reset_watermark()

    assert reset.last_fetch_time == 0
    assert store.load().last_fetch_time == 0
    assert store.load().feed_url == "https://x.example.com/rss"
