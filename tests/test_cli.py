"""Tests for the settings-oriented CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from rss_blog_importer.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _no_feed_env(monkeypatch):
    monkeypatch.delenv("RSS_BLOG_IMPORTER_FEED_URL", raising=False)


def _settings(vault: Path) -> dict:
    return json.loads((vault / ".rss-blog-importer" / "data.json").read_text(encoding="utf-8"))


def test_configure_persists_settings(tmp_path: Path):
    result = runner.invoke(
        app,
        [
            "configure",
            "--vault",
            str(tmp_path),
            "--feed-url",
            "https://blog.example.com/rss",
            "--folder",
            "Posts",
            "--category-backlinks",
            "--backlink",
            "blog posts",
        ],
    )

    assert result.exit_code == 0, result.output
    saved = _settings(tmp_path)
    assert saved["feed_url"] == "https://blog.example.com/rss"
    assert saved["folder_path"] == "Posts"
    assert saved["image_folder"] == "Blog Images"
    assert saved["enable_category_backlinks"] is True
    assert saved["append_backlink"] == "blog posts"


def test_reset_clears_watermark_only(tmp_path: Path):
    data_dir = tmp_path / ".rss-blog-importer"
    data_dir.mkdir()
    (data_dir / "data.json").write_text(
        json.dumps({"feed_url": "https://blog.example.com/rss", "last_fetch_time": 1700000000000}),
        encoding="utf-8",
    )

    result = runner.invoke(app, ["reset", "--vault", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert "Import cache reset" in result.output
    saved = _settings(tmp_path)
    assert saved["last_fetch_time"] == 0
    assert saved["feed_url"] == "https://blog.example.com/rss"


def test_show_lists_settings(tmp_path: Path):
    result = runner.invoke(app, ["show", "--vault", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert "folder_path" in result.output
    assert "Blog Posts" in result.output


def test_startup_run_respects_disabled_flag(tmp_path: Path):
    runner.invoke(app, ["configure", "--vault", str(tmp_path), "--no-fetch-on-startup"])

    result = runner.invoke(app, ["run", "--vault", str(tmp_path), "--startup", "--no-log-file"])

    assert result.exit_code == 0, result.output
    assert "Fetch on startup is disabled" in result.output


def test_run_without_feed_url_exits_nonzero(tmp_path: Path):
    result = runner.invoke(app, ["run", "--vault", str(tmp_path), "--no-log-file"])

    assert result.exit_code == 1
    assert "Please configure RSS URL in settings" in result.output
