"""Tests for YAML configuration loading."""

from pathlib import Path

from rss_blog_importer.config import AppConfig, load_config


def test_load_config_without_path_returns_defaults():
    cfg = load_config(None)

    assert cfg == AppConfig()
    assert cfg.fetch.timeout_seconds == 20.0
    assert cfg.vault.settings_path == Path(".") / ".rss-blog-importer" / "data.json"


def test_load_config_merges_sections(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "fetch:\n"
        "  timeout_seconds: 5\n"
        "vault:\n"
        "  root: /notes\n"
        "logging:\n"
        "  format: plain\n"
        "unknown_section:\n"
        "  ignored: true\n",
        encoding="utf-8",
    )

    cfg = load_config(str(path))

    assert cfg.fetch.timeout_seconds == 5
    assert cfg.fetch.retries == 2
    assert cfg.vault.root_path == Path("/notes")
    assert cfg.logging.format == "plain"
    assert cfg.logging.level == "INFO"


def test_defaults_are_not_shared_between_loads():
    first = load_config(None)
    first.logging.level = "DEBUG"

    assert load_config(None).logging.level == "INFO"
