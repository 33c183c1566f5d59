"""
Configuration management using YAML files and dataclasses.

This module defines the process-level configuration and provides loading
from YAML files with defaults. Configuration sections:
- FetchConfig: HTTP fetching settings
- VaultConfig: Vault root and importer data directory
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container

User-level importer settings (feed URL, folders, watermark) are not part of
this file; they live in the JSON settings record handled by
``storage.settings.SettingsStore``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


@dataclass
class FetchConfig:
    """Configuration for HTTP fetching of the feed and its images.

    Attributes:
        timeout_seconds: HTTP request timeout
        retries: Number of retry attempts for failed requests
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
        cache_bust: Append a ``_t=<millis>`` query parameter to feed requests
        startup_delay_seconds: Delay before a startup-scheduled fetch
    """

    timeout_seconds: float = 20.0
    retries: int = 2
    trust_env: bool = True
    user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )
    cache_bust: bool = True
    startup_delay_seconds: float = 2.0


@dataclass
class VaultConfig:
    """Configuration for the note vault.

    Attributes:
        root: Vault root directory; post and image folders are relative to it
        data_dir: Importer data directory (settings record, run logs), relative to root
        settings_filename: Name of the JSON settings record inside data_dir
    """

    root: str = "."
    data_dir: str = ".rss-blog-importer"
    settings_filename: str = "data.json"

    @property
    def root_path(self) -> Path:
        return Path(self.root).expanduser()

    @property
    def data_path(self) -> Path:
        return self.root_path / self.data_dir

    @property
    def settings_path(self) -> Path:
        return self.data_path / self.settings_filename


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file inside the importer data directory
    """

    level: str = "INFO"
    console: bool = True
    file: bool = True
    format: str = "jsonl"
    filename: str = "run.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    fetch: FetchConfig = field(default_factory=FetchConfig)
    vault: VaultConfig = field(default_factory=VaultConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    return {
        "fetch": {
            "timeout_seconds": cfg.fetch.timeout_seconds,
            "retries": cfg.fetch.retries,
            "trust_env": cfg.fetch.trust_env,
            "user_agent": cfg.fetch.user_agent,
            "cache_bust": cfg.fetch.cache_bust,
            "startup_delay_seconds": cfg.fetch.startup_delay_seconds,
        },
        "vault": {
            "root": cfg.vault.root,
            "data_dir": cfg.vault.data_dir,
            "settings_filename": cfg.vault.settings_filename,
        },
        "logging": {
            "level": cfg.logging.level,
            "console": cfg.logging.console,
            "file": cfg.logging.file,
            "format": cfg.logging.format,
            "filename": cfg.logging.filename,
        },
    }


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        fetch=FetchConfig(**data["fetch"]),
        vault=VaultConfig(**data["vault"]),
        logging=LoggingConfig(**data["logging"]),
    )
