"""
Command-line interface for the RSS Blog Importer.

Uses Typer to provide commands for running an import, resetting the import
watermark and editing the persistent importer settings. Supports loading
.env files for the feed URL.
"""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
import time

import typer
from dotenv import find_dotenv, load_dotenv
from rich.console import Console
from rich.table import Table

from .config import AppConfig, load_config
from .fetch.fetcher import HttpxClient
from .runner import FeedImporter
from .storage.settings import SettingsStore
from .storage.vault import VaultStore
from .utils.logging import setup_logging
from .utils.notify import ConsoleNotifier

app = typer.Typer(add_completion=False, help="Import blog posts from an RSS/Atom feed into a note vault.")
console = Console()


def _load(config: Path | None, vault: Path | None) -> AppConfig:
    # Load environment variables from .env if available
    load_dotenv(find_dotenv(usecwd=True))
    cfg = load_config(str(config) if config else None)
    if vault is not None:
        cfg.vault.root = str(vault)
    return cfg


@app.command()
def run(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, dir_okay=False),
    vault: Path | None = typer.Option(None, "--vault", "-v", file_okay=False, help="Vault root directory."),
    feed_url: str | None = typer.Option(
        None,
        "--feed-url",
        envvar="RSS_BLOG_IMPORTER_FEED_URL",
        help="Feed URL; stored in the settings record when given.",
    ),
    startup: bool = typer.Option(
        False,
        "--startup",
        help="Startup-scheduled run: honor fetch_on_startup and wait before fetching.",
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_format: str | None = typer.Option(
        None, "--log-format", help="Log file format: jsonl or plain."
    ),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
):
    """Fetch the feed and import every post newer than the watermark."""
    cfg = _load(config, vault)

    # Override with CLI options
    if log_level:
        cfg.logging.level = log_level
    if log_format:
        cfg.logging.format = log_format
    if log_file is not None:
        cfg.logging.file = log_file

    logger = setup_logging(cfg.logging, cfg.vault.data_path)
    settings_store = SettingsStore(cfg.vault.settings_path)

    if feed_url:
        settings = settings_store.load()
        if settings.feed_url != feed_url:
            settings.feed_url = feed_url
            settings_store.save(settings)

    if startup:
        settings = settings_store.load()
        if not settings.fetch_on_startup:
            console.print("Fetch on startup is disabled; nothing to do.")
            return
        if not settings.feed_url:
            console.print("No feed URL configured; skipping startup fetch.")
            return
        time.sleep(cfg.fetch.startup_delay_seconds)

    importer = FeedImporter(
        http=HttpxClient(cfg.fetch),
        store=VaultStore(cfg.vault.root_path),
        settings_store=settings_store,
        notifier=ConsoleNotifier(console, logger),
        fetch_cfg=cfg.fetch,
        logger=logger,
    )
    report = importer.run()
    if report.status in ("failed", "not_configured"):
        raise typer.Exit(code=1)


@app.command()
def reset(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, dir_okay=False),
    vault: Path | None = typer.Option(None, "--vault", "-v", file_okay=False),
):
    """Reset the import watermark so the next run re-imports all posts."""
    cfg = _load(config, vault)
    SettingsStore(cfg.vault.settings_path).reset_watermark()
    ConsoleNotifier(console).notify("Import cache reset. Next fetch will import all posts.")


@app.command()
def configure(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, dir_okay=False),
    vault: Path | None = typer.Option(None, "--vault", "-v", file_okay=False),
    feed_url: str | None = typer.Option(None, "--feed-url", help="The URL of your blog's RSS feed."),
    folder: str | None = typer.Option(None, "--folder", help="Folder where blog posts will be saved."),
    image_folder: str | None = typer.Option(
        None, "--image-folder", help="Folder where downloaded images will be saved."
    ),
    fetch_on_startup: bool | None = typer.Option(
        None,
        "--fetch-on-startup/--no-fetch-on-startup",
        help="Whether `run --startup` fetches new posts.",
    ),
    category_backlinks: bool | None = typer.Option(
        None,
        "--category-backlinks/--no-category-backlinks",
        help="Add feed categories as backlinks at the end of posts.",
    ),
    backlink: str | None = typer.Option(
        None, "--backlink", help='Backlink appended to each imported post (e.g. "blog posts").'
    ),
):
    """Update the persistent importer settings."""
    cfg = _load(config, vault)
    store = SettingsStore(cfg.vault.settings_path)
    settings = store.load()

    if feed_url is not None:
        settings.feed_url = feed_url
    if folder is not None:
        settings.folder_path = folder
    if image_folder is not None:
        settings.image_folder = image_folder
    if fetch_on_startup is not None:
        settings.fetch_on_startup = fetch_on_startup
    if category_backlinks is not None:
        settings.enable_category_backlinks = category_backlinks
    if backlink is not None:
        settings.append_backlink = backlink

    store.save(settings)
    console.print(f"Settings saved to {store.path}")


@app.command()
def show(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, dir_okay=False),
    vault: Path | None = typer.Option(None, "--vault", "-v", file_okay=False),
):
    """Print the current importer settings."""
    cfg = _load(config, vault)
    settings = SettingsStore(cfg.vault.settings_path).load()

    table = Table(title="RSS Blog Importer settings")
    table.add_column("Setting")
    table.add_column("Value")
    for key, value in asdict(settings).items():
        table.add_row(key, str(value))
    console.print(table)


if __name__ == "__main__":
    app()
