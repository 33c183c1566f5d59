"""
Persistent importer settings.

The settings record is a flat JSON object holding the user-level importer
options and the import watermark. Loading merges the stored record over
defaults so records written by older versions keep working.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
import json
from pathlib import Path
from typing import Any


@dataclass
class ImporterSettings:
    """User-level importer settings.

    Attributes:
        feed_url: URL of the blog's RSS/Atom feed
        folder_path: Vault folder where posts are saved
        image_folder: Vault folder where downloaded images are saved
        last_fetch_time: Import watermark in milliseconds since epoch
        fetch_on_startup: Whether a startup-scheduled run should fetch
        append_backlink: Backlink appended to every imported post
        enable_category_backlinks: Append feed categories as backlinks
    """

    feed_url: str = ""
    folder_path: str = "Blog Posts"
    image_folder: str = "Blog Images"
    last_fetch_time: int = 0
    fetch_on_startup: bool = True
    append_backlink: str = ""
    enable_category_backlinks: bool = False


class SettingsStore:
    """Loads and saves ImporterSettings as a JSON file.

    Attributes:
        path: Location of the JSON record
    """

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> ImporterSettings:
        """Load settings, falling back to defaults for missing keys or file."""
        if not self.path.exists():
            return ImporterSettings()
        with open(self.path, "r", encoding="utf-8") as f:
            raw = json.load(f) or {}
        return _merge_settings(raw)

    def save(self, settings: ImporterSettings) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(asdict(settings), f, indent=2, ensure_ascii=False)
            f.write("\n")

    def reset_watermark(self) -> ImporterSettings:
        """Reset the import watermark so the next run re-imports every item."""
        settings = self.load()
        settings.last_fetch_time = 0
        self.save(settings)
        return settings


def _merge_settings(raw: dict[str, Any]) -> ImporterSettings:
    """Overlay known keys from a stored record onto the defaults."""
    known = {f.name for f in fields(ImporterSettings)}
    data = asdict(ImporterSettings())
    data.update({key: value for key, value in raw.items() if key in known})
    data["last_fetch_time"] = int(data["last_fetch_time"] or 0)
    return ImporterSettings(**data)
