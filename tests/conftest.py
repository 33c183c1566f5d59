"""Shared fixtures for importer tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from fakes import FEED_URL, NOW, FakeHttp, RecordingNotifier
from rss_blog_importer.config import FetchConfig
from rss_blog_importer.runner import FeedImporter
from rss_blog_importer.storage.settings import ImporterSettings, SettingsStore
from rss_blog_importer.storage.vault import VaultStore
from rss_blog_importer.utils.notify import NullNotifier


@pytest.fixture
def vault(tmp_path: Path) -> VaultStore:
    return VaultStore(tmp_path)


@pytest.fixture
def settings_store(tmp_path: Path) -> SettingsStore:
    store = SettingsStore(tmp_path / ".rss-blog-importer" / "data.json")
    store.save(ImporterSettings(feed_url=FEED_URL))
    return store


@pytest.fixture
def make_importer(vault, settings_store):
    def _make(http: FakeHttp, notifier: RecordingNotifier | None = None) -> FeedImporter:
        return FeedImporter(
            http=http,
            store=vault,
            settings_store=settings_store,
            notifier=notifier or NullNotifier(),
            fetch_cfg=FetchConfig(cache_bust=False),
            clock=lambda: NOW,
        )

    return _make
