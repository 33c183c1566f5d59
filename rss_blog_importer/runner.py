"""
Feed ingestion orchestration for the RSS Blog Importer.

This module coordinates one import run:
1. Fetch and parse the feed
2. Compare each item's effective timestamp with the watermark
3. For each new item: select content, download and rewrite images,
   convert to Markdown, assemble and create the post
4. Advance the watermark to the newest successfully persisted item

A run is sequential. Only one run may be active per FeedImporter; a call
made while a run is in progress returns a "busy" report without fetching.
"""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import threading
from typing import Callable

from .config import FetchConfig
from .core.assembler import (
    append_backlinks,
    assemble_post,
    build_frontmatter,
    post_path,
)
from .core.content import post_title, select_content
from .core.images import (
    ImageMaterializer,
    downloaded_tokens,
    extract_image_urls,
    rewrite_image_urls,
)
from .core.markdown import html_to_markdown
from .core.types import FeedItem, ImportedPost, RunReport
from .errors import ImporterError, PostExistsError
from .fetch.feed import fetch_feed
from .fetch.fetcher import HttpClient
from .storage.settings import ImporterSettings, SettingsStore
from .storage.vault import FileStore
from .utils.logging import LOGGER_NAME, log_event
from .utils.notify import Notifier

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_millis(value: datetime) -> int:
    """Milliseconds since epoch for an aware or naive-UTC datetime."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def effective_datetime(item: FeedItem, now: datetime) -> datetime:
    """Publication time used for new/old comparison.

    The explicit publish date wins, then the updated date, then ``now``.
    """
    return item.published or item.updated or now


class FeedImporter:
    """Drives import runs against one vault and one settings record.

    Dependencies are injected so the importer holds no global state.

    Attributes:
        http: HTTP client for the feed and image downloads
        store: Vault file store
        settings_store: Persistent settings record (including the watermark)
        notifier: User notification channel
        fetch_cfg: Fetch behavior (cache-busting)
        logger: Logger for structured run events
    """

    def __init__(
        self,
        http: HttpClient,
        store: FileStore,
        settings_store: SettingsStore,
        notifier: Notifier,
        fetch_cfg: FetchConfig | None = None,
        logger: logging.Logger | None = None,
        clock: Clock | None = None,
    ):
        self.http = http
        self.store = store
        self.settings_store = settings_store
        self.notifier = notifier
        self.fetch_cfg = fetch_cfg or FetchConfig()
        self.logger = logger or logging.getLogger(LOGGER_NAME)
        self.clock = clock or _utcnow
        self._lock = threading.Lock()

    @property
    def is_fetching(self) -> bool:
        return self._lock.locked()

    def run(self) -> RunReport:
        """Run one import.

        Returns:
            RunReport describing the run. Run-fatal failures are reported
            with status "failed" instead of being raised.
        """
        if not self._lock.acquire(blocking=False):
            log_event(self.logger, "Import already running", event="run_busy")
            return RunReport(status="busy")
        try:
            return self._run_locked()
        finally:
            self._lock.release()

    def _run_locked(self) -> RunReport:
        settings = self.settings_store.load()
        watermark = settings.last_fetch_time
        report = RunReport(watermark_before=watermark, watermark_after=watermark)

        if not settings.feed_url:
            self.notifier.notify("Please configure RSS URL in settings")
            report.status = "not_configured"
            return report

        run_started = self.clock()
        log_event(
            self.logger,
            "Import start",
            event="run_start",
            feed_url=settings.feed_url,
            watermark=watermark,
        )
        self.notifier.notify("Fetching RSS posts...")

        try:
            feed = fetch_feed(
                self.http,
                settings.feed_url,
                now_ms=to_millis(run_started),
                cache_bust=self.fetch_cfg.cache_bust,
                logger=self.logger,
            )
        except ImporterError as exc:
            self.logger.error(
                "Error fetching RSS: %s", exc, extra={"event": "run_failed", "error": str(exc)}
            )
            self.notifier.notify(f"Failed to fetch RSS posts: {exc}")
            report.status = "failed"
            report.error = str(exc)
            return report

        log_event(
            self.logger,
            "Feed fetched",
            event="feed_fetched",
            feed_title=feed.title,
            items=len(feed.items),
        )

        newest_success: int | None = None
        for item in feed.items:
            published = effective_datetime(item, self.clock())
            timestamp_ms = to_millis(published)
            if timestamp_ms <= watermark:
                report.skipped += 1
                self.logger.debug(
                    "Skipping %s",
                    item.title,
                    extra={"event": "item_skipped", "timestamp": timestamp_ms},
                )
                continue

            try:
                post = self.import_item(item, feed.title, settings, published, run_started)
            except Exception as exc:  # noqa: BLE001
                report.failed += 1
                self._log_item_failure(item, exc)
                continue

            report.imported += 1
            if newest_success is None or post.timestamp_ms > newest_success:
                newest_success = post.timestamp_ms

        if newest_success is not None and newest_success > watermark:
            # Reloaded so settings edited during the run are kept
            current = self.settings_store.load()
            current.last_fetch_time = newest_success
            self.settings_store.save(current)
            report.watermark_after = newest_success
            log_event(
                self.logger,
                "Watermark advanced",
                event="watermark_advanced",
                previous=watermark,
                current=newest_success,
            )

        log_event(
            self.logger,
            "Import complete",
            event="run_complete",
            imported=report.imported,
            skipped=report.skipped,
            failed=report.failed,
        )
        self.notifier.notify(_summary_message(report))
        return report

    def import_item(
        self,
        item: FeedItem,
        feed_title: str,
        settings: ImporterSettings,
        published: datetime,
        imported_at: datetime,
    ) -> ImportedPost:
        """Build and persist the post for one feed item.

        Raises:
            PostExistsError: If the derived post path already exists
        """
        title = post_title(item)
        path = post_path(settings.folder_path, published, title)
        # Checked up front so no images are downloaded for an existing post
        if self.store.exists(path):
            raise PostExistsError(path)

        self.store.ensure_dir(settings.folder_path)
        self.store.ensure_dir(settings.image_folder)

        html = select_content(item)
        urls = extract_image_urls(html, item)
        materializer = ImageMaterializer(
            self.http, self.store, settings.image_folder, logger=self.logger
        )
        references = materializer.materialize(urls, title, to_millis(self.clock()))
        html = rewrite_image_urls(html, downloaded_tokens(references))

        body = html_to_markdown(html)
        body = append_backlinks(
            body,
            item.categories,
            settings.enable_category_backlinks,
            settings.append_backlink,
        )
        frontmatter = build_frontmatter(title, published, item.link, feed_title, imported_at)
        content = assemble_post(frontmatter, body)

        self.store.create_text(path, content)
        log_event(
            self.logger,
            "Post created",
            event="post_created",
            path=path,
            images=len(references),
            images_downloaded=len(downloaded_tokens(references)),
        )
        return ImportedPost(
            path=path,
            content=content,
            timestamp_ms=to_millis(published),
            images=references,
        )

    def _log_item_failure(self, item: FeedItem, exc: Exception) -> None:
        if isinstance(exc, PostExistsError):
            self.logger.info(
                "Post already exists: %s",
                exc.path,
                extra={"event": "post_failed", "reason": "exists", "path": exc.path},
            )
            return
        self.logger.error(
            "Failed to import %s: %s",
            item.title,
            exc,
            exc_info=exc,
            extra={"event": "post_failed", "reason": type(exc).__name__, "link": item.link},
        )


def _summary_message(report: RunReport) -> str:
    message = f"Imported {report.imported} new blog posts"
    details = []
    if report.skipped:
        details.append(f"{report.skipped} already imported")
    if report.failed:
        details.append(f"{report.failed} failed")
    if details:
        message += f" ({', '.join(details)})"
    return message
