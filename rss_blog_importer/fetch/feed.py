"""
Feed retrieval and parsing.

Fetches the configured feed with cache-busting and no-cache headers and
parses RSS/Atom payloads with feedparser into immutable FeedItem records.
RSS ``item`` and Atom ``entry`` elements are treated uniformly.
"""

from __future__ import annotations

import calendar
import io
from datetime import datetime, timezone
import logging
import time
from typing import Any

import feedparser

from ..core.types import FeedInfo, FeedItem, MediaDescriptor
from ..errors import FeedFetchError, FeedParseError
from .fetcher import HttpClient

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}

HTML_CONTENT_TYPES = {"text/html", "application/xhtml+xml"}


def cache_bust_url(url: str, now_ms: int) -> str:
    """Append a ``_t`` timestamp parameter so intermediaries serve a fresh copy."""
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}_t={now_ms}"


def fetch_feed(
    http: HttpClient,
    url: str,
    now_ms: int,
    cache_bust: bool = True,
    logger: logging.Logger | None = None,
) -> FeedInfo:
    """Fetch and parse a feed.

    Args:
        http: HTTP client used for the request
        url: Feed URL from the settings record
        now_ms: Current time in milliseconds, used for cache-busting
        cache_bust: Whether to append the ``_t`` parameter
        logger: Optional logger for parse warnings

    Returns:
        The parsed FeedInfo

    Raises:
        FeedFetchError: On network failure or a non-2xx response
        FeedParseError: When the payload is not a recognizable feed
    """
    request_url = cache_bust_url(url, now_ms) if cache_bust else url
    result = http.get(request_url, headers=dict(NO_CACHE_HEADERS))
    if not result.ok:
        raise FeedFetchError(
            url,
            f"Failed to fetch feed {url}: {result.describe_error()}",
            status_code=result.status_code,
        )
    payload = result.content if result.content is not None else (result.text or "")
    return parse_feed(payload, logger=logger)


def parse_feed(payload: str | bytes, logger: logging.Logger | None = None) -> FeedInfo:
    """Parse an RSS or Atom payload.

    feedparser is lenient: a payload with minor well-formedness problems
    is still accepted as long as a feed format was recognized.

    Raises:
        FeedParseError: When no feed format could be recognized
    """
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    # A stream is never mistaken for a URL or a file name
    parsed = feedparser.parse(io.BytesIO(payload))
    version = parsed.get("version") or ""
    if not version:
        reason = parsed.get("bozo_exception") or "unrecognized feed format"
        raise FeedParseError(f"Unable to parse feed: {reason}")
    if parsed.get("bozo") and logger is not None:
        logger.warning(
            "Feed parsing warning: %s",
            parsed.get("bozo_exception"),
            extra={"event": "feed_parse_warning"},
        )

    feed_meta = parsed.get("feed", {})
    items = [_to_item(entry, version) for entry in parsed.get("entries", [])]
    return FeedInfo(title=feed_meta.get("title", "") or "", items=items)


def _to_item(entry: Any, version: str) -> FeedItem:
    """Map a feedparser entry onto the explicit FeedItem record."""
    content_encoded = None
    content = None
    for part in entry.get("content", []) or []:
        value = part.get("value")
        if not value:
            continue
        if part.get("type", "text/html") in HTML_CONTENT_TYPES:
            content_encoded = content_encoded or value
        else:
            content = content or value

    # feedparser stores RSS <description> and Atom <summary> under one key
    teaser = entry.get("summary")
    if version.startswith("atom"):
        description, summary = None, teaser
    else:
        description, summary = teaser, None

    categories = tuple(
        tag.get("term") for tag in entry.get("tags", []) or [] if tag.get("term")
    )
    media = tuple(
        MediaDescriptor(url=m.get("url"), medium=m.get("medium"))
        for m in entry.get("media_content", []) or []
        if m.get("url")
    )

    return FeedItem(
        title=entry.get("title"),
        published=_to_datetime(entry.get("published_parsed")),
        updated=_to_datetime(entry.get("updated_parsed")),
        content_encoded=content_encoded,
        content=content,
        description=description,
        summary=summary,
        categories=categories,
        media=media,
        link=entry.get("link"),
        guid=entry.get("id"),
    )


def _to_datetime(value: time.struct_time | None) -> datetime | None:
    """Convert a feedparser UTC struct_time to an aware datetime."""
    if not value:
        return None
    return datetime.fromtimestamp(calendar.timegm(value), tz=timezone.utc)
