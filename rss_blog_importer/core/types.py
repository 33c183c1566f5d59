"""
Core data types for the RSS Blog Importer.

This module defines the fundamental data structures used throughout the pipeline:
- MediaDescriptor: One ``media:content`` entry attached to a feed item
- FeedItem: One immutable entry parsed from the RSS/Atom payload
- FeedInfo: The parsed feed (title plus items)
- ImageReference: Per-post download state of one discovered image URL
- ImportedPost: The Markdown artifact written for one feed item
- RunReport: Aggregate outcome of one import run
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


@dataclass(frozen=True)
class MediaDescriptor:
    """An item-level media attachment.

    Attributes:
        url: The media URL as written in the feed
        medium: Declared medium type ("image", "video", ...), or None
    """
    url: str
    medium: str | None = None


@dataclass(frozen=True)
class FeedItem:
    """One entry from the source feed.

    Content fields are optional because their presence varies by feed
    dialect; ``select_content`` resolves them in priority order.

    Attributes:
        title: The post title, or None when the feed omits it
        published: Explicit publication date
        updated: Explicit last-updated date
        content_encoded: Full-content field (RSS ``content:encoded``, Atom html ``content``)
        content: Generic content field (non-html Atom ``content``)
        description: RSS ``description``
        summary: Atom ``summary``
        categories: Category labels in feed order, may repeat
        media: Embedded media descriptors
        link: Canonical link
        guid: Feed-provided unique identifier
    """
    title: str | None = None
    published: datetime | None = None
    updated: datetime | None = None
    content_encoded: str | None = None
    content: str | None = None
    description: str | None = None
    summary: str | None = None
    categories: tuple[str, ...] = ()
    media: tuple[MediaDescriptor, ...] = ()
    link: str | None = None
    guid: str | None = None


@dataclass
class FeedInfo:
    """A parsed feed.

    Attributes:
        title: Feed title, empty string when absent
        items: Items in feed order (RSS ``item`` and Atom ``entry`` alike)
    """
    title: str = ""
    items: list[FeedItem] = field(default_factory=list)


class ImageStatus(str, Enum):
    """Download state of one image URL within a single post import."""

    PENDING = "pending"
    FAILED = "failed"
    DOWNLOADED = "downloaded"


@dataclass
class ImageReference:
    """Maps one discovered source URL to its download outcome.

    Attributes:
        url: Source URL exactly as it appears in the HTML or media metadata
        status: Current download state
        token: Local embed token (``![[name]]``) once downloaded
        file_name: Stored file name once downloaded
        error: Failure description when status is FAILED
    """
    url: str
    status: ImageStatus = ImageStatus.PENDING
    token: str | None = None
    file_name: str | None = None
    error: str | None = None


@dataclass
class ImportedPost:
    """The Markdown artifact produced for one feed item.

    Attributes:
        path: Vault-relative file path
        content: Full file content (frontmatter, body, backlinks)
        timestamp_ms: Effective publication timestamp in milliseconds
        images: Image references resolved while building the post
    """
    path: str
    content: str
    timestamp_ms: int
    images: list[ImageReference] = field(default_factory=list)


@dataclass
class RunReport:
    """Outcome of one import run.

    Attributes:
        status: "ok", "failed", "busy" or "not_configured"
        imported: Number of posts created
        skipped: Number of items at or below the watermark
        failed: Number of new items whose import failed
        watermark_before: Watermark read at run start (ms)
        watermark_after: Watermark after the run (ms)
        error: Run-fatal error message, if any
    """
    status: str = "ok"
    imported: int = 0
    skipped: int = 0
    failed: int = 0
    watermark_before: int = 0
    watermark_after: int = 0
    error: str | None = None
