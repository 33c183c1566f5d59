"""Content-field selection and title/category normalization."""

from __future__ import annotations

import re
from typing import Iterable

from .types import FeedItem

UNSAFE_FILENAME_RE = re.compile(r'[<>:"/\\|?*]')
WHITESPACE_RE = re.compile(r"\s+")

DEFAULT_TITLE = "Untitled"


def select_content(item: FeedItem) -> str:
    """Return the richest non-empty HTML field of a feed item.

    Full-content fields are preferred over description/summary, which are
    often truncated teasers.

    Args:
        item: The feed item to inspect

    Returns:
        The first field among content_encoded, content, description and
        summary whose trimmed value is non-empty, or "" when none is
    """
    for value in (item.content_encoded, item.content, item.description, item.summary):
        if value and value.strip():
            return value
    return ""


def sanitize_filename(name: str) -> str:
    """Replace path-unsafe characters with "-" and collapse whitespace.

    Examples:
        >>> sanitize_filename('What: a "test"?')
        'What- a -test--'
    """
    cleaned = UNSAFE_FILENAME_RE.sub("-", name)
    return WHITESPACE_RE.sub(" ", cleaned).strip()


def post_title(item: FeedItem) -> str:
    """Sanitized title used for the frontmatter, post file and image names."""
    title = sanitize_filename(item.title or "")
    return title or DEFAULT_TITLE


def distinct_categories(categories: Iterable[str]) -> list[str]:
    """Trim categories and drop empties and repeats, keeping first-seen order."""
    seen: set[str] = set()
    result: list[str] = []
    for category in categories:
        label = str(category).strip()
        if not label or label in seen:
            continue
        seen.add(label)
        result.append(label)
    return result
