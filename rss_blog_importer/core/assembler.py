"""
Post assembly: frontmatter, body and backlink appendix.

Produced file layout::

    ---
    title: "<sanitized title>"
    date: <ISO-8601>
    source: <url or empty>
    feed: "<feed title or empty>"
    imported: <ISO-8601>
    ---

    <converted markdown body>

    [[<category>]] [[<category>]] ...   (optional)

    [[<custom backlink>]]                (optional)
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from ..storage.vault import join_path
from .content import distinct_categories


def iso_timestamp(value: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a ``Z`` suffix."""
    utc = value.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def backlink(name: str) -> str:
    """Wrap a note name as a ``[[name]]`` backlink unless already wrapped."""
    name = name.strip()
    if name.startswith("[[") and name.endswith("]]"):
        return name
    return f"[[{name}]]"


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def build_frontmatter(
    title: str,
    published: datetime,
    source: str | None,
    feed_title: str | None,
    imported_at: datetime,
) -> str:
    """Build the YAML frontmatter block, including its closing delimiter line."""
    lines = [
        "---",
        f"title: {_quote(title)}",
        f"date: {iso_timestamp(published)}",
        f"source: {source or ''}",
        f"feed: {_quote(feed_title or '')}",
        f"imported: {iso_timestamp(imported_at)}",
        "---",
    ]
    return "\n".join(lines) + "\n"


def append_backlinks(
    body: str,
    categories: Iterable[str],
    enable_category_backlinks: bool,
    custom_backlink: str,
) -> str:
    """Append category backlinks and the custom backlink, each after a blank line."""
    result = body
    if enable_category_backlinks:
        labels = distinct_categories(categories)
        if labels:
            result += "\n\n" + " ".join(backlink(label) for label in labels)
    if custom_backlink and custom_backlink.strip():
        result += "\n\n" + backlink(custom_backlink)
    return result


def assemble_post(frontmatter: str, body: str) -> str:
    """Frontmatter block, blank line, then the body."""
    return f"{frontmatter}\n{body}"


def post_file_name(published: datetime, title: str) -> str:
    """``<YYYY-MM-DD> - <title>.md`` with the date taken in UTC."""
    date_str = published.astimezone(timezone.utc).strftime("%Y-%m-%d")
    return f"{date_str} - {title}.md"


def post_path(folder: str, published: datetime, title: str) -> str:
    """Vault-relative path of the post file."""
    return join_path(folder, post_file_name(published, title))
