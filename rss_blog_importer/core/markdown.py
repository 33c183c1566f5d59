"""
HTML to Markdown conversion with a fixed rendering style.

ATX headings, ``---`` rules, ``-`` bullets, fenced code blocks, ``*`` and
``**`` emphasis, inline links. The style is not user-configurable so that
identical HTML always yields identical Markdown.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup
from markdownify import ASTERISK, ATX, MarkdownConverter

EMBED_TOKEN_RE = re.compile(r"^!\[\[[^\]]+\]\]$")

CONVERTER_OPTIONS = {
    "heading_style": ATX,
    "bullets": "-",
    "strong_em_symbol": ASTERISK,
    "autolinks": False,
    "default_title": False,
    "escape_misc": False,
}


class NoteMarkdownConverter(MarkdownConverter):
    """MarkdownConverter that keeps local image embeds as bare tokens.

    After rewriting, an ``<img>`` whose src is ``![[name]]`` would otherwise
    render as ``![alt](![[name]])``, which note renderers do not embed.
    """

    def convert_img(self, el, text, *args, **kwargs):
        src = (el.attrs.get("src") or "").strip()
        if EMBED_TOKEN_RE.match(src):
            return src
        return super().convert_img(el, text, *args, **kwargs)


def html_to_markdown(html: str) -> str:
    """Convert HTML to Markdown.

    Args:
        html: HTML fragment; may be empty

    Returns:
        Markdown text without leading or trailing whitespace
    """
    if not html or not html.strip():
        return ""
    soup = BeautifulSoup(html, "html.parser")
    markdown = NoteMarkdownConverter(**CONVERTER_OPTIONS).convert_soup(soup)
    return markdown.strip()
