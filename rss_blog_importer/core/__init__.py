"""
Core domain models and content-normalization logic.

This package contains the data types and the per-post pipeline stages:
content selection, image handling, Markdown conversion and post assembly.
"""

from .types import (
    FeedInfo,
    FeedItem,
    ImageReference,
    ImageStatus,
    ImportedPost,
    MediaDescriptor,
    RunReport,
)
from .content import post_title, sanitize_filename, select_content
from .images import ImageMaterializer, extract_image_urls, rewrite_image_urls
from .markdown import html_to_markdown
from .assembler import append_backlinks, build_frontmatter, post_path

__all__ = [
    "FeedInfo",
    "FeedItem",
    "ImageReference",
    "ImageStatus",
    "ImportedPost",
    "MediaDescriptor",
    "RunReport",
    "post_title",
    "sanitize_filename",
    "select_content",
    "ImageMaterializer",
    "extract_image_urls",
    "rewrite_image_urls",
    "html_to_markdown",
    "append_backlinks",
    "build_frontmatter",
    "post_path",
]
