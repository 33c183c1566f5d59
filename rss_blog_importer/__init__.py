"""
RSS Blog Importer - incremental RSS/Atom to Markdown note importer.

This package fetches a blog's RSS/Atom feed, converts each post newer than
the import watermark to Markdown, downloads the images it references into
the vault and writes one note per post.

Main entry point is the CLI via `rss-blog-importer run` command.

Example:
    $ rss-blog-importer configure --vault ~/notes --feed-url https://example.com/rss
    $ rss-blog-importer run --vault ~/notes
"""

__all__ = ["__version__", "FeedImporter", "FeedItem", "RunReport", "parse_feed"]
__version__ = "0.1.0"

from .core.types import FeedItem, RunReport
from .fetch.feed import parse_feed
from .runner import FeedImporter
