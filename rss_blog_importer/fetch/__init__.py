"""
Feed and image fetching.

This package handles HTTP fetching and RSS/Atom parsing.
"""

from .fetcher import FetchResult, HttpClient, HttpxClient, fetch_url
from .feed import cache_bust_url, fetch_feed, parse_feed

__all__ = [
    "FetchResult",
    "HttpClient",
    "HttpxClient",
    "fetch_url",
    "cache_bust_url",
    "fetch_feed",
    "parse_feed",
]
