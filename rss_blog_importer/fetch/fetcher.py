"""
HTTP fetching for feeds and images.

This module provides a blocking httpx client with retry logic, timeout
configuration and environment proxy support. Failures are reported in the
returned FetchResult instead of being raised.
"""

from __future__ import annotations

from dataclasses import dataclass
import time
from typing import Protocol

import httpx

from ..config import FetchConfig


@dataclass
class FetchResult:
    """Result of an HTTP fetch operation.

    On a completed request status_code, text and content are populated and
    error is None, whatever the status. status_code is None for
    network-level failures, in which case error carries the message.

    Attributes:
        url: The URL that was fetched
        status_code: HTTP status code, or None if request failed before getting response
        text: The decoded response body, or None on error
        content: The raw response body, or None on error
        error: Error message if fetch failed, None on success
    """
    url: str
    status_code: int | None
    text: str | None
    content: bytes | None
    error: str | None

    @property
    def ok(self) -> bool:
        """True for a completed request with a 2xx status."""
        return self.error is None and self.status_code is not None and 200 <= self.status_code < 300

    def describe_error(self) -> str:
        """Human-readable failure reason for logs and notifications."""
        if self.error:
            return self.error
        if self.status_code is not None and not self.ok:
            return f"HTTP {self.status_code}"
        return "unknown error"


class HttpClient(Protocol):
    """Minimal HTTP interface consumed by the importer."""

    def get(self, url: str, headers: dict[str, str] | None = None) -> FetchResult:
        ...


def fetch_url(
    url: str,
    timeout: float,
    retries: int,
    user_agent: str,
    trust_env: bool,
    headers: dict[str, str] | None = None,
) -> FetchResult:
    """Fetch a URL using httpx with retry logic.

    Uses a synchronous HTTP client that follows redirects and respects
    system proxy settings when trust_env is enabled. Only network-level
    errors are retried; any HTTP response is returned as-is.

    Args:
        url: The URL to fetch
        timeout: Request timeout in seconds
        retries: Number of retry attempts after initial failure
        user_agent: User-Agent header string
        trust_env: Whether to respect system proxy settings from environment
        headers: Extra request headers

    Returns:
        FetchResult with the response on completion or error message on failure
    """
    request_headers = {"User-Agent": user_agent}
    if headers:
        request_headers.update(headers)
    last_error: str | None = None

    for attempt in range(retries + 1):
        try:
            with httpx.Client(
                timeout=timeout,
                headers=request_headers,
                follow_redirects=True,
                trust_env=trust_env,
            ) as client:
                resp = client.get(url)
                return FetchResult(
                    url=url,
                    status_code=resp.status_code,
                    text=resp.text,
                    content=resp.content,
                    error=None,
                )
        except Exception as exc:  # noqa: BLE001
            last_error = f"{type(exc).__name__}: {exc}"
            if attempt < retries:
                # Back-off: 0.5s, 1.0s, 1.5s...
                time.sleep(0.5 * (attempt + 1))

    return FetchResult(url=url, status_code=None, text=None, content=None, error=last_error)


class HttpxClient:
    """HttpClient implementation bound to a FetchConfig."""

    def __init__(self, cfg: FetchConfig):
        self.cfg = cfg

    def get(self, url: str, headers: dict[str, str] | None = None) -> FetchResult:
        return fetch_url(
            url,
            timeout=self.cfg.timeout_seconds,
            retries=self.cfg.retries,
            user_agent=self.cfg.user_agent,
            trust_env=self.cfg.trust_env,
            headers=headers,
        )
