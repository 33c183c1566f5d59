"""Tests for the httpx-backed fetcher."""

from __future__ import annotations

import httpx

from rss_blog_importer.config import FetchConfig
from rss_blog_importer.fetch import fetcher
from rss_blog_importer.fetch.fetcher import FetchResult, HttpxClient, fetch_url


def _patch_transport(monkeypatch, handler):
    real_client = httpx.Client

    def client_factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(fetcher.httpx, "Client", client_factory)
    monkeypatch.setattr(fetcher.time, "sleep", lambda _seconds: None)


def test_fetch_url_returns_body_and_sends_headers(monkeypatch):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["ua"] = request.headers["User-Agent"]
        seen["cache"] = request.headers.get("Cache-Control")
        return httpx.Response(200, content=b"<rss/>")

    _patch_transport(monkeypatch, handler)

    result = fetch_url(
        "https://x.example.com/rss",
        timeout=1,
        retries=0,
        user_agent="test-agent",
        trust_env=False,
        headers={"Cache-Control": "no-cache"},
    )

    assert result.ok
    assert result.content == b"<rss/>"
    assert seen == {"ua": "test-agent", "cache": "no-cache"}


def test_fetch_url_returns_error_status_without_retry(monkeypatch):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url)
        return httpx.Response(404, content=b"missing")

    _patch_transport(monkeypatch, handler)

    result = fetch_url("https://x.example.com/a.png", 1, 2, "ua", False)

    assert result.status_code == 404
    assert not result.ok
    assert result.describe_error() == "HTTP 404"
    assert len(calls) == 1


def test_fetch_url_retries_network_errors(monkeypatch):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url)
        raise httpx.ConnectError("connection refused", request=request)

    _patch_transport(monkeypatch, handler)

    result = HttpxClient(FetchConfig(retries=2)).get("https://x.example.com/rss")

    assert len(calls) == 3
    assert result.status_code is None
    assert result.error.startswith("ConnectError")
    assert result.describe_error() == result.error


def test_empty_result_describes_unknown_error():
    result = FetchResult(url="u", status_code=None, text=None, content=None, error=None)

    assert not result.ok
    assert result.describe_error() == "unknown error"
