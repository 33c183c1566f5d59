"""
Image discovery, download and URL rewriting for one post.

The extractor scans the raw HTML text rather than a parse tree so that every
discovered URL is an exact substring of the HTML; the rewriter relies on
that to swap remote URLs for local embed tokens.
"""

from __future__ import annotations

import html
import logging
import re
from typing import Iterable
from urllib.parse import urlsplit

from ..fetch.fetcher import HttpClient
from ..storage.vault import FileStore, join_path
from ..utils.logging import log_event
from .types import FeedItem, ImageReference, ImageStatus

# src must not be part of a longer attribute name such as data-src
IMG_SRC_RE = re.compile(
    r"""<img\b[^>]*?(?<![\w-])src\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+))""",
    re.IGNORECASE,
)
EXTENSION_RE = re.compile(r"^[A-Za-z0-9]{1,5}$")
# Link syntax and Markdown-escapable characters are not allowed in embed names
IMAGE_NAME_UNSAFE_RE = re.compile(r"[\[\]#^|_*`\\]")

DEFAULT_EXTENSION = "jpg"


def extract_image_urls(html_text: str, item: FeedItem) -> list[str]:
    """Collect distinct image URLs for a post.

    Order is first appearance of ``<img src>`` in the HTML, followed by
    ``media:content`` descriptors with medium "image" not already found.
    Deduplication is by exact string equality.

    Args:
        html_text: The selected HTML content
        item: The feed item, for its media descriptors

    Returns:
        Distinct URLs in discovery order; empty when the post has no images
    """
    urls: list[str] = []
    seen: set[str] = set()

    def add(url: str | None) -> None:
        if url and url not in seen:
            seen.add(url)
            urls.append(url)

    for match in IMG_SRC_RE.finditer(html_text):
        add(next((g for g in match.groups() if g is not None), None))

    for media in item.media:
        if media.medium == "image":
            add(media.url)

    return urls


def image_extension(url: str) -> str:
    """Extension from the URL's last path segment, else "jpg".

    Examples:
        >>> image_extension("https://cdn.example.com/a/photo.png?w=600")
        'png'
        >>> image_extension("https://cdn.example.com/a/photo")
        'jpg'
    """
    segment = urlsplit(url).path.rsplit("/", 1)[-1]
    if "." not in segment:
        return DEFAULT_EXTENSION
    ext = segment.rsplit(".", 1)[-1]
    if not EXTENSION_RE.match(ext):
        return DEFAULT_EXTENSION
    return ext.lower()


def image_file_stem(post_title: str) -> str:
    """Post title reduced to characters that survive inside an embed token.

    Examples:
        >>> image_file_stem("[Update] release_notes #2")
        '-Update- release-notes -2'
    """
    return IMAGE_NAME_UNSAFE_RE.sub("-", post_title)


def embed_token(file_name: str) -> str:
    """Local reference token embedding a stored image by name."""
    return f"![[{file_name}]]"


class ImageMaterializer:
    """Downloads the images of one post into the vault image folder.

    Each URL is attempted exactly once. Failures are logged and recorded on
    the returned ImageReference; they never propagate to the caller.

    Attributes:
        http: HTTP client used for downloads
        store: File store receiving the image bytes
        image_folder: Vault-relative folder for stored images
    """

    def __init__(
        self,
        http: HttpClient,
        store: FileStore,
        image_folder: str,
        logger: logging.Logger | None = None,
    ):
        self.http = http
        self.store = store
        self.image_folder = image_folder
        self.logger = logger

    def materialize(
        self, urls: Iterable[str], post_title: str, run_ms: int
    ) -> list[ImageReference]:
        """Download every URL and return one reference per URL, in order.

        File names are ``{stem}-{run_ms}-{index}.{ext}`` where stem is the
        post title passed through ``image_file_stem``; the 1-based index
        keeps names unique within the post even when downloads finish
        inside the same millisecond.
        """
        references: list[ImageReference] = []
        stem = image_file_stem(post_title)
        for index, url in enumerate(urls, start=1):
            ref = ImageReference(url=url)
            file_name = f"{stem}-{run_ms}-{index}.{image_extension(url)}"
            self._download(ref, file_name)
            references.append(ref)
        return references

    def _download(self, ref: ImageReference, file_name: str) -> None:
        # Feed HTML is entity-encoded; request the decoded URL
        result = self.http.get(html.unescape(ref.url))
        if not result.ok or not result.content:
            reason = result.describe_error() if not result.ok else "empty response body"
            self._fail(ref, reason)
            return

        path = join_path(self.image_folder, file_name)
        try:
            self.store.create_binary(path, result.content)
        except OSError as exc:
            self._fail(ref, f"{type(exc).__name__}: {exc}")
            return

        ref.status = ImageStatus.DOWNLOADED
        ref.file_name = file_name
        ref.token = embed_token(file_name)
        log_event(
            self.logger,
            "Image downloaded",
            event="image_downloaded",
            url=ref.url,
            path=path,
            bytes=len(result.content),
        )

    def _fail(self, ref: ImageReference, reason: str) -> None:
        ref.status = ImageStatus.FAILED
        ref.error = reason
        if self.logger is not None:
            self.logger.warning(
                "Failed to download image %s: %s",
                ref.url,
                reason,
                extra={"event": "image_failed", "url": ref.url, "error": reason},
            )


def downloaded_tokens(references: Iterable[ImageReference]) -> dict[str, str]:
    """Map source URL to local token for successfully downloaded images only."""
    return {
        ref.url: ref.token
        for ref in references
        if ref.status is ImageStatus.DOWNLOADED and ref.token
    }


def rewrite_image_urls(html_text: str, tokens: dict[str, str]) -> str:
    """Replace every literal occurrence of each mapped URL with its token.

    Matching is exact-substring and global. Longer URLs are substituted
    first so that a URL which is a prefix of another does not clobber it.
    URLs absent from ``tokens`` are left untouched.
    """
    for url in sorted(tokens, key=len, reverse=True):
        token = tokens[url]
        html_text = re.sub(re.escape(url), lambda _match: token, html_text)
    return html_text
