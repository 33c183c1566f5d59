"""
Vault file store.

A hierarchical file store rooted at the vault directory. Paths handed to
the store are vault-relative and normalized; created files are never
overwritten.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath
import re
from typing import Protocol

from ..errors import PostExistsError

_SLASHES_RE = re.compile(r"[\\/]+")


def normalize_path(path: str) -> str:
    """Normalize a vault-relative path.

    Backslashes become forward slashes, repeated separators collapse and
    leading/trailing separators are dropped.

    Examples:
        >>> normalize_path("Blog Posts//2024-01-01 - Post.md")
        'Blog Posts/2024-01-01 - Post.md'
        >>> normalize_path("/Images/")
        'Images'
    """
    return _SLASHES_RE.sub("/", path.strip()).strip("/")


def join_path(*parts: str) -> str:
    """Join vault-relative path segments and normalize the result."""
    return normalize_path("/".join(part for part in parts if part))


class FileStore(Protocol):
    """File operations consumed by the importer."""

    def ensure_dir(self, path: str) -> None:
        ...

    def exists(self, path: str) -> bool:
        ...

    def create_text(self, path: str, text: str) -> None:
        ...

    def create_binary(self, path: str, data: bytes) -> None:
        ...


class VaultStore:
    """FileStore backed by a directory on the local filesystem.

    Attributes:
        root: The vault root directory
    """

    def __init__(self, root: Path):
        self.root = root

    def resolve(self, path: str) -> Path:
        """Map a vault-relative path to a filesystem path under root.

        Raises:
            ValueError: If the path escapes the vault root
        """
        relative = PurePosixPath(normalize_path(path))
        if relative.is_absolute() or ".." in relative.parts:
            raise ValueError(f"Path escapes the vault: {path}")
        return self.root.joinpath(*relative.parts)

    def ensure_dir(self, path: str) -> None:
        self.resolve(path).mkdir(parents=True, exist_ok=True)

    def exists(self, path: str) -> bool:
        return self.resolve(path).exists()

    def create_text(self, path: str, text: str) -> None:
        """Create a UTF-8 text file.

        Raises:
            PostExistsError: If a file already exists at path
        """
        target = self.resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            with target.open("x", encoding="utf-8", newline="\n") as handle:
                handle.write(text)
        except FileExistsError as exc:
            raise PostExistsError(normalize_path(path)) from exc

    def create_binary(self, path: str, data: bytes) -> None:
        """Create a binary file, failing if it already exists."""
        target = self.resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("xb") as handle:
            handle.write(data)
