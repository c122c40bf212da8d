"""Error types for image supply operations."""

from __future__ import annotations

from pathlib import Path


class SupplierError(Exception):
    """Base exception for bingfill."""


class NetworkError(SupplierError):
    """Raised when a request fails in transport or returns a non-2xx status."""

    def __init__(self, url: str, message: str, status_code: int | None = None) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(f"[{url}] {message}")


class ParseError(SupplierError):
    """Raised when a metadata response is not JSON or lacks required fields."""


class FileSystemError(SupplierError):
    """Raised when the cache folder cannot be created or a file cannot be written."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(f"[{path}] {message}")


class UserCancelled(SupplierError):
    """Raised when the user dismisses the search prompt."""
