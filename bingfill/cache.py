"""Download images into a shared temporary folder.

Every successful download is written to a new, globally unique file; nothing
is deduplicated or evicted. The folder is removed at shutdown only if it
happens to be empty.
"""

from __future__ import annotations

import logging
import uuid
from importlib import resources
from pathlib import Path
from typing import Callable

from bingfill.client import DailyImageClient
from bingfill.config import CacheConfig
from bingfill.errors import FileSystemError, SupplierError
from bingfill.types import CachedImageFile

logger = logging.getLogger(__name__)

PlaceholderResolver = Callable[[], Path]


def bundled_placeholder() -> Path:
    """Path of the placeholder image shipped with the package."""
    return Path(str(resources.files("bingfill") / "resources" / "placeholder.png"))


class ImageCache:
    """Fetch remote images and cache them under unique names.

    ``download_image`` never raises: failures are logged and answered with
    the placeholder returned by ``placeholder``.
    """

    def __init__(
        self,
        client: DailyImageClient,
        config: CacheConfig | None = None,
        placeholder: PlaceholderResolver | None = None,
    ) -> None:
        self.client = client
        self.config = config or CacheConfig()
        if placeholder is None:
            configured = self.config.placeholder
            placeholder = (lambda: configured) if configured else bundled_placeholder
        self._placeholder = placeholder

    @property
    def folder(self) -> Path:
        return self.config.folder

    def new_file_path(self) -> Path:
        return self.folder / f"{uuid.uuid4().hex}{self.config.extension}"

    # ------------------------------------------------------------------

    def ensure_folder(self) -> None:
        """Create the cache folder. Safe to call concurrently."""
        try:
            self.folder.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FileSystemError(self.folder, f"Cannot create cache folder: {exc}") from exc

    def save_temp_file(self, data: bytes) -> CachedImageFile:
        """Write ``data`` to a new unique file in the cache folder."""
        self.ensure_folder()
        path = self.new_file_path()
        try:
            path.write_bytes(data)
        except OSError as exc:
            raise FileSystemError(path, f"Cannot write image: {exc}") from exc
        logger.debug("Cached %d bytes at %s", len(data), path)
        return CachedImageFile(path=path)

    def download_image(self, url: str) -> CachedImageFile:
        """Fetch ``url`` and cache it, falling back to the placeholder on any failure."""
        try:
            data = self.client.download(url)
            return self.save_temp_file(data)
        except SupplierError as exc:
            logger.error("Falling back to placeholder for %s: %s", url, exc)
        return CachedImageFile(path=self._placeholder(), is_placeholder=True)

    def cached_files(self) -> list[Path]:
        """Cached images currently on disk, sorted by name."""
        if not self.folder.is_dir():
            return []
        return sorted(
            p for p in self.folder.iterdir()
            if p.is_file() and p.suffix == self.config.extension
        )

    def cleanup(self) -> bool:
        """Remove the cache folder (non-recursive).

        Only succeeds when the folder is empty. Returns False and logs when
        the removal fails.
        """
        try:
            self.folder.rmdir()
        except OSError as exc:
            logger.error("Could not remove cache folder %s: %s", self.folder, exc)
            return False
        logger.info("Removed cache folder %s", self.folder)
        return True
