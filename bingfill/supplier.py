"""Per-item image supply.

Workflow for each item:
    1. Derive the item's effective frame
    2. Pick a resolution bucket for it
    3. Fetch metadata of a random daily image
    4. Download the sized image into the cache (placeholder on failure)
    5. Hand the path to the host, record provenance, show the title

Items run as independent tasks on a thread pool. A metadata failure aborts
only its own item; completion order across items is unspecified.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait as wait_futures
from dataclasses import dataclass
from typing import Iterable

from bingfill.cache import ImageCache
from bingfill.client import DailyImageClient
from bingfill.config import SupplierConfig
from bingfill.errors import NetworkError, ParseError, UserCancelled
from bingfill.host import Host
from bingfill.provenance import lookup_provenance, photo_page_url, record_provenance
from bingfill.resolution import select_resolution
from bingfill.types import (
    CachedImageFile,
    ImageRequest,
    Item,
    RemoteImageMetadata,
    SupplyResult,
)

logger = logging.getLogger(__name__)


@dataclass
class FetchedImage:
    """Result of the standalone fetch pipeline."""

    resolution: str
    image_url: str
    metadata: RemoteImageMetadata
    file: CachedImageFile


def normalize_search_term(term: str) -> str:
    """Lower-case a search term, replacing its first space with a dash."""
    return term.replace(" ", "-", 1).lower()


class ImageSupplier:
    """Fill host items with random daily images."""

    def __init__(
        self,
        host: Host,
        client: DailyImageClient,
        cache: ImageCache,
        config: SupplierConfig | None = None,
    ) -> None:
        self.host = host
        self.client = client
        self.cache = cache
        self.config = config or SupplierConfig()
        self._executor = ThreadPoolExecutor(
            max_workers=self.config.max_workers, thread_name_prefix="bingfill"
        )
        self._pending: set[Future] = set()
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Standalone pipeline
    # ------------------------------------------------------------------

    def fetch_image(self, request: ImageRequest) -> FetchedImage:
        """Fetch and cache one image sized for ``request``.

        Raises:
            NetworkError: Metadata request failed.
            ParseError: Metadata response was malformed.
        """
        resolution = select_resolution(request.target_width, request.target_height)
        if request.search_term:
            logger.info("Search term %r (the daily archive is not searchable)", request.search_term)
        metadata = self.client.fetch_metadata()
        image_url = self.client.build_image_url(metadata.base_url, resolution)
        file = self.cache.download_image(image_url)
        return FetchedImage(
            resolution=resolution,
            image_url=image_url,
            metadata=metadata,
            file=file,
        )

    # ------------------------------------------------------------------
    # Per item
    # ------------------------------------------------------------------

    def set_image_for(
        self,
        item: Item,
        index: int,
        data_key: str,
        search_term: str | None = None,
    ) -> SupplyResult | None:
        """Fill one item. Returns None when the metadata stage failed."""
        frame = item.effective_frame
        request = ImageRequest(
            target_width=frame.width,
            target_height=frame.height,
            search_term=search_term,
        )
        self.host.message(self.config.downloading_message)
        try:
            fetched = self.fetch_image(request)
        except (NetworkError, ParseError) as exc:
            self.host.message(self.config.failure_message)
            logger.error("Image fetch failed for item %d (%s): %s", index, item.item_id, exc)
            return None

        self.host.supply_data_at_index(data_key, fetched.file.path, index)
        record = record_provenance(self.host, item, fetched.metadata.id)
        self.host.message(fetched.metadata.title)

        return SupplyResult(
            index=index,
            item=item,
            request=request,
            resolution=fetched.resolution,
            image_url=fetched.image_url,
            metadata=fetched.metadata,
            file=fetched.file,
            provenance=record,
        )

    def submit(
        self,
        item: Item,
        index: int,
        data_key: str,
        search_term: str | None = None,
    ) -> Future:
        """Start filling ``item`` without waiting for it."""
        future = self._executor.submit(self.set_image_for, item, index, data_key, search_term)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._discard)
        return future

    def _discard(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error("Item task failed: %s", exc, exc_info=exc)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def fill_random(self, items: Iterable[Item], data_key: str) -> list[Future]:
        """Start one fill task per item."""
        return [self.submit(item, index, data_key) for index, item in enumerate(items)]

    def prompt_search_term(self) -> str:
        """Ask the user for a search term.

        Raises:
            UserCancelled: The prompt was dismissed.
        """
        term = self.host.get_string_from_user(
            self.config.search_prompt, self.config.default_search_term
        )
        if term is None:
            raise UserCancelled("Search prompt dismissed")
        return normalize_search_term(term)

    def fill_search(self, items: Iterable[Item], data_key: str) -> list[Future]:
        """Prompt for a search term, then start one fill task per item.

        Nothing is fetched when the prompt is dismissed.
        """
        try:
            term = self.prompt_search_term()
        except UserCancelled:
            logger.info("Search cancelled, no items filled")
            return []
        return [
            self.submit(item, index, data_key, search_term=term)
            for index, item in enumerate(items)
        ]

    def image_details(self, selection: list[Item]) -> list[str]:
        """Open the photo page of every selected item that has one.

        Returns the opened URLs.
        """
        if not selection:
            self.host.message(self.config.no_selection_message)
            return []
        opened: list[str] = []
        for item in selection:
            remote_id = lookup_provenance(self.host, item)
            if remote_id:
                url = photo_page_url(self.config.photo_page_template, remote_id)
                self.host.open_url(url)
                opened.append(url)
            else:
                self.host.message(self.config.no_provenance_message)
        return opened

    # ------------------------------------------------------------------
    # Task set
    # ------------------------------------------------------------------

    @property
    def pending(self) -> int:
        with self._lock:
            return sum(1 for f in self._pending if not f.done())

    def wait_all(self, timeout: float | None = None) -> bool:
        """Block until every outstanding item task has finished.

        Returns False if ``timeout`` expired first.
        """
        with self._lock:
            futures = set(self._pending)
        _, not_done = wait_futures(futures, timeout=timeout)
        return not not_done

    def close(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
