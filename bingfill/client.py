"""Daily-image API client.

Processing flow:
    1. Pick a random day offset in ``[min_index, max_index]``.
    2. GET ``{endpoint}/HPImageArchive.aspx?format=js&n=1&mkt=...&idx=...``.
    3. Parse ``images[0].urlbase``, ``images[0].title`` and the top-level ``id``.
    4. Image URLs are ``{endpoint}/{urlbase}_{resolution}.jpg``.

No retries: a single failure propagates to the caller.
"""

from __future__ import annotations

import logging
import random
from typing import Any

import requests

from bingfill.config import ApiConfig
from bingfill.errors import NetworkError, ParseError
from bingfill.types import RemoteImageMetadata

logger = logging.getLogger(__name__)


class DailyImageClient:
    """Thin client for the daily-image archive endpoint.

    One session is shared by every item task.
    """

    def __init__(
        self,
        config: ApiConfig | None = None,
        session: requests.Session | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or ApiConfig()
        self._session = session or requests.Session()
        self._rng = rng or random.Random()

    @property
    def endpoint(self) -> str:
        return self.config.endpoint.rstrip("/")

    # ------------------------------------------------------------------

    def random_index(self) -> int:
        """Uniform day offset within the configured bounds (inclusive)."""
        return self._rng.randint(self.config.min_index, self.config.max_index)

    def metadata_url(self, idx: int) -> str:
        return (
            f"{self.endpoint}{self.config.action}"
            f"?format=js&n={self.config.count}&mkt={self.config.market}&idx={idx}"
        )

    def build_image_url(self, base_url: str, resolution: str) -> str:
        """Join the endpoint, the image's ``urlbase`` and a resolution label."""
        return f"{self.endpoint}/{base_url.lstrip('/')}_{resolution}.jpg"

    # ------------------------------------------------------------------

    def fetch_metadata(self) -> RemoteImageMetadata:
        """Fetch metadata of one randomly chosen daily image.

        Raises:
            NetworkError: Transport failure or non-2xx status.
            ParseError: Body is not JSON or lacks ``images[0].urlbase``/``title``.
        """
        url = self.metadata_url(self.random_index())
        logger.debug("Fetching image metadata from %s", url)
        response = self._get(url)
        try:
            data = response.json()
        except ValueError as exc:
            raise ParseError(f"Response from {url} is not JSON: {exc}") from exc
        return parse_metadata(data)

    def download(self, url: str) -> bytes:
        """Fetch a binary body.

        Raises:
            NetworkError: Transport failure or non-2xx status.
        """
        logger.debug("Downloading %s", url)
        return self._get(url).content

    def close(self) -> None:
        self._session.close()

    # ------------------------------------------------------------------

    def _get(self, url: str) -> requests.Response:
        try:
            response = self._session.get(url, timeout=self.config.timeout_seconds)
        except requests.RequestException as exc:
            raise NetworkError(url, str(exc)) from exc
        if not 200 <= response.status_code < 300:
            raise NetworkError(
                url,
                f"Request failed with status {response.status_code}",
                status_code=response.status_code,
            )
        return response


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def parse_metadata(data: Any) -> RemoteImageMetadata:
    """Extract metadata from a decoded archive response.

    Field names follow the service: ``images[0].urlbase``,
    ``images[0].title`` and a top-level ``id``.
    """
    if not isinstance(data, dict):
        raise ParseError(f"Expected a JSON object, got {type(data).__name__}")
    images = data.get("images")
    if not isinstance(images, list) or not images or not isinstance(images[0], dict):
        raise ParseError("Response has no 'images' entries")
    first = images[0]
    if "urlbase" not in first:
        raise ParseError("First image has no 'urlbase'")
    remote_id = data.get("id")
    return RemoteImageMetadata(
        id=str(remote_id) if remote_id not in (None, "") else None,
        base_url=str(first["urlbase"]),
        title=str(first.get("title") or ""),
    )
