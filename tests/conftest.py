"""Shared test fixtures for bingfill."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest
import requests
from PIL import Image

from bingfill.cache import ImageCache
from bingfill.client import DailyImageClient
from bingfill.config import ApiConfig, CacheConfig, SupplierConfig
from bingfill.host import ConsoleHost
from bingfill.supplier import ImageSupplier
from bingfill.types import Frame, Item, ItemKind

ENDPOINT = "https://images.test"


# ---------------------------------------------------------------------------
# Fake HTTP
# ---------------------------------------------------------------------------


class FakeResponse:
    """Minimal stand-in for ``requests.Response``."""

    def __init__(self, status_code: int = 200, content: bytes = b"", json_data=None) -> None:
        self.status_code = status_code
        if json_data is not None:
            content = json.dumps(json_data).encode()
        self.content = content

    def json(self):
        return json.loads(self.content.decode())


class FakeSession:
    """Routes GETs by URL prefix. Unrouted URLs raise a connection error."""

    def __init__(self) -> None:
        self.routes: list[tuple[str, object]] = []
        self.calls: list[str] = []
        self.closed = False

    def route(self, prefix: str, response: object) -> None:
        self.routes.append((prefix, response))

    def get(self, url: str, timeout=None):
        self.calls.append(url)
        for prefix, response in self.routes:
            if url.startswith(prefix):
                if isinstance(response, Exception):
                    raise response
                return response
        raise requests.ConnectionError(f"no route for {url}")

    def close(self) -> None:
        self.closed = True


def jpeg_bytes(width: int = 32, height: int = 24) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), (200, 120, 40)).save(buf, format="JPEG")
    return buf.getvalue()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def metadata_payload() -> dict:
    """A daily-image response with one entry."""
    return {
        "id": "abc",
        "images": [{"urlbase": "/th?id=OHR.Sample_EN-US123", "title": "Sample title"}],
    }


@pytest.fixture
def api_config() -> ApiConfig:
    return ApiConfig(endpoint=ENDPOINT)


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def online_session(session, metadata_payload) -> FakeSession:
    """Session serving the metadata payload and a small JPEG for any image URL."""
    session.route(f"{ENDPOINT}/HPImageArchive.aspx", FakeResponse(json_data=metadata_payload))
    session.route(f"{ENDPOINT}/th?id=", FakeResponse(content=jpeg_bytes()))
    return session


@pytest.fixture
def client(api_config, online_session) -> DailyImageClient:
    return DailyImageClient(api_config, session=online_session)


@pytest.fixture
def placeholder_path(tmp_path) -> Path:
    path = tmp_path / "placeholder.png"
    Image.new("RGB", (1, 1)).save(path)
    return path


@pytest.fixture
def cache_config(tmp_path) -> CacheConfig:
    return CacheConfig(folder=tmp_path / "cache")


@pytest.fixture
def cache(client, cache_config, placeholder_path) -> ImageCache:
    return ImageCache(client, cache_config, placeholder=lambda: placeholder_path)


@pytest.fixture
def host() -> ConsoleHost:
    return ConsoleHost(interactive=False, open_links=False)


@pytest.fixture
def supplier(host, client, cache):
    sup = ImageSupplier(host, client, cache, SupplierConfig(max_workers=4))
    yield sup
    sup.close()


@pytest.fixture
def layer() -> Item:
    return Item(kind=ItemKind.layer, frame=Frame(1000, 700), item_id="layer-1")


@pytest.fixture
def symbol_instance() -> Item:
    """A symbol instance with two overrides."""
    return Item.from_mapping({
        "type": "SymbolInstance",
        "id": "instance-1",
        "width": 300,
        "height": 200,
        "overrides": [{"id": "override-1"}, {"id": "override-2"}],
    })
