"""Tests for bingfill.config."""

from __future__ import annotations

import tempfile
from pathlib import Path

from bingfill.config import ApiConfig, BingFillConfig, CacheConfig, SupplierConfig


class TestApiConfig:
    def test_defaults(self):
        cfg = ApiConfig()
        assert cfg.endpoint == "https://www.bing.com"
        assert cfg.market == "en-US"
        assert cfg.count == 1
        assert (cfg.min_index, cfg.max_index) == (1, 8)
        assert cfg.timeout_seconds is None


class TestCacheConfig:
    def test_folder_under_temp(self):
        cfg = CacheConfig()
        assert cfg.folder == Path(tempfile.gettempdir()) / "com.sketchapp.bing-plugin"
        assert cfg.extension == ".jpg"
        assert cfg.placeholder is None


class TestBingFillConfig:
    def test_default(self):
        cfg = BingFillConfig.default()
        assert isinstance(cfg.api, ApiConfig)
        assert isinstance(cfg.supplier, SupplierConfig)
        assert cfg.supplier.default_search_term == "People"

    def test_from_yaml(self, tmp_path):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text(
            "api:\n  market: de-DE\n  timeout_seconds: 5\n"
            f"cache:\n  folder: {tmp_path / 'images'}\n"
        )
        cfg = BingFillConfig.from_yaml(yaml_path)
        assert cfg.api.market == "de-DE"
        assert cfg.api.timeout_seconds == 5.0
        assert cfg.cache.folder == tmp_path / "images"
        # Other fields keep defaults
        assert cfg.api.endpoint == "https://www.bing.com"

    def test_from_empty_yaml(self, tmp_path):
        yaml_path = tmp_path / "empty.yaml"
        yaml_path.write_text("")
        cfg = BingFillConfig.from_yaml(yaml_path)
        assert cfg.supplier.max_workers == 8
