"""Configuration models for bingfill.

Pydantic v2 models with sensible defaults, works without a config file.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

CACHE_FOLDER_NAME = "com.sketchapp.bing-plugin"


def _default_cache_folder() -> Path:
    return Path(tempfile.gettempdir()) / CACHE_FOLDER_NAME


class ApiConfig(BaseModel):
    """Configuration for the daily-image endpoint."""

    endpoint: str = Field("https://www.bing.com", description="Service root, no trailing slash")
    action: str = Field("/HPImageArchive.aspx", description="Metadata action path")
    market: str = Field("en-US", description="Locale sent as the 'mkt' parameter")
    count: int = Field(1, description="Number of images requested ('n')")
    min_index: int = Field(1, description="Lowest day offset ('idx') to pick from")
    max_index: int = Field(8, description="Highest day offset ('idx') to pick from")
    timeout_seconds: float | None = Field(
        None, description="Per-request timeout (None = network layer default)"
    )


class CacheConfig(BaseModel):
    """Configuration for the on-disk image cache."""

    folder: Path = Field(
        default_factory=_default_cache_folder,
        description="Shared folder for downloaded images",
    )
    extension: str = Field(".jpg", description="Extension of cached files")
    placeholder: Path | None = Field(
        None, description="Image returned when download or caching fails (None = bundled)"
    )


class SupplierConfig(BaseModel):
    """Configuration for per-item orchestration and user-facing strings."""

    max_workers: int = Field(8, description="Threads used to fill items in parallel")
    search_prompt: str = Field("Search Unsplash for…", description="Prompt for the search flow")
    default_search_term: str = Field("People", description="Pre-filled search term")
    photo_page_template: str = Field(
        "https://unsplash.com/photos/{id}",
        description="Link opened for an item's recorded photo id",
    )
    downloading_message: str = Field("🕑 Downloading…")
    failure_message: str = Field("Image download failed")
    no_selection_message: str = Field("Please select at least one layer")
    no_provenance_message: str = Field(
        "To get a random photo, click Data › Bing Random Photo in the toolbar, "
        "or right click the layer › Data Feeds › Bing Random Photo"
    )


class BingFillConfig(BaseModel):
    """Top-level configuration for bingfill."""

    api: ApiConfig = Field(default_factory=ApiConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    supplier: SupplierConfig = Field(default_factory=SupplierConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> BingFillConfig:
        """Load configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.model_validate(data)

    @classmethod
    def default(cls) -> BingFillConfig:
        """Return configuration with all defaults."""
        return cls()
