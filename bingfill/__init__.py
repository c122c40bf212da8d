"""bingfill: random daily photos for design-document layers."""

__version__ = "0.1.0"

from bingfill.resolution import select_resolution
from bingfill.types import CachedImageFile, ImageRequest, Item, RemoteImageMetadata

__all__ = [
    "CachedImageFile",
    "ImageRequest",
    "Item",
    "RemoteImageMetadata",
    "select_resolution",
    "__version__",
]
