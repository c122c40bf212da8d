"""Resolution bucket selection for daily images."""

from __future__ import annotations

from bingfill.types import ResolutionBucket

# Ordered as offered by the image service. The scan below depends on this order.
RESOLUTIONS: tuple[str, ...] = (
    "240x320",
    "320x240",
    "400x240",
    "480x800",
    "640x480",
    "720x1280",
    "768x1280",
    "800x480",
    "800x600",
    "1024x768",
    "1280x768",
    "1366x768",
    "1920x1080",
    "1920x1200",
)

DEFAULT_RESOLUTION = "1920x1200"

BUCKETS: tuple[ResolutionBucket, ...] = tuple(ResolutionBucket.parse(r) for r in RESOLUTIONS)


def select_bucket(width: float, height: float) -> ResolutionBucket:
    """Return the first bucket in table order that fits ``width`` x ``height``.

    The last table entry is never scanned; it is the fallback when nothing
    earlier fits. This is a first-fit scan, not a nearest-fit search: a
    300x300 target picks 480x800 even though 640x480 has fewer pixels.
    """
    for bucket in BUCKETS[:-1]:
        if bucket.fits(width, height):
            return bucket
    return ResolutionBucket.parse(DEFAULT_RESOLUTION)


def select_resolution(width: float, height: float) -> str:
    """Return the ``"WxH"`` label of the bucket chosen for ``width`` x ``height``."""
    return select_bucket(width, height).label
