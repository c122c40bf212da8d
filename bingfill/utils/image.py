"""Image file helpers."""

from __future__ import annotations

from pathlib import Path

from PIL import Image, UnidentifiedImageError


def get_image_dimensions(path: Path) -> tuple[int, int] | None:
    """Get (width, height) of an image without fully loading it (header-only).

    Returns None if the file is not a readable image.
    """
    try:
        with Image.open(path) as img:
            return img.size  # (width, height)
    except (OSError, UnidentifiedImageError):
        return None
