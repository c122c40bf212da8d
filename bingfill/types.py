"""Core data types for bingfill.

Every module in the library produces/consumes these types. Host items are
modelled as a tagged variant resolved once at the entry point:
- ``layer``: a plain layer with its own frame and settings scope
- ``symbol_instance``: a multi-state instance that also carries overrides
- ``override``: a symbol override, sized by its owning instance, no settings
- ``legacy_shape``: a layer type the host does not recognise, treated as a shape
"""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ItemKind(str, enum.Enum):
    """Which kind of host element an item handle refers to."""

    layer = "layer"
    symbol_instance = "symbol_instance"
    override = "override"
    legacy_shape = "legacy_shape"


# Host type names mapped onto item kinds. Anything else is a legacy shape.
_HOST_TYPE_KINDS: dict[str, ItemKind] = {
    "Shape": ItemKind.layer,
    "ShapePath": ItemKind.layer,
    "Image": ItemKind.layer,
    "Group": ItemKind.layer,
    "Artboard": ItemKind.layer,
    "Text": ItemKind.layer,
    "SymbolInstance": ItemKind.symbol_instance,
    "DataOverride": ItemKind.override,
    "Override": ItemKind.override,
}


# ---------------------------------------------------------------------------
# Host items
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Frame:
    """Pixel size of a host element."""

    width: float
    height: float


@dataclass
class Item:
    """An opaque handle to a host-side design element.

    Overrides have no frame of their own that reflects what is drawn, so
    ``effective_frame`` reads the frame of the owning symbol instance.
    """

    kind: ItemKind
    frame: Frame
    item_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    name: str = ""
    symbol_instance: Item | None = None
    overrides: list[Item] = field(default_factory=list)

    @property
    def effective_frame(self) -> Frame:
        """Frame used to size the requested image."""
        if self.kind == ItemKind.override and self.symbol_instance is not None:
            return self.symbol_instance.frame
        return self.frame

    @property
    def has_settings_scope(self) -> bool:
        """Overrides lack stable per-item persisted settings."""
        return self.kind != ItemKind.override

    @property
    def is_multi_state(self) -> bool:
        return self.kind == ItemKind.symbol_instance

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Item:
        """Build an item from a plain mapping (e.g. a host payload or YAML).

        Recognised keys: ``type``, ``id``, ``name``, ``width``, ``height``,
        ``symbol_instance`` (mapping) and ``overrides`` (list of mappings).
        """
        kind = _HOST_TYPE_KINDS.get(str(data.get("type") or ""), ItemKind.legacy_shape)
        instance_data = data.get("symbol_instance")
        instance = cls.from_mapping(instance_data) if instance_data else None
        extra: dict[str, Any] = {}
        if data.get("id") not in (None, ""):
            extra["item_id"] = str(data["id"])
        item = cls(
            kind=kind,
            frame=Frame(
                width=float(data.get("width", 0)),
                height=float(data.get("height", 0)),
            ),
            name=str(data.get("name", "")),
            symbol_instance=instance,
            **extra,
        )
        for override_data in data.get("overrides") or []:
            override = cls.from_mapping({"type": "DataOverride", **override_data})
            override.symbol_instance = item
            item.overrides.append(override)
        return item


# ---------------------------------------------------------------------------
# Pipeline types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ImageRequest:
    """Created once per item being filled."""

    target_width: float
    target_height: float
    search_term: str | None = None


@dataclass(frozen=True)
class ResolutionBucket:
    """A fixed (width x height) resolution option offered by the image service."""

    width: int
    height: int

    @property
    def label(self) -> str:
        return f"{self.width}x{self.height}"

    def fits(self, width: float, height: float) -> bool:
        """True if a ``width`` x ``height`` target fits inside this bucket."""
        return width <= self.width and height <= self.height

    @classmethod
    def parse(cls, label: str) -> ResolutionBucket:
        """Parse a ``"WxH"`` label."""
        w, sep, h = label.partition("x")
        if not sep:
            raise ValueError(f"Invalid resolution label: {label!r}")
        return cls(width=int(w), height=int(h))

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class RemoteImageMetadata:
    """Metadata of one daily image. Fetched fresh per request, never cached.

    ``id`` is the response's top-level ``id`` and may be absent.
    """

    id: str | None
    base_url: str
    title: str


@dataclass(frozen=True)
class CachedImageFile:
    """A downloaded image on disk, or the placeholder when caching failed."""

    path: Path
    created_at: datetime = field(default_factory=datetime.now)
    is_placeholder: bool = False


@dataclass(frozen=True)
class ProvenanceRecord:
    """Setting written against an item to remember where its image came from."""

    key: str
    value: str


@dataclass
class SupplyResult:
    """Outcome of filling one item."""

    index: int
    item: Item
    request: ImageRequest
    resolution: str
    image_url: str
    metadata: RemoteImageMetadata
    file: CachedImageFile
    provenance: ProvenanceRecord | None = None

    @property
    def path(self) -> Path:
        return self.file.path
