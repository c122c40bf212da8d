"""Plugin descriptor and lifecycle hooks.

The descriptor enumerates the entry points the plugin offers and the
capability each one declares. ``Plugin`` wires them to an ``ImageSupplier``
and registers the data suppliers with whatever ``Host`` it is given.
"""

from __future__ import annotations

import enum
import logging
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from bingfill.cache import ImageCache
from bingfill.client import DailyImageClient
from bingfill.config import BingFillConfig
from bingfill.host import Host
from bingfill.supplier import ImageSupplier
from bingfill.types import Item

logger = logging.getLogger(__name__)

IMAGE_DATA_TYPE = "public.image"


class Capability(str, enum.Enum):
    """What an entry point offers to the host."""

    image_supplier = "image-supplier"
    search_supplier = "search-supplier"
    details = "details"


@dataclass(frozen=True)
class EntryPoint:
    name: str
    title: str
    capability: Capability
    data_type: str | None = None

    @property
    def is_data_supplier(self) -> bool:
        return self.capability in (Capability.image_supplier, Capability.search_supplier)


@dataclass(frozen=True)
class PluginDescriptor:
    identifier: str
    name: str
    entry_points: tuple[EntryPoint, ...] = field(default_factory=tuple)


DEFAULT_DESCRIPTOR = PluginDescriptor(
    identifier="com.sketchapp.bing-plugin",
    name="Bing Photos",
    entry_points=(
        EntryPoint("SupplyRandomPhoto", "Random Photo", Capability.image_supplier, IMAGE_DATA_TYPE),
        EntryPoint("SearchPhoto", "Search Photo", Capability.search_supplier, IMAGE_DATA_TYPE),
        EntryPoint("ImageDetails", "Open Photo Page", Capability.details),
    ),
)


@dataclass
class SupplyContext:
    """What the host passes to a data-supplier action."""

    data_key: str
    items: list[Item]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> SupplyContext:
        return cls(
            data_key=str(data["key"]),
            items=[
                item if isinstance(item, Item) else Item.from_mapping(item)
                for item in data.get("items") or []
            ],
        )


class Plugin:
    """Lifecycle hooks and actions of the image plugin."""

    def __init__(
        self,
        host: Host,
        config: BingFillConfig | None = None,
        descriptor: PluginDescriptor = DEFAULT_DESCRIPTOR,
        supplier: ImageSupplier | None = None,
    ) -> None:
        self.host = host
        self.config = config or BingFillConfig.default()
        self.descriptor = descriptor
        if supplier is None:
            client = DailyImageClient(self.config.api)
            cache = ImageCache(client, self.config.cache)
            supplier = ImageSupplier(host, client, cache, self.config.supplier)
        self.supplier = supplier

    # -- lifecycle ------------------------------------------------------

    def on_startup(self) -> None:
        for entry in self.descriptor.entry_points:
            if entry.is_data_supplier:
                self.host.register_data_supplier(
                    entry.data_type or IMAGE_DATA_TYPE, entry.title, entry.name
                )
        logger.info("%s started", self.descriptor.name)

    def on_shutdown(self) -> None:
        """Deregister suppliers, close the session, remove an empty cache folder."""
        self.host.deregister_data_suppliers()
        if self.supplier.pending:
            logger.info("Waiting for %d item tasks", self.supplier.pending)
        self.supplier.close()
        self.supplier.client.close()
        self.supplier.cache.cleanup()

    # -- actions --------------------------------------------------------

    def on_supply_random_photo(self, context: SupplyContext) -> list[Future]:
        return self.supplier.fill_random(context.items, context.data_key)

    def on_search_photo(self, context: SupplyContext) -> list[Future]:
        return self.supplier.fill_search(context.items, context.data_key)

    def on_image_details(self, selection: Iterable[Item]) -> list[str]:
        return self.supplier.image_details(list(selection))
