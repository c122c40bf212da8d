"""Per-item record of which remote photo an item was filled with."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Protocol, runtime_checkable

import yaml

from bingfill.types import Item, ProvenanceRecord

logger = logging.getLogger(__name__)

SETTING_KEY = "bing.photo.id"


# ---------------------------------------------------------------------------
# SettingsStore protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class SettingsStore(Protocol):
    """Per-item persisted string settings."""

    def layer_setting_for_key(self, item: Item, key: str) -> str | None: ...

    def set_layer_setting_for_key(self, item: Item, key: str, value: str) -> None: ...


class MemorySettings:
    """Dict-backed settings keyed by item id."""

    def __init__(self) -> None:
        self._values: dict[str, dict[str, str]] = {}
        self._lock = threading.Lock()

    def layer_setting_for_key(self, item: Item, key: str) -> str | None:
        with self._lock:
            return self._values.get(item.item_id, {}).get(key)

    def set_layer_setting_for_key(self, item: Item, key: str, value: str) -> None:
        with self._lock:
            self._values.setdefault(item.item_id, {})[key] = value

    def as_dict(self) -> dict[str, dict[str, str]]:
        with self._lock:
            return {k: dict(v) for k, v in self._values.items()}


class YamlSettings(MemorySettings):
    """Settings persisted to a YAML file after every write.

    File layout::

        <item id>:
          bing.photo.id: <remote id>
    """

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = path
        if path.is_file():
            with open(path) as f:
                data = yaml.safe_load(f) or {}
            self._values = {
                str(item_id): {str(k): str(v) for k, v in (values or {}).items()}
                for item_id, values in data.items()
            }

    def set_layer_setting_for_key(self, item: Item, key: str, value: str) -> None:
        super().set_layer_setting_for_key(item, key, value)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            yaml.safe_dump(self.as_dict(), f, sort_keys=True)


# ---------------------------------------------------------------------------
# Record / lookup
# ---------------------------------------------------------------------------


def record_provenance(
    settings: SettingsStore,
    item: Item,
    remote_id: str | None,
) -> ProvenanceRecord | None:
    """Store ``remote_id`` against ``item``.

    Skipped for overrides, which have no settings scope of their own, and
    when the response carried no id. Returns the written record, if any.
    """
    if not item.has_settings_scope:
        logger.debug("Not recording provenance on override %s", item.item_id)
        return None
    if not remote_id:
        logger.debug("No remote id to record for %s", item.item_id)
        return None
    settings.set_layer_setting_for_key(item, SETTING_KEY, remote_id)
    return ProvenanceRecord(key=SETTING_KEY, value=remote_id)


def lookup_provenance(settings: SettingsStore, item: Item) -> str | None:
    """Return the remote id recorded for ``item``.

    Multi-state instances without an id of their own fall back to the first
    override carrying a non-empty one.
    """
    value = settings.layer_setting_for_key(item, SETTING_KEY)
    if value:
        return value
    if item.is_multi_state:
        for override in item.overrides:
            value = settings.layer_setting_for_key(override, SETTING_KEY)
            if value:
                return value
    return None


def photo_page_url(template: str, remote_id: str) -> str:
    """Format the shareable link of a recorded photo id."""
    return template.format(id=remote_id)
