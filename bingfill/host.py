"""Host application callbacks consumed by the supplier.

The plugin runtime of the design tool is not part of this package; the
``Host`` protocol lists the callbacks the supplier relies on, and
``ConsoleHost`` implements them on a terminal for standalone use.
"""

from __future__ import annotations

import logging
import threading
import webbrowser
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from rich.console import Console
from rich.prompt import Prompt

from bingfill.provenance import MemorySettings, SettingsStore
from bingfill.types import Item

logger = logging.getLogger(__name__)


@runtime_checkable
class Host(Protocol):
    """Callbacks provided by the host application."""

    def supply_data_at_index(self, data_key: str, path: Path, index: int) -> None: ...

    def get_string_from_user(self, prompt: str, default: str) -> str | None: ...

    def message(self, text: str) -> None: ...

    def layer_setting_for_key(self, item: Item, key: str) -> str | None: ...

    def set_layer_setting_for_key(self, item: Item, key: str, value: str) -> None: ...

    def open_url(self, url: str) -> None: ...

    def register_data_supplier(self, data_type: str, title: str, action: str) -> None: ...

    def deregister_data_suppliers(self) -> None: ...


@dataclass
class SuppliedData:
    data_key: str
    path: Path
    index: int


@dataclass
class RegisteredSupplier:
    data_type: str
    title: str
    action: str


class ConsoleHost:
    """Terminal host: messages go to a rich console, settings to a ``SettingsStore``.

    Supplied paths, messages and registrations are kept on the instance so
    callers (and tests) can inspect what the supplier delivered.
    """

    def __init__(
        self,
        console: Console | None = None,
        settings: SettingsStore | None = None,
        interactive: bool = True,
        open_links: bool = True,
    ) -> None:
        self.console = console or Console()
        self.settings = settings or MemorySettings()
        self.interactive = interactive
        self.open_links = open_links
        self.supplied: list[SuppliedData] = []
        self.messages: list[str] = []
        self.opened_urls: list[str] = []
        self.registered: list[RegisteredSupplier] = []
        self._lock = threading.Lock()

    # -- data supply ----------------------------------------------------

    def supply_data_at_index(self, data_key: str, path: Path, index: int) -> None:
        with self._lock:
            self.supplied.append(SuppliedData(data_key=data_key, path=path, index=index))
        logger.info("Supplied %s at index %d", path, index)

    def register_data_supplier(self, data_type: str, title: str, action: str) -> None:
        self.registered.append(RegisteredSupplier(data_type=data_type, title=title, action=action))
        logger.debug("Registered data supplier %s (%s)", action, data_type)

    def deregister_data_suppliers(self) -> None:
        self.registered.clear()

    # -- UI -------------------------------------------------------------

    def get_string_from_user(self, prompt: str, default: str) -> str | None:
        if not self.interactive:
            return default
        try:
            return Prompt.ask(prompt, default=default, console=self.console)
        except (EOFError, KeyboardInterrupt):
            return None

    def message(self, text: str) -> None:
        with self._lock:
            self.messages.append(text)
        self.console.print(text, markup=False)

    def open_url(self, url: str) -> None:
        self.opened_urls.append(url)
        if self.open_links:
            webbrowser.open(url)
        else:
            self.console.print(url, markup=False)

    # -- settings -------------------------------------------------------

    def layer_setting_for_key(self, item: Item, key: str) -> str | None:
        return self.settings.layer_setting_for_key(item, key)

    def set_layer_setting_for_key(self, item: Item, key: str, value: str) -> None:
        self.settings.set_layer_setting_for_key(item, key, value)
