"""CLI entrypoint for bingfill.

Usage:
    python -m bingfill fetch --width W --height H [--search TERM] [--item-id ID]
                             [--config config.yaml] [--settings FILE] [--json]
    python -m bingfill resolve --width W --height H [--json]
    python -m bingfill details --item-id ID [--settings FILE] [--open]
    python -m bingfill clean [--config config.yaml]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from bingfill.cache import ImageCache
from bingfill.client import DailyImageClient
from bingfill.config import BingFillConfig
from bingfill.host import ConsoleHost
from bingfill.provenance import YamlSettings, lookup_provenance, photo_page_url
from bingfill.resolution import select_bucket
from bingfill.supplier import ImageSupplier, normalize_search_term
from bingfill.types import Frame, Item, ItemKind, SupplyResult
from bingfill.utils.image import get_image_dimensions

console = Console()

DEFAULT_SETTINGS = Path.home() / ".bingfill" / "settings.yaml"


def _build_result_panel(result: SupplyResult) -> Panel:
    """Build a summary panel for a supplied image."""
    dims = get_image_dimensions(result.path)
    lines = [
        f"[bold]Title:[/bold] {result.metadata.title}",
        f"[bold]Remote id:[/bold] {result.metadata.id or '-'}",
        f"[bold]Resolution:[/bold] {result.resolution}",
        f"[bold]URL:[/bold] {result.image_url}",
        f"[bold]Path:[/bold] {result.path}",
        f"[bold]Dimensions:[/bold] {f'{dims[0]}x{dims[1]}' if dims else 'unknown'}",
    ]
    if result.file.is_placeholder:
        lines.append("[yellow]Download failed, placeholder supplied[/yellow]")
    return Panel("\n".join(lines), title="Image Supplied", border_style="green")


def _result_to_dict(result: SupplyResult) -> dict:
    """Convert a result to a JSON-serializable dict."""
    dims = get_image_dimensions(result.path)
    return {
        "item_id": result.item.item_id,
        "path": str(result.path),
        "placeholder": result.file.is_placeholder,
        "title": result.metadata.title,
        "id": result.metadata.id,
        "resolution": result.resolution,
        "url": result.image_url,
        "width": dims[0] if dims else None,
        "height": dims[1] if dims else None,
    }


def _load_config(path: Path | None) -> BingFillConfig:
    return BingFillConfig.from_yaml(path) if path else BingFillConfig.default()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_fetch(args: argparse.Namespace) -> int:
    config = _load_config(args.config)
    host = ConsoleHost(
        console=console,
        settings=YamlSettings(args.settings),
        interactive=False,
        open_links=False,
    )
    if args.json:
        host.console = Console(stderr=True, quiet=True)
    client = DailyImageClient(config.api)
    cache = ImageCache(client, config.cache)
    supplier = ImageSupplier(host, client, cache, config.supplier)
    item = Item(
        kind=ItemKind.layer,
        frame=Frame(width=args.width, height=args.height),
        item_id=args.item_id,
    )
    search_term = normalize_search_term(args.search) if args.search else None
    try:
        result = supplier.set_image_for(item, 0, "cli", search_term=search_term)
    finally:
        supplier.close()
        client.close()

    if result is None:
        if args.json:
            print(json.dumps({"error": config.supplier.failure_message}))
        return 1
    if args.json:
        print(json.dumps(_result_to_dict(result), indent=2))
    else:
        console.print(_build_result_panel(result))
    return 0


def _cmd_resolve(args: argparse.Namespace) -> int:
    bucket = select_bucket(args.width, args.height)
    if args.json:
        print(json.dumps({"resolution": bucket.label, "width": bucket.width, "height": bucket.height}))
    else:
        console.print(bucket.label)
    return 0


def _cmd_details(args: argparse.Namespace) -> int:
    config = _load_config(args.config)
    settings = YamlSettings(args.settings)
    item = Item(kind=ItemKind.layer, frame=Frame(0, 0), item_id=args.item_id)
    remote_id = lookup_provenance(settings, item)
    if not remote_id:
        console.print(f"[yellow]{config.supplier.no_provenance_message}[/yellow]")
        return 1
    url = photo_page_url(config.supplier.photo_page_template, remote_id)
    host = ConsoleHost(console=console, settings=settings, open_links=args.open)
    host.open_url(url)
    return 0


def _cmd_clean(args: argparse.Namespace) -> int:
    config = _load_config(args.config)
    cache = ImageCache(DailyImageClient(config.api), config.cache)
    if not cache.folder.exists():
        console.print(f"Nothing to clean at {cache.folder}")
        return 0
    if cache.cleanup():
        console.print(f"[green]Removed {cache.folder}[/green]")
        return 0
    console.print(
        f"[red]Could not remove {cache.folder} "
        f"({len(cache.cached_files())} cached images)[/red]"
    )
    return 1


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Fetch random daily photos sized for a target frame.",
        prog="python -m bingfill",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    fetch = sub.add_parser("fetch", help="Fetch and cache one image")
    fetch.add_argument("--width", type=float, required=True, help="Target width in px")
    fetch.add_argument("--height", type=float, required=True, help="Target height in px")
    fetch.add_argument("--search", default=None, help="Search term")
    fetch.add_argument("--item-id", default="cli", help="Item id to record provenance under")
    fetch.add_argument("--config", type=Path, default=None, help="bingfill config YAML")
    fetch.add_argument("--settings", type=Path, default=DEFAULT_SETTINGS, help="Settings YAML")
    fetch.add_argument("--json", action="store_true", help="Output JSON summary")
    fetch.set_defaults(func=_cmd_fetch)

    resolve = sub.add_parser("resolve", help="Show the resolution bucket for a size")
    resolve.add_argument("--width", type=float, required=True)
    resolve.add_argument("--height", type=float, required=True)
    resolve.add_argument("--json", action="store_true", help="Output JSON")
    resolve.set_defaults(func=_cmd_resolve)

    details = sub.add_parser("details", help="Show the photo page of an item")
    details.add_argument("--item-id", required=True)
    details.add_argument("--config", type=Path, default=None, help="bingfill config YAML")
    details.add_argument("--settings", type=Path, default=DEFAULT_SETTINGS, help="Settings YAML")
    details.add_argument("--open", action="store_true", help="Open the page in a browser")
    details.set_defaults(func=_cmd_details, json=False)

    clean = sub.add_parser("clean", help="Remove the cache folder if it is empty")
    clean.add_argument("--config", type=Path, default=None, help="bingfill config YAML")
    clean.set_defaults(func=_cmd_clean, json=False)

    args = parser.parse_args(argv)

    if not args.json:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.INFO,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_time=True, show_path=False)],
        )
    else:
        logging.basicConfig(level=logging.WARNING)

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
