"""Command-line front end.

    python -m pantry.app.cli add milk
    python -m pantry.app.cli update milk oat-milk 3
    python -m pantry.app.cli list --search MILK
    python -m pantry.app.cli watch
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional, Sequence

import requests

from .main import build_environment
from ..core.config import Settings
from ..core.types import InventoryItem
from ..exec.mutations import decrement_or_delete, increment_or_create, rename_or_requantify
from ..io.persistence import write_json
from ..state.store import InventorySync
from ..view.filter import filter_items, render_item

logger = logging.getLogger(__name__)


def _print_items(items: Sequence[InventoryItem], out=None) -> None:
    out = out or sys.stdout
    if not items:
        print("(no items)", file=out)
        return
    for it in items:
        print(render_item(it), file=out)


async def current_items(sync: InventorySync, query: str = "") -> List[InventoryItem]:
    await sync.refresh()
    return sync.view(query)


async def watch(sync: InventorySync, query: str = "", limit: Optional[int] = None):
    """Print the filtered list on every snapshot; stop after ``limit`` renders."""
    done = asyncio.Event()
    renders = 0

    def _render(items):
        nonlocal renders
        renders += 1
        print(f"--- snapshot {sync.version}")
        _print_items(filter_items(items, query))
        if limit is not None and renders >= limit:
            done.set()

    with sync.subscribe(_render):
        await done.wait()


async def run(args: argparse.Namespace, settings: Settings) -> int:
    store, sync = build_environment(settings)
    coll = settings.collection
    if args.command == "add":
        item = await increment_or_create(store, coll, args.name)
        _print_items([item])
    elif args.command == "remove":
        item = await decrement_or_delete(store, coll, args.name)
        if item is not None:
            _print_items([item])
    elif args.command == "update":
        item = await rename_or_requantify(store, coll, args.old_name, args.new_name, args.quantity)
        if item is None:
            print(f"{args.old_name}: no such item", file=sys.stderr)
            return 1
        _print_items([item])
    elif args.command == "list":
        _print_items(await current_items(sync, args.search))
    elif args.command == "export":
        items = await current_items(sync, args.search)
        write_json(args.path, [{"name": it.name, "quantity": it.quantity} for it in items])
        print(f"wrote {len(items)} items to {args.path}")
    elif args.command == "watch":
        await watch(sync, args.search, args.limit)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="pantry", description="Pantry inventory manager")
    sub = p.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="add one of NAME, creating it if needed")
    add.add_argument("name")

    rm = sub.add_parser("remove", help="remove one of NAME")
    rm.add_argument("name")

    up = sub.add_parser("update", help="rename and/or set the quantity of an item")
    up.add_argument("old_name")
    up.add_argument("new_name")
    up.add_argument("quantity", nargs="?", default="")

    for cmd in ("list", "watch", "export"):
        sp = sub.add_parser(cmd)
        sp.add_argument("--search", default="", help="case-insensitive name filter")
        if cmd == "watch":
            sp.add_argument("--limit", type=int, default=None, help="stop after N snapshots")
        if cmd == "export":
            sp.add_argument("path")
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    try:
        return asyncio.run(run(args, settings))
    except KeyboardInterrupt:  # pragma: no cover - manual run
        return 130
    except (requests.RequestException, ValueError) as e:
        logger.debug("command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
