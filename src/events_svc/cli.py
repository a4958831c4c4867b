#!/usr/bin/env python3
"""
CLI tool for the events service.

Usage:
    python -m events_svc.cli track login '{"user": "alice"}' --wait
    python -m events_svc.cli flush
    python -m events_svc.cli pending
    python -m events_svc.cli clear
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from colorama import Fore, Style, init as colorama_init

from .config import Config
from .errors import SerializationError, StoreError
from .main import create_store, running_service
from .telemetry.events import EventBatch


colorama_init()


def colorize(text: str, color: str) -> str:
    return f"{color}{text}{Style.RESET_ALL}"


def print_json(data: Any, indent: int = 2) -> None:
    """Print JSON."""
    output = json.dumps(data, indent=indent, ensure_ascii=False, default=str)
    print(output)


def load_config(args) -> Config:
    """Build config from --config plus command-line overrides."""
    config = Config.from_file(args.config) if args.config else Config()

    if args.server_url:
        config.transport.server_url = args.server_url
    if args.cooldown is not None:
        config.flush.cooldown_seconds = args.cooldown
    if args.store_path:
        config.storage.path = args.store_path
    if args.debug:
        config.logging.debug = True

    return config


async def cmd_track(args, config: Config) -> int:
    """Track one event, optionally waiting for it to be flushed."""
    async with running_service(config) as service:
        service.track_event(args.type, args.data)
        if args.wait:
            try:
                await asyncio.wait_for(service.wait_idle(), timeout=args.timeout)
            except asyncio.TimeoutError:
                print(colorize(f"Gave up waiting after {args.timeout}s", Fore.YELLOW), file=sys.stderr)
        pending = service.queue_depth

    if pending:
        print(colorize(f"{pending} event(s) pending, saved for next run", Fore.YELLOW))
    else:
        print(colorize("All events delivered", Fore.GREEN))
    return 0


async def cmd_flush(args, config: Config) -> int:
    """Send persisted events once."""
    async with running_service(config) as service:
        count = service.queue_depth
        result = await service.flush_once()

    if result is None:
        print(colorize("Nothing to send", Style.DIM))
        return 0
    if result:
        print(colorize(f"Delivered {count} event(s)", Fore.GREEN))
        return 0

    print(colorize(f"Flush failed, {count} event(s) kept", Fore.RED), file=sys.stderr)
    return 1


async def cmd_pending(args, config: Config) -> int:
    """Show persisted events."""
    store = create_store(config)
    try:
        raw = await store.get(config.storage.key)
    finally:
        await store.close()

    if raw is None:
        print(colorize("  (none)", Style.DIM))
        return 0

    try:
        batch = EventBatch.from_json(raw)
    except SerializationError as e:
        print(colorize(f"Error: {e}", Fore.RED), file=sys.stderr)
        return 1

    print(colorize(f"\n{len(batch)} pending event(s):", Style.BRIGHT))
    print_json(batch.to_dict()["events"])
    return 0


async def cmd_clear(args, config: Config) -> int:
    """Drop persisted events."""
    store = create_store(config)
    try:
        existed = await store.delete(config.storage.key)
    finally:
        await store.close()

    print(colorize("Cleared" if existed else "Nothing to clear", Fore.CYAN))
    return 0


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        description="CLI tool for the events service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--config",
        help="Path to a YAML or JSON config file",
    )
    parser.add_argument(
        "--server-url",
        help="Collector URL",
    )
    parser.add_argument(
        "--cooldown",
        type=float,
        help="Cooldown between flush attempts (seconds)",
    )
    parser.add_argument(
        "--store-path",
        help="Path of the file store",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print [Events] diagnostics",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # track command
    track_parser = subparsers.add_parser("track", help="Track an event")
    track_parser.add_argument("type", help="Event type (e.g., login)")
    track_parser.add_argument("data", nargs="?", default="", help="Event data")
    track_parser.add_argument("--wait", action="store_true", help="Wait until the queue drains")
    track_parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Maximum time to wait with --wait (seconds)",
    )

    # flush command
    subparsers.add_parser("flush", help="Send persisted events once")

    # pending command
    subparsers.add_parser("pending", help="Show persisted events")

    # clear command
    subparsers.add_parser("clear", help="Drop persisted events")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    config = load_config(args)
    logging.basicConfig(
        level=getattr(logging, config.logging.level.upper(), logging.INFO),
        format=config.logging.format,
    )

    commands = {
        "track": cmd_track,
        "flush": cmd_flush,
        "pending": cmd_pending,
        "clear": cmd_clear,
    }

    try:
        return asyncio.run(commands[args.command](args, config))
    except StoreError as e:
        print(colorize(f"Error: {e}", Fore.RED), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
