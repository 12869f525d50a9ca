#!/usr/bin/env python3
"""Main entry point for Aerobic Player."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import logging.config
import sys
from pathlib import Path
from typing import IO, TYPE_CHECKING

from aerobic_player.domain.playback.value_objects import PlaybackMode
from aerobic_player.domain.shared.exceptions import DomainError
from aerobic_player.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from aerobic_player.config.container import Container

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"

_DIRECTIONS = {"up": -1, "down": 1}


def setup_logging(log_level: str = "INFO") -> None:
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        with open(_LOGGING_CONFIG_PATH) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        logging.basicConfig(
            level=resolved_level,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.warning(
            LogTemplates.APP_LOGGING_CONFIG_FALLBACK, _LOGGING_CONFIG_PATH
        )

    logging.getLogger().setLevel(resolved_level)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="aerobic-player",
        description="Play a stored playlist in continuous, gap, single, half or chunks mode.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s add intro.mp3 song.ogg    # Add files to the playlist
  %(prog)s list                      # Show items and settings
  %(prog)s move <id> up              # Move an item one place up
  %(prog)s set chunk_count=4         # Change a player setting
  %(prog)s play --mode chunks        # Play, keys: p n s + -
        """,
    )

    subparsers = parser.add_subparsers(dest="action", required=True)

    subparsers.add_parser("list", help="show the playlist and settings")

    add = subparsers.add_parser("add", help="add audio files")
    add.add_argument("files", nargs="+", type=Path, metavar="FILE")

    remove = subparsers.add_parser("remove", help="remove an item")
    remove.add_argument("item_id", metavar="ID")

    move = subparsers.add_parser("move", help="move an item up or down")
    move.add_argument("item_id", metavar="ID")
    move.add_argument("direction", choices=sorted(_DIRECTIONS))

    set_ = subparsers.add_parser("set", help="change player settings")
    set_.add_argument("assignments", nargs="+", metavar="KEY=VALUE")

    play = subparsers.add_parser("play", help="play the playlist")
    play.add_argument("--mode", choices=[m.value for m in PlaybackMode], default=None)

    return parser


def parse_assignments(assignments: list[str]) -> dict[str, str]:
    """Parse ``KEY=VALUE`` strings; keys may use dashes for underscores.

    Raises:
        ValueError: If an entry has no ``=`` or an empty key.
    """
    changes: dict[str, str] = {}
    for assignment in assignments:
        key, sep, value = assignment.partition("=")
        key = key.strip().replace("-", "_")
        if not sep or not key:
            raise ValueError(ErrorMessages.INVALID_SETTING_ASSIGNMENT.format(value=assignment))
        changes[key] = value.strip()
    return changes


def print_library(container: Container, out: IO[str]) -> None:
    from aerobic_player.utils.formatting import format_duration

    library = container.library_service
    settings = library.settings
    if not library.items:
        print("(no items)", file=out)
    for item in library.items:
        marker = "*" if item.id == settings.selected_item_id else " "
        duration = format_duration(item.duration) or "--:--"
        print(f"{marker} {item.order:>2}  {item.id}  {duration}  {item.name}", file=out)

    values = settings.model_dump(exclude={"selected_item_id"})
    print("settings: " + ", ".join(f"{k}={v}" for k, v in values.items()), file=out)


async def run_command(args: argparse.Namespace, container: Container, out: IO[str]) -> int:
    """Execute one CLI action against an initialized container."""
    library = container.library_service

    if args.action == "list":
        print_library(container, out)
        return 0

    if args.action == "add":
        for path in args.files:
            try:
                item = await library.add_file(path)
            except OSError as e:
                print(f"[err] {path}: {e}", file=out)
                return 1
            print(f"[ok] added {item.name} ({item.id})", file=out)
        return 0

    if args.action == "remove":
        if not await library.remove_item(args.item_id):
            print(f"[err] {ErrorMessages.ITEM_NOT_FOUND.format(item_id=args.item_id)}", file=out)
            return 1
        print(f"[ok] removed {args.item_id}", file=out)
        return 0

    if args.action == "move":
        if library.get_item(args.item_id) is None:
            print(f"[err] {ErrorMessages.ITEM_NOT_FOUND.format(item_id=args.item_id)}", file=out)
            return 1
        moved = await library.move_item(args.item_id, _DIRECTIONS[args.direction])
        print(f"[ok] moved {args.item_id}" if moved else "[ok] already at the edge", file=out)
        return 0

    if args.action == "set":
        try:
            settings = library.update_settings(**parse_assignments(args.assignments))
        except (ValueError, DomainError) as e:
            print(f"[err] {e}", file=out)
            return 1
        await library.flush_settings()
        print(f"[ok] mode={settings.mode}", file=out)
        return 0

    if args.action == "play":
        return await _play(args, container, out)

    # Should never reach here due to required=True on subparsers
    print(f"[err] Unknown action: {args.action}", file=out)
    return 2


async def _play(args: argparse.Namespace, container: Container, out: IO[str]) -> int:
    from aerobic_player.infrastructure.console import ConsoleStatusSink, KeyboardControls
    from aerobic_player.infrastructure.console.keyboard import HELP_TEXT

    library = container.library_service
    if args.mode:
        library.update_settings(mode=args.mode)

    sink = ConsoleStatusSink(out)
    container.status_broadcaster.subscribe(sink)
    controls = KeyboardControls(
        container.sequencer,
        library,
        seek_step=container.settings.playback.seek_step_seconds,
    )
    if controls.attach():
        print(HELP_TEXT, file=out)
    try:
        ok = await library.start_playback()
    finally:
        controls.detach()
        container.status_broadcaster.unsubscribe(sink)
    return 0 if ok else 1


async def _run(args: argparse.Namespace, container: Container, out: IO[str]) -> int:
    try:
        await container.initialize()
        return await run_command(args, container, out)
    finally:
        await container.shutdown()


def main(argv: list[str] | None = None, out: IO[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    out = out or sys.stdout

    from aerobic_player.config.settings import get_settings

    settings = get_settings()
    setup_logging(settings.log_level)

    logger = logging.getLogger(__name__)
    logger.debug(LogTemplates.APP_STARTING.format(environment=settings.environment))

    from aerobic_player.config.container import create_container

    container = create_container(settings)

    try:
        code = asyncio.run(_run(args, container, out))
        logger.debug(LogTemplates.APP_STOPPED)
        return code
    except KeyboardInterrupt:
        logger.info(LogTemplates.APP_KEYBOARD_INTERRUPT)
        return 0
    except Exception as e:
        logger.exception(LogTemplates.APP_FATAL_ERROR, e)
        return 1


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover

