"""CLI interface for canonsnap."""

from __future__ import annotations

import argparse
import sys

from .commands.info import cmd_formats, cmd_version
from .commands.render import add_render_parser
from .logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    """Build argument parser."""
    parser = argparse.ArgumentParser(
        prog="canonsnap",
        description="Render structured data as stable snapshot text",
    )

    # Global options
    parser.add_argument(
        "--version",
        "-V",
        action="store_true",
        help="Show version and exit",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: LOG_LEVEL env var or WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command")

    # render command
    add_render_parser(subparsers)

    # formats command
    p_formats = subparsers.add_parser(
        "formats",
        help="List available snapshot formats",
    )
    p_formats.set_defaults(func=cmd_formats)

    # version command
    p_version = subparsers.add_parser(
        "version",
        help="Show version",
    )
    p_version.set_defaults(func=cmd_version)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(level=args.log_level)

    if args.version:
        from . import __version__

        sys.stdout.write(f"canonsnap version {__version__}\n")
        raise SystemExit(0)

    if not args.command:
        parser.print_help()
        raise SystemExit(0)

    rc = int(args.func(args))
    raise SystemExit(rc)
