"""Render command handler."""

from __future__ import annotations

import argparse
import json
import logging
import sys

import yaml

from ..config import Settings
from ..errors import SnapshotError
from ..serialization import serialize_value, serialize_value_redacted
from ..utils import guess_input_format, load_document, output_text

log = logging.getLogger(__name__)


def _parse_redaction(raw: str) -> tuple[str, str]:
    selector, sep, value = raw.partition("=")
    if not sep or not selector.strip():
        raise argparse.ArgumentTypeError(f"expected SELECTOR=VALUE, got {raw!r}")
    return selector.strip(), value


def _read_input(path: str | None) -> str:
    if path in (None, "-"):
        return sys.stdin.read()
    with open(path, encoding="utf-8") as f:
        return f.read()


def cmd_render(args: argparse.Namespace) -> int:
    """Render a JSON or YAML document as a snapshot."""
    input_format = args.input_format or guess_input_format(args.input)
    try:
        document = load_document(_read_input(args.input), input_format)
    except OSError as e:
        sys.stderr.write(f"Error: cannot read input: {e}\n")
        return 2
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        sys.stderr.write(f"Error: invalid {input_format} input: {e}\n")
        return 2

    try:
        settings = Settings()
        if args.sort_maps:
            settings = settings.with_sort_maps()
        fmt = args.format or settings.default_format

        if args.redact:
            output = serialize_value_redacted(document, args.redact, fmt, args.location, settings)
        else:
            output = serialize_value(document, fmt, args.location, settings)
    except SnapshotError as e:
        log.debug("snapshot_failed", extra={"code": e.code})
        sys.stderr.write(f"Error: {e.message}\n")
        return 1

    output_text(output, args.output)
    return 0


def add_render_parser(subparsers: argparse._SubParsersAction) -> None:
    p_render = subparsers.add_parser(
        "render",
        help="Render a JSON or YAML document as a snapshot",
    )
    p_render.add_argument(
        "input",
        nargs="?",
        default=None,
        help="Input file (default: stdin)",
    )
    p_render.add_argument(
        "--input-format",
        choices=["json", "yaml"],
        default=None,
        help="Input format (default: from file suffix, else json)",
    )
    p_render.add_argument(
        "--format",
        "-f",
        default=None,
        help="Snapshot format (default: CANONSNAP_DEFAULT_FORMAT or yaml)",
    )
    p_render.add_argument(
        "--location",
        "-l",
        choices=["inline", "file"],
        default="file",
        help="Snapshot location (default: file)",
    )
    p_render.add_argument(
        "--sort-maps",
        action="store_true",
        help="Sort map keys at every depth",
    )
    p_render.add_argument(
        "--redact",
        action="append",
        type=_parse_redaction,
        default=[],
        metavar="SELECTOR=VALUE",
        help="Replace values matched by SELECTOR with VALUE (repeatable)",
    )
    p_render.add_argument(
        "--output",
        "-o",
        type=str,
        default=None,
        help="Output file (default: stdout)",
    )
    p_render.set_defaults(func=cmd_render)
