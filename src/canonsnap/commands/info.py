"""Formats and version command handlers."""

from __future__ import annotations

import argparse
import sys

from ..formatters import available_formats


def cmd_formats(args: argparse.Namespace) -> int:
    """List the snapshot formats available in this environment."""
    for name in available_formats():
        sys.stdout.write(f"{name}\n")
    return 0


def cmd_version(args: argparse.Namespace) -> int:
    """Show version."""
    from .. import __version__

    sys.stdout.write(f"canonsnap version {__version__}\n")
    return 0
