"""Shared utility functions."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any

import yaml


def load_document(text: str, input_format: str) -> Any:
    """Parse ``text`` as JSON or YAML."""
    if input_format == "yaml":
        return yaml.safe_load(text)
    return json.loads(text)


def guess_input_format(path: str | None) -> str:
    """Pick the input format from a file suffix, defaulting to JSON."""
    if path and Path(path).suffix.lower() in (".yaml", ".yml"):
        return "yaml"
    return "json"


def output_text(data: str, output_file: str | None = None) -> None:
    """Write *data* to *output_file* (append) or stdout, ending with one newline."""
    if not data.endswith("\n"):
        data += "\n"
    if output_file:
        mode = "a" if os.path.exists(output_file) else "w"
        with open(output_file, mode, encoding="utf-8") as f:
            f.write(data)
    else:
        sys.stdout.write(data)
        sys.stdout.flush()
