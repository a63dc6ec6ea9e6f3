"""Base formatter interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

from ..content import Content


class SerializationFormat(str, Enum):
    CSV = "csv"
    RON = "ron"
    TOML = "toml"
    YAML = "yaml"
    JSON = "json"


class SnapshotLocation(str, Enum):
    """Where the rendered snapshot ends up.

    Inline snapshots live next to the test source and keep the format's
    leading document marker. File snapshots drop it.
    """

    INLINE = "inline"
    FILE = "file"


class BaseFormatter(ABC):
    """Abstract base class for snapshot formatters."""

    name: str

    @abstractmethod
    def format(self, content: Content, location: SnapshotLocation) -> str:
        """Render a normalized value tree to text."""
        ...


def strip_trailing_newline(text: str) -> str:
    """Drop exactly one trailing ``\\n``, if present."""
    if text.endswith("\n"):
        return text[:-1]
    return text
