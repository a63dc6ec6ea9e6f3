"""TOML formatter (requires the ``tomli-w`` distribution)."""

from __future__ import annotations

import tomli_w

from ..content import Content, Map, Scalar
from ..errors import EncodeError
from .base import BaseFormatter, SnapshotLocation, strip_trailing_newline


def _toml_key(key: Content) -> str:
    if isinstance(key, Scalar) and isinstance(key.value, str):
        return key.value
    raise ValueError(f"TOML keys must be strings, got {key!r}")


class TomlFormatter(BaseFormatter):
    """Format a map as a pretty TOML document."""

    name = "toml"

    def format(self, content: Content, location: SnapshotLocation) -> str:
        if not isinstance(content, Map):
            raise EncodeError(self.name, "the top-level value of a TOML document must be a map")
        try:
            rendered = tomli_w.dumps(content.to_plain(key=_toml_key), multiline_strings=True)
        except (TypeError, ValueError) as exc:
            raise EncodeError(self.name, str(exc)) from exc
        return strip_trailing_newline(rendered)
