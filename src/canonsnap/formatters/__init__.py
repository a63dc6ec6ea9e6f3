"""Snapshot formatters.

``yaml`` and ``json`` are always available. ``csv``, ``ron`` and ``toml`` are
optional: they are offered only when listed in ``Settings.optional_formats``,
and ``toml`` additionally needs the ``tomli-w`` distribution installed.
"""

from __future__ import annotations

import importlib
import importlib.util
import logging

from ..config import Settings, current_settings
from ..content import Content
from ..errors import UnsupportedFormatError, UnsupportedLocationError
from .base import BaseFormatter, SerializationFormat, SnapshotLocation
from .json_fmt import JsonFormatter
from .yaml_fmt import YamlFormatter

__all__ = [
    "BaseFormatter",
    "JsonFormatter",
    "SerializationFormat",
    "SnapshotLocation",
    "YamlFormatter",
    "available_formats",
    "get_formatter",
    "register_formatter",
    "render",
    "resolve_location",
]

log = logging.getLogger(__name__)

_FORMATTERS: dict[str, type[BaseFormatter]] = {
    "yaml": YamlFormatter,
    "json": JsonFormatter,
}

# name -> (module, class, distribution the module imports)
_OPTIONAL_FORMATTERS: dict[str, tuple[str, str, str | None]] = {
    "csv": ("csv_fmt", "CsvFormatter", None),
    "ron": ("ron_fmt", "RonFormatter", None),
    "toml": ("toml_fmt", "TomlFormatter", "tomli_w"),
}


def register_formatter(name: str, formatter: type[BaseFormatter]) -> None:
    """Register an always-available formatter under ``name``."""
    _FORMATTERS[name.lower()] = formatter


def _installed(module: str | None) -> bool:
    return module is None or importlib.util.find_spec(module) is not None


def available_formats(settings: Settings | None = None) -> tuple[str, ...]:
    """Names of the formats usable under ``settings``."""
    settings = settings if settings is not None else current_settings()
    names = list(_FORMATTERS)
    for name, (_, _, requires) in _OPTIONAL_FORMATTERS.items():
        if name in settings.optional_formats and _installed(requires):
            names.append(name)
    return tuple(names)


def get_formatter(
    fmt: str | SerializationFormat, settings: Settings | None = None
) -> BaseFormatter:
    """Get formatter by name."""
    name = fmt.value if isinstance(fmt, SerializationFormat) else str(fmt).lower()
    available = available_formats(settings)

    if name not in available:
        raise UnsupportedFormatError(
            f"Unknown or disabled format: {name}. Available: {', '.join(available)}"
        )

    if name in _FORMATTERS:
        return _FORMATTERS[name]()

    module_name, class_name, _ = _OPTIONAL_FORMATTERS[name]
    module = importlib.import_module(f".{module_name}", __name__)
    log.debug("loaded optional formatter", extra={"format": name})
    return getattr(module, class_name)()


def render(
    content: Content,
    fmt: str | SerializationFormat,
    location: str | SnapshotLocation,
    settings: Settings | None = None,
) -> str:
    """Render an already normalized tree."""
    return get_formatter(fmt, settings).format(content, resolve_location(location))


def resolve_location(location: str | SnapshotLocation) -> SnapshotLocation:
    try:
        return SnapshotLocation(location)
    except ValueError:
        raise UnsupportedLocationError(f"Unknown snapshot location: {location}") from None
