"""Turn values into snapshot text."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from .adapter import to_content
from .config import Settings, current_settings
from .content import Content
from .formatters import SerializationFormat, SnapshotLocation, get_formatter, resolve_location
from .pipeline import normalize
from .redaction import Selector, apply_redactions, make_rule

log = logging.getLogger(__name__)


def serialize_content(
    content: Content,
    fmt: str | SerializationFormat,
    location: str | SnapshotLocation,
    settings: Settings | None = None,
) -> str:
    """Normalize ``content`` and render it.

    Without explicit ``settings`` the ambient ones are used (see
    ``bind_settings``). The format is resolved before any work is done, so a
    disabled format fails without touching the tree.
    """
    settings = settings if settings is not None else current_settings()
    location = resolve_location(location)
    formatter = get_formatter(fmt, settings)

    normalized = normalize(content, settings)
    log.debug("rendering snapshot", extra={"format": formatter.name, "location": location.value})
    return formatter.format(normalized, location)


def serialize_value(
    value: Any,
    fmt: str | SerializationFormat,
    location: str | SnapshotLocation,
    settings: Settings | None = None,
) -> str:
    return serialize_content(to_content(value), fmt, location, settings)


def serialize_value_redacted(
    value: Any,
    redactions: Iterable[tuple[str | Selector, Any]],
    fmt: str | SerializationFormat,
    location: str | SnapshotLocation,
    settings: Settings | None = None,
) -> str:
    """Like ``serialize_value`` with extra call-site redactions.

    The call-site rules run first, in order, on the unsorted tree. Map
    sorting and the rules from ``settings`` run afterwards and see their
    output.
    """
    rules = [make_rule(selector, redaction) for selector, redaction in redactions]
    content = apply_redactions(to_content(value), rules)
    return serialize_content(content, fmt, location, settings)
