"""Normalization pipeline applied before a tree is rendered."""

from __future__ import annotations

import logging

from .config import Settings
from .content import Content
from .redaction import apply_redactions

log = logging.getLogger(__name__)


def normalize(content: Content, settings: Settings) -> Content:
    """Sort maps and apply redactions, in that order.

    Pure function of its arguments. Redaction rules run in list order and each
    one sees the tree produced by the rules before it. A failing rule raises
    ``RedactionError`` and no partially redacted tree is returned.
    """
    if settings.sort_maps:
        content = content.sort_maps()

    if settings.redactions_enabled and settings.redactions:
        log.debug("applying redactions", extra={"count": len(settings.redactions)})
        content = apply_redactions(content, settings.redactions)

    return content
