"""YAML formatter."""

from __future__ import annotations

import yaml

from ..content import DOCUMENT_MARKER, Content
from ..errors import EncodeError
from .base import BaseFormatter, SnapshotLocation


class YamlFormatter(BaseFormatter):
    """Format a tree as canonical YAML.

    Inline snapshots keep the leading ``---`` line, file snapshots drop it.
    """

    name = "yaml"

    def format(self, content: Content, location: SnapshotLocation) -> str:
        try:
            serialized = content.as_yaml()
        except yaml.YAMLError as exc:
            raise EncodeError(self.name, str(exc)) from exc

        if not serialized.startswith(DOCUMENT_MARKER):
            raise EncodeError(self.name, "rendered document lacks the leading document marker")

        if location == SnapshotLocation.FILE:
            return serialized[len(DOCUMENT_MARKER) :]
        return serialized
