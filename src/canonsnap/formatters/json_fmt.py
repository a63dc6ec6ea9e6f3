"""JSON formatter."""

from __future__ import annotations

import json
import math

from ..content import Content, Map, Scalar, Seq
from ..errors import EncodeError
from .base import BaseFormatter, SnapshotLocation


def _json_key(key: Content) -> str:
    if not isinstance(key, Scalar) or isinstance(key.value, bytes):
        raise ValueError(f"unsupported JSON object key: {key!r}")
    if isinstance(key.value, str):
        return key.value
    return json.dumps(key.value)


def _finite(node: Content) -> Content:
    """Replace NaN and infinities with null."""
    if isinstance(node, Scalar):
        value = node.value
        if isinstance(value, float) and not math.isfinite(value):
            return Scalar(None)
        return node
    if isinstance(node, Seq):
        return Seq(tuple(_finite(item) for item in node.items))
    if isinstance(node, Map):
        return Map(tuple((k, _finite(v)) for k, v in node.entries), node.name)
    return node


class JsonFormatter(BaseFormatter):
    """Format a tree as pretty JSON, keeping the tree's key order."""

    name = "json"

    def format(self, content: Content, location: SnapshotLocation) -> str:
        try:
            return json.dumps(
                _finite(content).to_plain(key=_json_key),
                ensure_ascii=False,
                indent=2,
                allow_nan=False,
            )
        except (TypeError, ValueError) as exc:
            raise EncodeError(self.name, str(exc)) from exc
