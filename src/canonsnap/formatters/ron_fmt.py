"""RON (Rusty Object Notation) formatter."""

from __future__ import annotations

import math
import re

from ..content import Content, Map, Scalar, Seq
from ..errors import EncodeError
from .base import BaseFormatter, SnapshotLocation

_FIELD_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}


def _ron_string(value: str) -> str:
    out: list[str] = ['"']
    for ch in value:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\u{{{ord(ch):x}}}")
        else:
            out.append(ch)
    out.append('"')
    return "".join(out)


def _ron_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return repr(value)


class RonFormatter(BaseFormatter):
    """Format a tree as pretty RON.

    Every element is followed by a comma and a newline, nesting is indented
    by two spaces, and struct-shaped maps are printed with their type name.
    """

    name = "ron"
    new_line = "\n"
    indentor = "  "
    struct_names = True

    def format(self, content: Content, location: SnapshotLocation) -> str:
        out: list[str] = []
        self._write(content, 0, out)
        return "".join(out)

    def _write(self, node: Content, depth: int, out: list[str]) -> None:
        if isinstance(node, Scalar):
            self._write_scalar(node, depth, out)
        elif isinstance(node, Seq):
            self._write_block("[", "]", [(None, item) for item in node.items], depth, out)
        elif isinstance(node, Map) and node.name is not None:
            fields = [(self._field_name(k), v) for k, v in node.entries]
            opener = f"{node.name}(" if self.struct_names else "("
            self._write_block(opener, ")", fields, depth, out)
        elif isinstance(node, Map):
            self._write_block("{", "}", list(node.entries), depth, out)
        else:
            raise EncodeError(self.name, f"unsupported node: {type(node).__name__}")

    def _write_block(
        self,
        opener: str,
        closer: str,
        items: list[tuple[Content | str | None, Content]],
        depth: int,
        out: list[str],
    ) -> None:
        out.append(opener)
        if not items:
            out.append(closer)
            return
        out.append(self.new_line)
        for key, value in items:
            out.append(self.indentor * (depth + 1))
            if isinstance(key, str):
                out.append(f"{key}: ")
            elif key is not None:
                self._write(key, depth + 1, out)
                out.append(": ")
            self._write(value, depth + 1, out)
            out.append("," + self.new_line)
        out.append(self.indentor * depth + closer)

    def _write_scalar(self, node: Scalar, depth: int, out: list[str]) -> None:
        value = node.value
        if value is None:
            out.append("None")
        elif isinstance(value, bool):
            out.append("true" if value else "false")
        elif isinstance(value, int):
            out.append(str(value))
        elif isinstance(value, float):
            out.append(_ron_float(value))
        elif isinstance(value, str):
            out.append(_ron_string(value))
        else:
            self._write_block("[", "]", [(None, Scalar(b)) for b in value], depth, out)

    def _field_name(self, key: Content) -> str:
        if isinstance(key, Scalar) and isinstance(key.value, str) and _FIELD_NAME.match(key.value):
            return key.value
        raise EncodeError(self.name, f"struct field name is not an identifier: {key!r}")
