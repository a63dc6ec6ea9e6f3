"""CSV formatter."""

from __future__ import annotations

import csv
import io

from ..content import Content, Map, Scalar, Seq
from ..errors import EncodeError
from .base import BaseFormatter, SnapshotLocation, strip_trailing_newline


class CsvFormatter(BaseFormatter):
    """Format a tree as CSV rows.

    A top-level sequence becomes one row per item; anything else is a single
    row. Map rows share one header line taken from the first row.
    """

    name = "csv"

    def format(self, content: Content, location: SnapshotLocation) -> str:
        rows = content.as_slice()
        if rows is None:
            rows = (content,)

        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
        width: int | None = None

        for index, row in enumerate(rows):
            records = self._records(row, with_header=index == 0)
            for record in records:
                if width is None:
                    width = len(record)
                elif len(record) != width:
                    raise EncodeError(
                        self.name,
                        f"found record with {len(record)} fields, "
                        f"but the previous record has {width} fields",
                    )
                writer.writerow(record)

        return strip_trailing_newline(buf.getvalue())

    def _records(self, row: Content, *, with_header: bool) -> list[list[str]]:
        if isinstance(row, Map):
            values = [self._cell(v) for _, v in row.entries]
            if with_header:
                return [[self._cell(k) for k, _ in row.entries], values]
            return [values]
        if isinstance(row, Seq):
            return [[self._cell(item) for item in row.items]]
        return [[self._cell(row)]]

    def _cell(self, node: Content) -> str:
        if not isinstance(node, Scalar):
            raise EncodeError(self.name, "cannot write a nested container into a CSV field")
        value = node.value
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, bytes):
            try:
                return value.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise EncodeError(self.name, f"field is not valid UTF-8: {exc}") from exc
        return str(value)
