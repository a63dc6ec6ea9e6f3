"""Convert arbitrary Python data into a value tree."""

from __future__ import annotations

import dataclasses
import datetime as dt
import enum
import uuid
from collections.abc import Mapping
from decimal import Decimal
from pathlib import PurePath
from typing import Any

from .content import Content, Map, Scalar, Seq, sort_key
from .errors import ValueConversionError


def to_content(value: Any) -> Content:
    """Convert ``value`` into a value tree.

    Supported inputs: value trees (returned unchanged), ``None``, ``bool``,
    ``int``, ``float``, ``str``, bytes-like objects, mappings, dataclass
    instances, named tuples, lists, tuples, sets, enum members, dates and
    times, ``Decimal``, ``UUID`` and paths.

    Raises:
        ValueConversionError: for unsupported types and reference cycles.
    """
    try:
        return _convert(value, set())
    except RecursionError as exc:
        raise ValueConversionError("value is nested too deeply") from exc


def _convert(value: Any, active: set[int]) -> Content:
    if isinstance(value, Content):
        return value

    # Enum before the scalar checks: IntEnum and StrEnum members are ints/strs.
    if isinstance(value, enum.Enum):
        return Scalar(value.name)
    if value is None:
        return Scalar(None)
    if isinstance(value, bool):
        return Scalar(bool(value))
    if isinstance(value, int):
        return Scalar(int(value))
    if isinstance(value, float):
        return Scalar(float(value))
    if isinstance(value, str):
        return Scalar(str(value))
    if isinstance(value, (bytes, bytearray, memoryview)):
        return Scalar(bytes(value))
    if isinstance(value, (dt.datetime, dt.date, dt.time)):
        return Scalar(value.isoformat())
    if isinstance(value, (Decimal, uuid.UUID)):
        return Scalar(str(value))
    if isinstance(value, PurePath):
        return Scalar(value.as_posix())

    marker = id(value)
    if marker in active:
        raise ValueConversionError(f"reference cycle through {type(value).__name__}")
    active.add(marker)
    try:
        return _convert_container(value, active)
    finally:
        active.discard(marker)


def _convert_container(value: Any, active: set[int]) -> Content:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return Map(
            tuple(
                (Scalar(f.name), _convert(getattr(value, f.name), active))
                for f in dataclasses.fields(value)
            ),
            name=type(value).__name__,
        )

    if isinstance(value, tuple) and hasattr(type(value), "_fields"):
        return Map(
            tuple(
                (Scalar(name), _convert(item, active))
                for name, item in zip(type(value)._fields, value)
            ),
            name=type(value).__name__,
        )

    if isinstance(value, Mapping):
        return Map(tuple((_convert(k, active), _convert(v, active)) for k, v in value.items()))

    if isinstance(value, (list, tuple)):
        return Seq(tuple(_convert(item, active) for item in value))

    if isinstance(value, (set, frozenset)):
        # Set iteration order depends on hashing; sort so it never leaks out.
        items = [_convert(item, active) for item in value]
        items.sort(key=sort_key)
        return Seq(tuple(items))

    raise ValueConversionError(f"cannot convert {type(value).__name__} to a value tree")
