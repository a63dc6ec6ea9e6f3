"""
canonsnap

Stable, canonical text rendering of structured values for snapshot tests.

The same logical data always renders to byte-identical text: maps can be
sorted at every depth, volatile fields redacted, and each output format
applies its own canonical quirks (document marker, trailing newline,
sequence-as-rows).
"""

from __future__ import annotations

from .adapter import to_content
from .config import Settings, bind_settings, current_settings
from .content import Content, Map, Scalar, Seq
from .errors import (
    ConfigAccessError,
    EncodeError,
    RedactionError,
    SelectorError,
    SnapshotError,
    UnsupportedFormatError,
    UnsupportedLocationError,
    ValueConversionError,
)
from .formatters import SerializationFormat, SnapshotLocation, available_formats, render
from .pipeline import normalize
from .redaction import (
    Selector,
    dynamic_redaction,
    rounded_redaction,
    sorted_redaction,
    static_redaction,
)
from .serialization import serialize_content, serialize_value, serialize_value_redacted

__all__ = [
    "ConfigAccessError",
    "Content",
    "EncodeError",
    "Map",
    "RedactionError",
    "Scalar",
    "Selector",
    "SelectorError",
    "Seq",
    "SerializationFormat",
    "Settings",
    "SnapshotError",
    "SnapshotLocation",
    "UnsupportedFormatError",
    "UnsupportedLocationError",
    "ValueConversionError",
    "__version__",
    "available_formats",
    "bind_settings",
    "current_settings",
    "dynamic_redaction",
    "normalize",
    "render",
    "rounded_redaction",
    "serialize_content",
    "serialize_value",
    "serialize_value_redacted",
    "sorted_redaction",
    "static_redaction",
    "to_content",
]

__version__ = "0.1.0"
