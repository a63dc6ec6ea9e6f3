from __future__ import annotations


class SnapshotError(Exception):
    """A controlled, fatal snapshot error.

    Every subclass aborts the call that requested the snapshot. Nothing is
    retried and no partial output is ever returned.
    """

    code = "snapshot_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.code}: {self.message}"


class ValueConversionError(SnapshotError):
    """The input could not be turned into a value tree."""

    code = "value_conversion"


class RedactionError(SnapshotError):
    """Applying a redaction rule failed."""

    code = "redaction"


class SelectorError(SnapshotError, ValueError):
    """Selector text could not be parsed."""

    code = "selector"


class EncodeError(SnapshotError):
    """A format encoder failed to produce text."""

    code = "encode"

    def __init__(self, fmt: str, message: str) -> None:
        super().__init__(f"{fmt}: {message}")
        self.format = fmt


class UnsupportedFormatError(SnapshotError, ValueError):
    code = "unsupported_format"


class ConfigAccessError(SnapshotError):
    """Reading the configuration failed."""

    code = "config_access"


class UnsupportedLocationError(SnapshotError, ValueError):
    code = "unsupported_location"
