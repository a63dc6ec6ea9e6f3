from __future__ import annotations

import contextvars
import os
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import Any

from .errors import ConfigAccessError
from .redaction import RedactionRule, Selector, make_rule

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


def _get_str(name: str, default: str) -> str:
    return os.getenv(name, default)


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigAccessError(f"{name} must be a boolean, got {raw!r}")


def _get_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return default
    return tuple(item.strip().lower() for item in raw.split(",") if item.strip())


@dataclass(frozen=True, slots=True)
class Settings:
    sort_maps: bool = field(default_factory=lambda: _get_bool("CANONSNAP_SORT_MAPS", False))
    redactions_enabled: bool = field(
        default_factory=lambda: _get_bool("CANONSNAP_REDACTIONS", True)
    )

    # Optional encoders to register; yaml and json are always available.
    optional_formats: tuple[str, ...] = field(
        default_factory=lambda: _get_list("CANONSNAP_OPTIONAL_FORMATS", ("csv", "ron", "toml"))
    )
    default_format: str = field(
        default_factory=lambda: _get_str("CANONSNAP_DEFAULT_FORMAT", "yaml").strip().lower()
    )

    # Applied in order by the normalization pipeline.
    redactions: tuple[RedactionRule, ...] = ()

    def with_sort_maps(self, enabled: bool = True) -> Settings:
        return replace(self, sort_maps=enabled)

    def with_redaction(self, selector: str | Selector, redaction: Any) -> Settings:
        """Return a copy with one more redaction rule appended."""
        return replace(self, redactions=self.redactions + (make_rule(selector, redaction),))

    def without_redactions(self) -> Settings:
        return replace(self, redactions=())


_BOUND: contextvars.ContextVar[Settings | None] = contextvars.ContextVar(
    "canonsnap_settings", default=None
)


def current_settings() -> Settings:
    """Settings bound to the current context, or defaults from the environment."""
    bound = _BOUND.get()
    if bound is not None:
        return bound
    return Settings()


@contextmanager
def bind_settings(settings: Settings) -> Iterator[Settings]:
    """Make ``settings`` the ambient configuration inside the block."""
    if not isinstance(settings, Settings):
        raise ConfigAccessError(f"expected Settings, got {type(settings).__name__}")
    token = _BOUND.set(settings)
    try:
        yield settings
    finally:
        _BOUND.reset(token)
