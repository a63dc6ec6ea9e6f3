"""Tests for the normalization pipeline."""

from __future__ import annotations

import pytest

from canonsnap.adapter import to_content
from canonsnap.config import Settings
from canonsnap.errors import RedactionError
from canonsnap.pipeline import normalize
from canonsnap.redaction import dynamic_redaction


def _settings(**kwargs) -> Settings:
    base = {
        "sort_maps": False,
        "redactions_enabled": True,
        "optional_formats": ("csv", "ron", "toml"),
        "default_format": "yaml",
    }
    base.update(kwargs)
    return Settings(**base)


def test_no_op_by_default() -> None:
    tree = to_content({"b": 1, "a": 2})
    assert normalize(tree, _settings()) == tree


def test_sorts_when_enabled() -> None:
    tree = to_content({"b": {"d": 1, "c": 2}, "a": 2})
    result = normalize(tree, _settings(sort_maps=True))
    assert result == to_content({"a": 2, "b": {"c": 2, "d": 1}})


def test_sorting_runs_before_redactions() -> None:
    seen: list[str] = []

    def record(value, path):
        seen.append(str(path))
        return value

    settings = _settings(sort_maps=True).with_redaction(".*", dynamic_redaction(record))
    normalize(to_content({"b": 1, "a": 2}), settings)

    assert seen == [".a", ".b"]


def test_redactions_apply_in_order() -> None:
    settings = (
        _settings()
        .with_redaction(".token", {"value": "secret"})
        .with_redaction(".token.value", "[redacted]")
    )

    result = normalize(to_content({"token": "abc"}), settings)

    assert result == to_content({"token": {"value": "[redacted]"}})


def test_redactions_can_be_disabled() -> None:
    settings = _settings(redactions_enabled=False).with_redaction(".a", "x")
    tree = to_content({"a": 1})
    assert normalize(tree, settings) == tree


def test_redaction_failure_propagates() -> None:
    def fail(value, path):
        raise RuntimeError("broken")

    settings = _settings().with_redaction(".a", dynamic_redaction(fail))
    with pytest.raises(RedactionError):
        normalize(to_content({"a": 1}), settings)


def test_input_tree_is_left_alone() -> None:
    tree = to_content({"b": 1, "a": 2})
    settings = _settings(sort_maps=True).with_redaction(".a", "x")

    normalize(tree, settings)

    assert tree == to_content({"b": 1, "a": 2})
