"""End-to-end tests for value serialization."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from canonsnap import (
    SerializationFormat,
    Settings,
    SnapshotLocation,
    bind_settings,
    dynamic_redaction,
    serialize_content,
    serialize_value,
    serialize_value_redacted,
    to_content,
)
from canonsnap.errors import (
    EncodeError,
    RedactionError,
    SnapshotError,
    UnsupportedFormatError,
    UnsupportedLocationError,
    ValueConversionError,
)


@dataclass
class Request:
    id: str
    method: str
    headers: dict[str, str]


def _settings(**kwargs) -> Settings:
    base = {
        "sort_maps": False,
        "redactions_enabled": True,
        "optional_formats": ("csv", "ron", "toml"),
        "default_format": "yaml",
    }
    base.update(kwargs)
    return Settings(**base)


def test_env_cmdline_example() -> None:
    value = {"env": ["ENVIRONMENT", "production"], "cmdline": ["my-tool", "run"]}

    file = serialize_value(value, SerializationFormat.YAML, SnapshotLocation.FILE, _settings())
    inline = serialize_value(value, SerializationFormat.YAML, SnapshotLocation.INLINE, _settings())

    assert file == "env:\n  - ENVIRONMENT\n  - production\ncmdline:\n  - my-tool\n  - run\n"
    assert inline == "---\n" + file


def test_serialize_content_uses_sorting() -> None:
    tree = to_content({"b": {"y": 1, "x": 2}, "a": 0})
    assert serialize_content(tree, "json", "file", _settings(sort_maps=True)) == (
        '{\n  "a": 0,\n  "b": {\n    "x": 2,\n    "y": 1\n  }\n}'
    )


def test_ambient_settings_are_used() -> None:
    settings = _settings(sort_maps=True).with_redaction(".id", "[id]")
    request = Request(id="r-123", method="GET", headers={"b": "2", "a": "1"})

    with bind_settings(settings):
        rendered = serialize_value(request, "yaml", "file")

    assert rendered == "headers:\n  a: '1'\n  b: '2'\nid: '[id]'\nmethod: GET\n"


def test_explicit_settings_win_over_ambient() -> None:
    with bind_settings(_settings(sort_maps=True)):
        rendered = serialize_value({"b": 1, "a": 2}, "json", "file", _settings())
    assert rendered == '{\n  "b": 1,\n  "a": 2\n}'


def test_call_site_redactions_run_before_ambient_ones() -> None:
    seen: list[object] = []

    def capture(value, path):
        seen.append(value.value)
        return value

    settings = _settings().with_redaction(".token", dynamic_redaction(capture))

    rendered = serialize_value_redacted(
        {"token": "s3cret"}, [(".token", "[token]")], "json", "file", settings
    )

    assert rendered == '{\n  "token": "[token]"\n}'
    assert seen == ["[token]"]


def test_call_site_redactions_see_unsorted_tree() -> None:
    paths: list[str] = []

    def capture(value, path):
        paths.append(str(path))
        return value

    serialize_value_redacted(
        {"b": 1, "a": 2},
        [(".*", dynamic_redaction(capture))],
        "json",
        "file",
        _settings(sort_maps=True),
    )

    assert paths == [".b", ".a"]


def test_csv_rows_from_dataclasses() -> None:
    rows = [Request(id=str(i), method="GET", headers={}) for i in range(3)]
    with pytest.raises(EncodeError):
        # headers is a nested map and can't go into a CSV field
        serialize_value(rows, "csv", "file", _settings())

    flat = [{"id": i, "ok": True} for i in range(3)]
    assert serialize_value(flat, "csv", "file", _settings()) == "id,ok\n0,true\n1,true\n2,true"


def test_disabled_format_is_rejected() -> None:
    with pytest.raises(UnsupportedFormatError):
        serialize_value({"a": 1}, "toml", "file", _settings(optional_formats=()))


def test_unknown_location_is_a_snapshot_error() -> None:
    with pytest.raises(UnsupportedLocationError) as exc:
        serialize_value({"a": 1}, "yaml", "sidecar", _settings())
    assert isinstance(exc.value, SnapshotError)
    assert exc.value.code == "unsupported_location"


def test_conversion_failure_is_fatal() -> None:
    with pytest.raises(ValueConversionError):
        serialize_value({"a": object()}, "json", "file", _settings())


def test_redaction_failure_is_fatal() -> None:
    def fail(value, path):
        raise RuntimeError("boom")

    settings = _settings().with_redaction(".a", dynamic_redaction(fail))
    with pytest.raises(RedactionError):
        serialize_value({"a": 1}, "yaml", "file", settings)


def test_same_data_renders_identically() -> None:
    first = serialize_value({"s": {3, 1, 2}, "n": 1.5}, "yaml", "file", _settings(sort_maps=True))
    second = serialize_value({"n": 1.5, "s": {2, 3, 1}}, "yaml", "file", _settings(sort_maps=True))
    assert first == second == "n: 1.5\ns:\n  - 1\n  - 2\n  - 3\n"
