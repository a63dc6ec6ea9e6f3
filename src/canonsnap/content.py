"""Value tree: the format-agnostic intermediate representation of snapshot data.

A tree is built from three immutable node types:

- ``Scalar``: ``None``, ``bool``, ``int``, ``float``, ``str`` or ``bytes``.
- ``Seq``: an ordered tuple of nodes.
- ``Map``: an ordered tuple of ``(key, value)`` node pairs. ``name`` is set
  for struct-shaped maps (dataclasses, named tuples).

Nodes are never mutated. Every transformation returns a new tree, so a tree
handed to one pipeline stage can't be changed behind the back of another.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any

import yaml

ScalarValue = None | bool | int | float | str | bytes

DOCUMENT_MARKER = "---\n"

_SCALAR_TYPES = (type(None), bool, int, float, str, bytes)


class Content:
    """Base class of every value tree node."""

    __slots__ = ()

    def sort_maps(self) -> Content:
        """Return a copy with every map's pairs sorted by key, at all depths."""
        return self

    def as_slice(self) -> tuple[Content, ...] | None:
        """Return the items if this node is a sequence, else ``None``."""
        return None

    def to_plain(self, key: Callable[[Content], Hashable] | None = None) -> Any:
        """Convert to plain Python data (dicts, lists and scalars).

        ``key`` turns map keys into dict keys; the default accepts scalar
        keys only. Raises ``ValueError`` for keys it can't convert or for
        two keys that convert to the same dict key.
        """
        raise NotImplementedError

    def as_yaml(self) -> str:
        """Render as canonical YAML, always starting with ``---\\n``."""
        body = yaml.dump(
            self,
            Dumper=_SnapshotDumper,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
            width=float("inf"),
        )
        # plain top-level scalars get an explicit document end marker
        if body.endswith("\n...\n"):
            body = body[: -len("...\n")]
        return DOCUMENT_MARKER + body


@dataclass(frozen=True, slots=True, eq=False)
class Scalar(Content):
    value: ScalarValue = None

    def __post_init__(self) -> None:
        if not isinstance(self.value, _SCALAR_TYPES):
            raise TypeError(f"unsupported scalar type: {type(self.value).__name__}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Scalar):
            return NotImplemented
        if type(self.value) is not type(other.value):
            return False
        if isinstance(self.value, float) and math.isnan(self.value):
            return math.isnan(other.value)
        return self.value == other.value

    def __hash__(self) -> int:
        return hash((type(self.value).__name__, self.value))

    def to_plain(self, key: Callable[[Content], Hashable] | None = None) -> Any:
        if isinstance(self.value, bytes):
            return list(self.value)
        return self.value


@dataclass(frozen=True, slots=True)
class Seq(Content):
    items: tuple[Content, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    def sort_maps(self) -> Content:
        return Seq(tuple(item.sort_maps() for item in self.items))

    def as_slice(self) -> tuple[Content, ...] | None:
        return self.items

    def to_plain(self, key: Callable[[Content], Hashable] | None = None) -> Any:
        return [item.to_plain(key) for item in self.items]


@dataclass(frozen=True, slots=True)
class Map(Content):
    entries: tuple[tuple[Content, Content], ...] = ()
    name: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.entries, tuple):
            object.__setattr__(self, "entries", tuple((k, v) for k, v in self.entries))

    def sort_maps(self) -> Content:
        entries = [(k.sort_maps(), v.sort_maps()) for k, v in self.entries]
        # sorted() is stable: equal keys keep their source order
        entries.sort(key=lambda entry: sort_key(entry[0]))
        return Map(tuple(entries), self.name)

    def to_plain(self, key: Callable[[Content], Hashable] | None = None) -> Any:
        to_key = key or _plain_key
        out: dict[Hashable, Any] = {}
        for k, v in self.entries:
            plain_key = to_key(k)
            if plain_key in out:
                raise ValueError(f"duplicate map key: {plain_key!r}")
            out[plain_key] = v.to_plain(key)
        return out

    def get(self, key: str) -> Content | None:
        """Return the value stored under the string key ``key``."""
        for k, v in self.entries:
            if isinstance(k, Scalar) and k.value == key and isinstance(k.value, str):
                return v
        return None


def _plain_key(key: Content) -> Hashable:
    if not isinstance(key, Scalar):
        raise ValueError(f"map key must be a scalar, got {type(key).__name__}")
    return key.value


def sort_key(node: Content) -> tuple[Any, ...]:
    """Total ordering key over value trees.

    Ranks: None < bool < number < NaN < str < bytes < Seq < Map. Ints and
    floats share a rank and compare numerically.
    """
    if isinstance(node, Scalar):
        value = node.value
        if value is None:
            return (0,)
        if isinstance(value, bool):
            return (1, value)
        if isinstance(value, (int, float)):
            if isinstance(value, float) and math.isnan(value):
                return (3,)
            return (2, value)
        if isinstance(value, str):
            return (4, value)
        return (5, value)
    if isinstance(node, Seq):
        return (6, tuple(sort_key(item) for item in node.items))
    if isinstance(node, Map):
        pairs = tuple((sort_key(k), sort_key(v)) for k, v in node.entries)
        return (7, node.name or "", pairs)
    raise TypeError(f"not a value tree node: {type(node).__name__}")


class _SnapshotDumper(yaml.SafeDumper):
    """Block-style dumper with indented sequences and no anchors."""

    def increase_indent(self, flow: bool = False, indentless: bool = False) -> None:
        return super().increase_indent(flow, False)

    def ignore_aliases(self, data: Any) -> bool:
        return True


def _represent_scalar(dumper: yaml.SafeDumper, node: Scalar) -> yaml.Node:
    if isinstance(node.value, bytes):
        return dumper.represent_list(list(node.value))
    return dumper.represent_data(node.value)


def _represent_seq(dumper: yaml.SafeDumper, node: Seq) -> yaml.Node:
    return dumper.represent_sequence("tag:yaml.org,2002:seq", node.items)


def _represent_map(dumper: yaml.SafeDumper, node: Map) -> yaml.Node:
    return dumper.represent_mapping("tag:yaml.org,2002:map", list(node.entries))


_SnapshotDumper.add_representer(Scalar, _represent_scalar)
_SnapshotDumper.add_representer(Seq, _represent_seq)
_SnapshotDumper.add_representer(Map, _represent_map)
