"""Selectors and redactions for value trees.

A selector picks nodes out of a tree by their path::

    .user.id            key "id" inside key "user"
    ["odd key"]         quoted key
    .items[0]           first sequence item, [-1] is the last one
    .items[1:3]         index range, end exclusive; [] selects every index
    .*                  any single key or index
    .**                 any depth; at least one step when it comes last
    .a, .b              either alternative

A redaction replaces every matched node. Matched nodes are not descended
into, and the root node itself is never matched.
"""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from .adapter import to_content
from .content import Content, Map, Scalar, Seq, sort_key
from .errors import RedactionError, SelectorError, SnapshotError

log = logging.getLogger(__name__)

_IDENT = re.compile(r"[A-Za-z0-9_-]+\Z")

_TOKEN = re.compile(
    r"""
    \s*(?:
        (?P<deep>\.\*\*)
      | (?P<wild>\.\*)
      | \.(?P<ident>[A-Za-z0-9_-]+)
      | \[\s*(?P<quoted>"(?:[^"\\]|\\.)*")\s*\]
      | \[\s*(?P<index>-?\d+)\s*\]
      | \[\s*(?P<start>-?\d+)?\s*:\s*(?P<end>-?\d+)?\s*\]
      | (?P<all>\[\s*\])
      | (?P<comma>,)
    )
    """,
    re.VERBOSE,
)


@dataclass(frozen=True, slots=True)
class KeyStep:
    key: Content

    def __str__(self) -> str:
        key = self.key
        if not isinstance(key, Scalar):
            return "[?]"
        if isinstance(key.value, str) and _IDENT.match(key.value):
            return f".{key.value}"
        if isinstance(key.value, str):
            return f"[{json.dumps(key.value, ensure_ascii=False)}]"
        return f"[{key.value!r}]"


@dataclass(frozen=True, slots=True)
class IndexStep:
    index: int
    length: int

    def __str__(self) -> str:
        return f"[{self.index}]"


@dataclass(frozen=True, slots=True)
class ContentPath:
    """Location of a node inside a tree, rendered like a selector."""

    steps: tuple[KeyStep | IndexStep, ...] = ()

    def __str__(self) -> str:
        return "".join(str(step) for step in self.steps)

    def __len__(self) -> int:
        return len(self.steps)


# Selector segments


@dataclass(frozen=True, slots=True)
class _Key:
    name: str


@dataclass(frozen=True, slots=True)
class _Index:
    index: int


@dataclass(frozen=True, slots=True)
class _Range:
    start: int | None
    end: int | None


@dataclass(frozen=True, slots=True)
class _Wildcard:
    pass


@dataclass(frozen=True, slots=True)
class _DeepWildcard:
    pass


_Segment = _Key | _Index | _Range | _Wildcard | _DeepWildcard


def _resolve(index: int, length: int) -> int:
    return index if index >= 0 else length + index


def _segment_matches(segment: _Segment, step: KeyStep | IndexStep) -> bool:
    if isinstance(segment, _Wildcard):
        return True
    if isinstance(segment, _Key):
        if not isinstance(step, KeyStep) or not isinstance(step.key, Scalar):
            return False
        value = step.key.value
        return isinstance(value, str) and value == segment.name
    if not isinstance(step, IndexStep):
        return False
    if isinstance(segment, _Index):
        return _resolve(segment.index, step.length) == step.index
    if isinstance(segment, _Range):
        start = 0 if segment.start is None else _resolve(segment.start, step.length)
        end = step.length if segment.end is None else _resolve(segment.end, step.length)
        return start <= step.index < end
    return False


def _path_matches(segments: tuple[_Segment, ...], steps: tuple[KeyStep | IndexStep, ...]) -> bool:
    if not segments:
        return not steps
    head, rest = segments[0], segments[1:]
    if isinstance(head, _DeepWildcard):
        # a trailing ** must reach below its prefix
        first = 0 if rest else 1
        return any(_path_matches(rest, steps[i:]) for i in range(first, len(steps) + 1))
    if not steps:
        return False
    return _segment_matches(head, steps[0]) and _path_matches(rest, steps[1:])


def _parse(text: str) -> tuple[tuple[_Segment, ...], ...]:
    source = text.strip()
    if not source:
        raise SelectorError("empty selector")

    alternatives: list[tuple[_Segment, ...]] = []
    current: list[_Segment] = []
    pos = 0

    def close() -> None:
        if not current:
            raise SelectorError(f"empty alternative in selector {text!r}")
        if sum(isinstance(s, _DeepWildcard) for s in current) > 1:
            raise SelectorError(f"deep wildcard used more than once in {text!r}")
        alternatives.append(tuple(current))
        current.clear()

    while pos < len(source):
        m = _TOKEN.match(source, pos)
        if m is None:
            raise SelectorError(f"unexpected input at offset {pos} in selector {text!r}")
        pos = m.end()

        if m.group("comma"):
            close()
        elif m.group("deep"):
            current.append(_DeepWildcard())
        elif m.group("wild"):
            current.append(_Wildcard())
        elif m.group("ident") is not None:
            current.append(_Key(m.group("ident")))
        elif m.group("quoted") is not None:
            try:
                current.append(_Key(json.loads(m.group("quoted"))))
            except ValueError as exc:
                raise SelectorError(f"bad quoted key in selector {text!r}: {exc}") from exc
        elif m.group("index") is not None:
            current.append(_Index(int(m.group("index"))))
        elif m.group("all"):
            current.append(_Range(None, None))
        else:
            start, end = m.group("start"), m.group("end")
            current.append(
                _Range(
                    int(start) if start is not None else None,
                    int(end) if end is not None else None,
                )
            )

    close()
    return tuple(alternatives)


class Selector:
    """Compiled selector expression."""

    __slots__ = ("_alternatives", "_text")

    def __init__(self, text: str) -> None:
        self._text = text
        self._alternatives = _parse(text)

    @property
    def text(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"Selector({self._text!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Selector):
            return NotImplemented
        return self._alternatives == other._alternatives

    def __hash__(self) -> int:
        return hash(self._alternatives)

    def is_match(self, path: ContentPath) -> bool:
        if not path.steps:
            return False
        return any(_path_matches(alt, path.steps) for alt in self._alternatives)

    def redact(self, content: Content, redaction: Redaction) -> Content:
        """Return a new tree with every matched node redacted."""
        return self._redact(content, redaction, ())

    def _redact(
        self,
        node: Content,
        redaction: Redaction,
        steps: tuple[KeyStep | IndexStep, ...],
    ) -> Content:
        if steps:
            path = ContentPath(steps)
            if self.is_match(path):
                log.debug("redacted", extra={"selector": self._text, "path": str(path)})
                return redaction.apply(node, path)

        if isinstance(node, Map):
            return Map(
                tuple(
                    (k, self._redact(v, redaction, steps + (KeyStep(k),)))
                    for k, v in node.entries
                ),
                node.name,
            )
        if isinstance(node, Seq):
            length = len(node.items)
            return Seq(
                tuple(
                    self._redact(item, redaction, steps + (IndexStep(i, length),))
                    for i, item in enumerate(node.items)
                )
            )
        return node


class Redaction(ABC):
    """Replacement policy applied to a matched node."""

    @abstractmethod
    def apply(self, content: Content, path: ContentPath) -> Content: ...


@dataclass(frozen=True, slots=True)
class StaticRedaction(Redaction):
    value: Content

    def apply(self, content: Content, path: ContentPath) -> Content:
        return self.value


@dataclass(frozen=True, slots=True)
class DynamicRedaction(Redaction):
    """Calls ``func(node, path)`` and converts its result into a tree."""

    func: Callable[[Content, ContentPath], Any]

    def apply(self, content: Content, path: ContentPath) -> Content:
        try:
            return to_content(self.func(content, path))
        except SnapshotError as exc:
            raise RedactionError(f"redaction at {path} failed: {exc.message}") from exc
        except Exception as exc:
            raise RedactionError(f"redaction at {path} failed: {exc!r}") from exc


@dataclass(frozen=True, slots=True)
class SortedRedaction(Redaction):
    """Sorts a sequence by value, or a map by key."""

    def apply(self, content: Content, path: ContentPath) -> Content:
        if isinstance(content, Seq):
            return Seq(tuple(sorted(content.items, key=sort_key)))
        if isinstance(content, Map):
            return Map(tuple(sorted(content.entries, key=lambda e: sort_key(e[0]))), content.name)
        return content


@dataclass(frozen=True, slots=True)
class RoundedRedaction(Redaction):
    """Rounds a float to ``decimals`` places."""

    decimals: int

    def apply(self, content: Content, path: ContentPath) -> Content:
        if isinstance(content, Scalar) and isinstance(content.value, float):
            return Scalar(round(content.value, self.decimals))
        return content


RedactionRule = tuple[Selector, Redaction]


def static_redaction(value: Any) -> Redaction:
    return StaticRedaction(to_content(value))


def dynamic_redaction(func: Callable[[Content, ContentPath], Any]) -> Redaction:
    return DynamicRedaction(func)


def sorted_redaction() -> Redaction:
    return SortedRedaction()


def rounded_redaction(decimals: int) -> Redaction:
    if decimals < 0:
        raise ValueError("decimals must be >= 0")
    return RoundedRedaction(decimals)


def as_redaction(value: Any) -> Redaction:
    """Plain values become static replacements."""
    if isinstance(value, Redaction):
        return value
    return static_redaction(value)


def make_rule(selector: str | Selector, redaction: Any) -> RedactionRule:
    if not isinstance(selector, Selector):
        selector = Selector(selector)
    return selector, as_redaction(redaction)


def apply_redactions(content: Content, rules: Iterable[RedactionRule]) -> Content:
    """Apply ``rules`` in order; each rule sees the output of the ones before it."""
    for selector, redaction in rules:
        content = selector.redact(content, redaction)
    return content
