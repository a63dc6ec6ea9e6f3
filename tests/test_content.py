"""Tests for the value tree."""

from __future__ import annotations

import pytest
from hypothesis import given

from canonsnap.content import DOCUMENT_MARKER, Content, Map, Scalar, Seq, sort_key

from strategies import trees


def _m(*pairs: tuple[object, Content]) -> Map:
    return Map(tuple((Scalar(k), v) for k, v in pairs))


def _all_maps_sorted(node: Content) -> bool:
    if isinstance(node, Map):
        keys = [sort_key(k) for k, _ in node.entries]
        return keys == sorted(keys) and all(_all_maps_sorted(v) for _, v in node.entries)
    if isinstance(node, Seq):
        return all(_all_maps_sorted(item) for item in node.items)
    return True


class TestScalar:
    def test_equality_is_type_aware(self) -> None:
        assert Scalar(1) == Scalar(1)
        assert Scalar(1) != Scalar(True)
        assert Scalar(1) != Scalar(1.0)
        assert Scalar(float("nan")) == Scalar(float("nan"))

    def test_rejects_unsupported_values(self) -> None:
        with pytest.raises(TypeError):
            Scalar(object())  # type: ignore[arg-type]

    def test_bytes_become_integer_lists(self) -> None:
        assert Scalar(b"\x01\x02").to_plain() == [1, 2]


class TestSortMaps:
    def test_sorts_nested_maps(self) -> None:
        tree = _m(
            ("b", Seq((_m(("z", Scalar(1)), ("y", Scalar(2))),))),
            ("a", _m(("d", Scalar(3)), ("c", Scalar(4)))),
        )

        result = tree.sort_maps()

        assert isinstance(result, Map)
        assert [k.value for k, _ in result.entries] == ["a", "b"]
        assert [k.value for k, _ in result.get("a").entries] == ["c", "d"]
        inner = result.get("b").items[0]
        assert [k.value for k, _ in inner.entries] == ["y", "z"]

    def test_sort_is_stable_for_equal_keys(self) -> None:
        tree = _m(("k", Scalar("first")), ("a", Scalar(0)), ("k", Scalar("second")))

        result = tree.sort_maps()

        assert [v.value for _, v in result.entries] == [0, "first", "second"]

    def test_sort_does_not_touch_input(self) -> None:
        tree = _m(("b", Scalar(1)), ("a", Scalar(2)))
        tree.sort_maps()
        assert [k.value for k, _ in tree.entries] == ["b", "a"]

    def test_mixed_key_types_have_total_order(self) -> None:
        tree = Map(
            (
                (Scalar("x"), Scalar(1)),
                (Scalar(2), Scalar(2)),
                (Scalar(None), Scalar(3)),
                (Scalar(True), Scalar(4)),
                (Scalar(1.5), Scalar(5)),
            )
        )

        result = tree.sort_maps()

        assert [k.value for k, _ in result.entries] == [None, True, 1.5, 2, "x"]

    @given(trees)
    def test_sort_is_idempotent(self, tree: Content) -> None:
        once = tree.sort_maps()
        assert once.sort_maps() == once
        assert _all_maps_sorted(once)


def test_as_slice_only_for_sequences() -> None:
    seq = Seq((Scalar(1), Scalar(2)))
    assert seq.as_slice() == (Scalar(1), Scalar(2))
    assert _m(("a", Scalar(1))).as_slice() is None
    assert Scalar(1).as_slice() is None


def test_to_plain_rejects_duplicate_keys() -> None:
    tree = _m(("a", Scalar(1)), ("a", Scalar(2)))
    with pytest.raises(ValueError):
        tree.to_plain()


def test_to_plain_keeps_order() -> None:
    tree = _m(("b", Seq((Scalar(1),))), ("a", Scalar(None)))
    assert list(tree.to_plain()) == ["b", "a"]
    assert tree.to_plain() == {"b": [1], "a": None}


class TestAsYaml:
    def test_env_cmdline_document(self) -> None:
        tree = _m(
            ("env", Seq((Scalar("ENVIRONMENT"), Scalar("production")))),
            ("cmdline", Seq((Scalar("my-tool"), Scalar("run")))),
        )

        assert tree.as_yaml() == (
            "---\n"
            "env:\n"
            "  - ENVIRONMENT\n"
            "  - production\n"
            "cmdline:\n"
            "  - my-tool\n"
            "  - run\n"
        )

    def test_scalar_documents_have_marker_line(self) -> None:
        assert Scalar("hello").as_yaml() == "---\nhello\n"
        assert Scalar(42).as_yaml() == "---\n42\n"
        assert Scalar(None).as_yaml() == "---\nnull\n"

    def test_shared_nodes_are_not_anchored(self) -> None:
        shared = Seq((Scalar(1),))
        rendered = _m(("a", shared), ("b", shared)).as_yaml()
        assert "&" not in rendered
        assert "*" not in rendered

    @given(trees)
    def test_always_starts_with_document_marker(self, tree: Content) -> None:
        assert tree.as_yaml().startswith(DOCUMENT_MARKER)
