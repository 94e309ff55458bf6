"""Tests for tag/document comparators and in-place tree ordering.

Pinned tags must lead in every direction; documents follow tag folders.
"""

from __future__ import annotations

import unittest
from functools import cmp_to_key

from tagtree.settings import TagTreeSettings
from tagtree.tree_model.sorting import (
    TAG_ORDER_KEYS,
    compare_items,
    compare_tag_nodes,
    compare_text,
    parse_sort_type,
    sort_tree,
    tag_info_for,
)
from tagtree.tree_model.tags import SUBTREE_MARK
from tagtree.tree_model.types import Item, TagInfo, TagNode


def _tag(tag: str, count: int = 0, parent: list[str] | None = None) -> TagNode:
    return TagNode(tag=tag, ancestors=[*(parent or ["root"]), tag], items_count=count)


def _sorted_tags(nodes: list[TagNode], sort_type_tag: str, tag_info=None) -> list[str]:
    compare = compare_tag_nodes(TagTreeSettings(sort_type_tag=sort_type_tag), tag_info)
    return [node.tag for node in sorted(nodes, key=cmp_to_key(compare))]


class TagOrderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.nodes = [_tag("a", 3), _tag("b", 1), _tag("c", 2)]
        self.pins = {"b": TagInfo(key="1")}

    def test_name_order_without_pins(self) -> None:
        self.assertEqual(_sorted_tags(self.nodes, "NAME_ASC"), ["a", "b", "c"])
        self.assertEqual(_sorted_tags(self.nodes, "NAME_DESC"), ["c", "b", "a"])

    def test_pinned_tag_leads_in_both_name_directions(self) -> None:
        self.assertEqual(_sorted_tags(self.nodes, "NAME_ASC", self.pins), ["b", "a", "c"])
        self.assertEqual(_sorted_tags(self.nodes, "NAME_DESC", self.pins), ["b", "c", "a"])

    def test_pinned_tag_leads_in_both_count_directions(self) -> None:
        self.assertEqual(_sorted_tags(self.nodes, "ITEMS_ASC", self.pins), ["b", "c", "a"])
        self.assertEqual(_sorted_tags(self.nodes, "ITEMS_DESC", self.pins), ["b", "a", "c"])

    def test_pins_order_among_themselves_by_key(self) -> None:
        pins = {"a": TagInfo(key="2"), "c": TagInfo(key="1")}
        self.assertEqual(_sorted_tags(self.nodes, "NAME_ASC", pins), ["c", "a", "b"])

    def test_mark_only_record_does_not_pin(self) -> None:
        info = {"c": TagInfo(mark="*")}
        self.assertEqual(_sorted_tags(self.nodes, "NAME_ASC", info), ["a", "b", "c"])

    def test_continuation_mark_is_ignored_for_names(self) -> None:
        parent = ["root", "project"]
        nodes = [_tag(f"{SUBTREE_MARK}beta", parent=parent), _tag("alpha", parent=parent)]
        self.assertEqual(_sorted_tags(nodes, "NAME_ASC"), ["alpha", f"{SUBTREE_MARK}beta"])

    def test_pin_lookup_prefers_full_tag_path(self) -> None:
        node = _tag(f"{SUBTREE_MARK}alpha", parent=["root", "project"])
        full = TagInfo(key="full")
        bare = TagInfo(key="bare")

        self.assertIs(tag_info_for(node, {"project/alpha": full, "alpha": bare}), full)
        self.assertIs(tag_info_for(node, {"alpha": bare}), bare)
        self.assertIsNone(tag_info_for(node, None))


class ItemOrderTests(unittest.TestCase):
    def _order(self, sort_type: str, items: list[Item]) -> list[str]:
        compare = compare_items(TagTreeSettings(sort_type=sort_type))
        return [item.path for item in sorted(items, key=cmp_to_key(compare))]

    def test_display_name_uses_natural_number_order(self) -> None:
        items = [
            Item(path="x/note10.md", display_name="note10"),
            Item(path="x/note2.md", display_name="note2"),
            Item(path="x/Note1.md", display_name="Note1"),
        ]
        self.assertEqual(self._order("DISPNAME_ASC", items), ["x/Note1.md", "x/note2.md", "x/note10.md"])

    def test_modification_time_descending(self) -> None:
        items = [Item(path="old", mtime=10), Item(path="new", mtime=30), Item(path="mid", mtime=20)]
        self.assertEqual(self._order("MTIME_DESC", items), ["new", "mid", "old"])

    def test_full_path_and_filename_keys(self) -> None:
        items = [
            Item(path="b/one.md", filename="one.md"),
            Item(path="a/two.md", filename="two.md"),
        ]
        self.assertEqual(self._order("FULLPATH_ASC", items), ["a/two.md", "b/one.md"])
        self.assertEqual(self._order("NAME_ASC", items), ["b/one.md", "a/two.md"])


class ParseSortTypeTests(unittest.TestCase):
    def test_parses_key_and_direction(self) -> None:
        self.assertEqual(parse_sort_type("ITEMS_DESC", TAG_ORDER_KEYS, "NAME"), ("ITEMS", -1))
        self.assertEqual(parse_sort_type("NAME_ASC", TAG_ORDER_KEYS, "NAME"), ("NAME", 1))

    def test_unknown_value_falls_back_with_warning(self) -> None:
        with self.assertLogs("tagtree.tree_model.sorting", level="WARNING"):
            self.assertEqual(parse_sort_type("SIZE_UP", TAG_ORDER_KEYS, "NAME"), ("NAME", 1))

    def test_compare_text_is_case_insensitive_with_stable_tiebreak(self) -> None:
        self.assertLess(compare_text("apple", "Banana"), 0)
        self.assertNotEqual(compare_text("a", "A"), 0)
        self.assertEqual(compare_text("same", "same"), 0)


class SortTreeTests(unittest.TestCase):
    def test_tag_folders_precede_documents_at_every_level(self) -> None:
        root = TagNode(tag="root", ancestors=["root"])
        a = _tag("a")
        z = _tag("z")
        a.children = [Item(path="d2", display_name="b"), _tag("inner", parent=a.ancestors), Item(path="d1", display_name="a")]
        a.descendants = [Item(path="d2", display_name="b"), Item(path="d1", display_name="a")]
        root.children = [Item(path="top", display_name="top"), z, a]

        settings = TagTreeSettings()
        sort_tree(root, compare_tag_nodes(settings), compare_items(settings))

        self.assertEqual([getattr(child, "tag", None) or child.path for child in root.children], ["a", "z", "top"])
        self.assertEqual([getattr(child, "tag", None) or child.path for child in a.children], ["inner", "d1", "d2"])
        self.assertEqual([item.path for item in a.descendants], ["d1", "d2"])


if __name__ == "__main__":
    unittest.main()
