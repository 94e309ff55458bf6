from __future__ import annotations

import unittest

from tagtree.settings import TagTreeSettings
from tagtree.tree_model.build import build_tag_tree, find_tag_child
from tagtree.tree_model.expansion import (
    expand_untagged_to_root,
    find_node,
    is_auto_expand_tree,
    omitted_tags,
    open_folder,
    restore_expanded_folders,
    sorted_expanded_folders,
)
from tagtree.tree_model.types import Item, TagNode


def _item(path: str, *tags: str) -> Item:
    return Item(path=path, tags=tags, display_name=path, filename=path)


def _corpus() -> list[Item]:
    return [_item("d1", "a", "b", "c"), _item("d2", "a", "b")]


class AutoExpandTests(unittest.TestCase):
    def test_single_branch_without_documents_auto_expands(self) -> None:
        inner = TagNode(tag="b", ancestors=["root", "a", "b"], children=[_item("d1", "a", "b"), _item("d2", "a", "b")])
        node = TagNode(tag="a", ancestors=["root", "a"], children=[inner])
        self.assertTrue(is_auto_expand_tree(node))

    def test_diverging_branches_do_not_auto_expand(self) -> None:
        b = TagNode(tag="b", ancestors=["root", "a", "b"], children=[_item("d1", "a", "b")])
        c = TagNode(tag="c", ancestors=["root", "a", "c"], children=[_item("d2", "a", "c")])
        node = TagNode(tag="a", ancestors=["root", "a"], children=[b, c])
        self.assertFalse(is_auto_expand_tree(node))

    def test_unmaterialized_folder_does_not_auto_expand(self) -> None:
        node = TagNode(tag="a", ancestors=["root", "a"], children=[_item("d1", "a", "b")])
        self.assertFalse(is_auto_expand_tree(node))

    def test_omitted_tags_lists_tags_of_single_document(self) -> None:
        node = TagNode(tag="a", ancestors=["root", "a"], children=[_item("d1", "a", "b", "c")])
        self.assertEqual(omitted_tags(node), ["b", "c"])

        node.children.append(_item("d2", "a"))
        self.assertEqual(omitted_tags(node), [])


class RestoreExpandedFoldersTests(unittest.TestCase):
    def test_default_restore_opens_one_level(self) -> None:
        root = build_tag_tree(_corpus())
        self.assertEqual(restore_expanded_folders(root, [], TagTreeSettings()), 0)

        self.assertIsNotNone(find_node(root, "root/a/b"))
        self.assertIsNone(find_node(root, "root/a/b/c"))

    def test_recorded_key_is_materialized_again(self) -> None:
        root = build_tag_tree(_corpus())
        restored = restore_expanded_folders(root, ["root/a/b"], TagTreeSettings())

        self.assertEqual(restored, 1)
        node = find_node(root, "root/a/b/c")
        self.assertIsNotNone(node)
        self.assertEqual([item.path for item in node.item_children()], ["d1"])

    def test_missing_key_is_skipped(self) -> None:
        root = build_tag_tree(_corpus())
        with self.assertLogs("tagtree.tree_model.expansion", level="DEBUG") as logs:
            restored = restore_expanded_folders(root, ["root/zzz"], TagTreeSettings())

        self.assertEqual(restored, 0)
        self.assertIn("root/zzz", "\n".join(logs.output))

    def test_expand_limit_stops_materialization(self) -> None:
        root = build_tag_tree(_corpus())
        settings = TagTreeSettings(expand_limit=1)

        self.assertEqual(restore_expanded_folders(root, ["root/a/b"], settings), 0)
        self.assertEqual(find_tag_child(root, "a").tag_children(), [])

    def test_open_folder_materializes_on_demand(self) -> None:
        root = build_tag_tree(_corpus())
        node = open_folder(root, "root/a/b", TagTreeSettings())

        self.assertIsNotNone(node)
        self.assertEqual(node.key, "root/a/b")
        self.assertIsNotNone(find_tag_child(node, "c"))
        self.assertIsNone(open_folder(root, "root/missing", TagTreeSettings()))


class UntaggedToRootTests(unittest.TestCase):
    def test_untagged_documents_move_to_root(self) -> None:
        root = build_tag_tree([_item("d1", "a"), _item("d2", "_untagged")])

        self.assertTrue(expand_untagged_to_root(root))
        self.assertEqual([child.tag for child in root.tag_children()], ["a"])
        self.assertEqual([(item.path, item.tags) for item in root.item_children()], [("d2", ())])
        self.assertIsNone(root.descendants)

    def test_no_untagged_folder_is_a_no_op(self) -> None:
        root = build_tag_tree([_item("d1", "a")])
        self.assertFalse(expand_untagged_to_root(root))


class ExpandedFolderOrderTests(unittest.TestCase):
    def test_deduplicates_and_orders_shallowest_first(self) -> None:
        self.assertEqual(
            sorted_expanded_folders(["root/a/b", "root/a", "root/a", "root/c"]),
            ["root/a", "root/c", "root/a/b"],
        )


if __name__ == "__main__":
    unittest.main()
