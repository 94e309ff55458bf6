from __future__ import annotations

import unittest

from tagtree.documents.links import build_link_items, linked_paths, referencing_paths
from tagtree.documents.records import DocumentRecord
from tagtree.settings import TagTreeSettings

RECORDS = [
    DocumentRecord(path="a.md", tags=("x",), links=("b.md", "c.md")),
    DocumentRecord(path="b.md", tags=("y",), links=("a.md",)),
    DocumentRecord(path="c.md"),
    DocumentRecord(path="lonely.md", tags=("x",), links=("missing.md",)),
]


class LinkedPathTests(unittest.TestCase):
    def test_neighbours_are_undirected_and_unique(self) -> None:
        links = {"a.md": {"b.md": 1, "c.md": 1}, "b.md": {"a.md": 1}, "c.md": {}}
        self.assertEqual(linked_paths(links), {"a.md": ["b.md", "c.md"], "b.md": ["a.md"], "c.md": ["a.md"]})

    def test_self_links_are_ignored(self) -> None:
        self.assertEqual(linked_paths({"a.md": {"a.md": 2}}), {})

    def test_referencing_paths(self) -> None:
        links = {"a.md": {"c.md": 1}, "b.md": {"c.md": 0}, "c.md": {"c.md": 1}}
        self.assertEqual(referencing_paths("c.md", links), {"a.md"})


class BuildLinkItemsTests(unittest.TestCase):
    def test_folders_are_linked_documents(self) -> None:
        items = {item.path: item for item in build_link_items(RECORDS, TagTreeSettings(tree_type="links"), now=0.0)}

        self.assertEqual(items["a.md"].tags, ("b.md", "c.md"))
        self.assertEqual(items["c.md"].tags, ("a.md",))
        self.assertEqual(items["a.md"].extra_tags, ("x",))

    def test_unresolved_links_leave_document_unlinked(self) -> None:
        items = {item.path: item for item in build_link_items(RECORDS, TagTreeSettings(tree_type="links"), now=0.0)}
        self.assertEqual(items["lonely.md"].tags, ("_unlinked",))

    def test_search_filters_on_document_tags(self) -> None:
        settings = TagTreeSettings(tree_type="links")
        items = build_link_items(RECORDS, settings, search_string="y", now=0.0)
        self.assertEqual([item.path for item in items], ["b.md"])

    def test_narrowing_setting_does_not_split_link_items(self) -> None:
        settings = TagTreeSettings(tree_type="links", disable_narrowing_down=True)
        items = build_link_items([DocumentRecord(path="a.md", tags=("x", "y"))], settings, now=0.0)
        self.assertEqual(len(items), 1)


if __name__ == "__main__":
    unittest.main()
