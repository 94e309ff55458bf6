from __future__ import annotations

import unittest

from tagtree.tree_model.tags import (
    SUBTREE_MARK,
    ancestor_prefix_set,
    ancestor_tag_set,
    ancestor_to_longest_tag,
    ancestor_to_tags,
    canonical_tag,
    contains_tag,
    parse_tag_list,
    split_head,
    unique_folded,
)


class TagPathTests(unittest.TestCase):
    def test_split_head_marks_remainder_as_continuation(self) -> None:
        self.assertEqual(split_head("a/b/c"), ("a", f"{SUBTREE_MARK}b/c"))
        self.assertEqual(split_head(f"{SUBTREE_MARK}b/c"), (f"{SUBTREE_MARK}b", f"{SUBTREE_MARK}c"))

    def test_ancestor_to_tags_folds_continuations_into_previous_tag(self) -> None:
        ancestors = ["root", "web", f"{SUBTREE_MARK}css", "draft"]
        self.assertEqual(ancestor_to_tags(ancestors), ["root", "web/css", "draft"])

    def test_canonical_tag_excludes_root(self) -> None:
        self.assertEqual(canonical_tag(["root"]), "")
        self.assertEqual(canonical_tag(["root", "project", f"{SUBTREE_MARK}alpha"]), "project/alpha")

    def test_ancestor_tag_set_is_case_folded_and_skips_root(self) -> None:
        self.assertEqual(ancestor_tag_set(["root", "Root", "Web"]), {"root", "web"})
        self.assertEqual(ancestor_tag_set(["root"]), set())

    def test_ancestor_prefix_set_covers_every_leading_part_of_a_tag(self) -> None:
        ancestors = ["root", "Work", f"{SUBTREE_MARK}meeting", f"{SUBTREE_MARK}work", "draft"]
        self.assertEqual(
            ancestor_prefix_set(ancestors),
            {"work", "work/meeting", "work/meeting/work", "draft"},
        )
        self.assertEqual(ancestor_prefix_set(["root", "a/b"]), {"a/b"})

    def test_ancestor_to_longest_tag_drops_prefix_tags(self) -> None:
        self.assertEqual(ancestor_to_longest_tag(["web", "web/css", "draft"]), ["web/css", "draft"])

    def test_case_insensitive_helpers_keep_first_spelling(self) -> None:
        self.assertEqual(unique_folded(["Web", "web", "WEB", "css"]), ["Web", "css"])
        self.assertTrue(contains_tag(["Project/Alpha"], "project/alpha"))

    def test_parse_tag_list_accepts_comma_strings_and_lists(self) -> None:
        self.assertEqual(parse_tag_list("Archive, old\nstale,,"), ("archive", "old", "stale"))
        self.assertEqual(parse_tag_list(["A", "a", 3, " b "]), ("a", "b"))
        self.assertEqual(parse_tag_list(None), ())


if __name__ == "__main__":
    unittest.main()
