from __future__ import annotations

import unittest

from tagtree.settings import TagTreeSettings


class SettingsFromMappingTests(unittest.TestCase):
    def test_accepts_camel_case_keys(self) -> None:
        settings = TagTreeSettings.from_mapping(
            {"sortTypeTag": "items_desc", "hideItems": "ALL_EXCEPT_BOTTOM", "expandLimit": 3, "useTitle": False}
        )

        self.assertEqual(settings.sort_type_tag, "ITEMS_DESC")
        self.assertEqual(settings.hide_items, "ALL_EXCEPT_BOTTOM")
        self.assertEqual(settings.expand_limit, 3)
        self.assertFalse(settings.use_title)

    def test_hide_items_aliases_are_normalized(self) -> None:
        for alias in ("DEDICATED_INTERMEDIATES", "DEDICATED_INTERMIEDIATES", "dedicated_intermidiates"):
            settings = TagTreeSettings.from_mapping({"hide_items": alias})
            self.assertEqual(settings.hide_items, "DEDICATED_INTERMIDIATES", alias)

    def test_tag_lists_accept_comma_strings(self) -> None:
        settings = TagTreeSettings.from_mapping({"archiveTags": "Archived, old,,archived", "ignoreFolders": ["tmp/", 4]})

        self.assertEqual(settings.archive_tags, ("archived", "old"))
        self.assertEqual(settings.ignore_folders, ("tmp/",))

    def test_invalid_values_keep_defaults(self) -> None:
        with self.assertLogs("tagtree.settings", level="WARNING"):
            settings = TagTreeSettings.from_mapping(
                {"sort_type": "SIZE_ASC", "expand_limit": -1, "scan_delay": True, "use_title": "yes", "bogus": 1}
            )

        self.assertEqual(settings, TagTreeSettings())

    def test_non_mapping_returns_defaults(self) -> None:
        self.assertEqual(TagTreeSettings.from_mapping(["nope"]), TagTreeSettings())

    def test_tree_type_and_delay_helpers(self) -> None:
        settings = TagTreeSettings.from_mapping({"treeType": "LINKS", "scanDelay": 500})
        self.assertTrue(settings.is_link_tree)
        self.assertEqual(settings.scan_delay_seconds, 0.5)


class SettingsSerializationTests(unittest.TestCase):
    def test_to_dict_round_trips(self) -> None:
        settings = TagTreeSettings(archive_tags=("archived",), sort_type="MTIME_DESC", merge_redundant_combination=True)
        self.assertEqual(TagTreeSettings.from_mapping(settings.to_dict()), settings)

    def test_signature_tracks_effective_changes(self) -> None:
        base = TagTreeSettings()
        self.assertEqual(base.signature(), TagTreeSettings().signature())
        self.assertNotEqual(base.signature(), base.replace(hide_items="ALL_EXCEPT_BOTTOM").signature())


if __name__ == "__main__":
    unittest.main()
