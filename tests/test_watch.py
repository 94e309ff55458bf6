from __future__ import annotations

import unittest

from tagtree.documents.records import DocumentRecord
from tagtree.watch import build_corpus_signature, build_input_signature, build_record_signature


class RecordSignatureTests(unittest.TestCase):
    def test_signature_changes_for_tag_and_link_edits(self) -> None:
        base = DocumentRecord(path="a.md", tags=("x",), links=("b.md",))

        self.assertNotEqual(build_record_signature(base), build_record_signature(DocumentRecord(path="a.md", tags=("y",), links=("b.md",))))
        self.assertNotEqual(build_record_signature(base), build_record_signature(DocumentRecord(path="a.md", tags=("x",))))

    def test_signature_ignores_metadata_churn(self) -> None:
        base = DocumentRecord(path="a.md", tags=("x",), mtime=1.0)
        touched = DocumentRecord(path="a.md", tags=("x",), mtime=99.0, ctime=5.0)
        self.assertEqual(build_record_signature(base), build_record_signature(touched))

    def test_missing_record_has_its_own_signature(self) -> None:
        self.assertEqual(build_record_signature(None), build_record_signature(None))
        self.assertNotEqual(build_record_signature(None), build_record_signature(DocumentRecord(path="missing")))

    def test_tag_boundaries_are_not_ambiguous(self) -> None:
        joined = DocumentRecord(path="a.md", tags=("ab",))
        split = DocumentRecord(path="a.md", tags=("a", "b"))
        self.assertNotEqual(build_record_signature(joined), build_record_signature(split))


class CorpusSignatureTests(unittest.TestCase):
    def test_corpus_signature_is_order_independent(self) -> None:
        a = DocumentRecord(path="a.md", tags=("x",))
        b = DocumentRecord(path="b.md", tags=("y",))

        self.assertEqual(build_corpus_signature([a, b]), build_corpus_signature([b, a]))
        self.assertEqual(build_corpus_signature([a, b]), build_corpus_signature({"b.md": b, "a.md": a}))
        self.assertNotEqual(build_corpus_signature([a, b]), build_corpus_signature([a]))

    def test_input_signature_covers_every_input(self) -> None:
        base = build_input_signature("corpus", "settings", "", "{}")

        self.assertEqual(base, build_input_signature("corpus", "settings", "", "{}"))
        self.assertNotEqual(base, build_input_signature("corpus2", "settings", "", "{}"))
        self.assertNotEqual(base, build_input_signature("corpus", "settings2", "", "{}"))
        self.assertNotEqual(base, build_input_signature("corpus", "settings", "web", "{}"))
        self.assertNotEqual(base, build_input_signature("corpus", "settings", "", '{"a": {}}'))


if __name__ == "__main__":
    unittest.main()
