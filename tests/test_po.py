"""
Tests for PO catalog parsing and writing.
"""

import os
import tempfile
import unittest
from pathlib import Path

from pogettext.domain import HEADER_ID
from pogettext.po import Po

FIXTURES = Path(__file__).parent / "fixtures"
CATEGORIES_PO = FIXTURES / "ar" / "LC_MESSAGES" / "categories.po"


def parsed(text):
    po = Po()
    po.parse(text)
    return po


class TestPoParsing(unittest.TestCase):
    """Tests for reading PO text into a catalog."""

    def test_fixture_entries(self):
        po = Po()
        po.parse_file(FIXTURES / "en_US" / "default.po")

        translations = po.get_translations()
        contexts = po.get_ctx_translations()
        self.assertIn(HEADER_ID, translations)
        self.assertIn("One with var: %s", translations)
        self.assertIn("One with var: %s", contexts["Ctx"])
        self.assertIn("Some random in a context", contexts["Ctx"])
        # Context applies to the next msgid only
        self.assertIn("Some random", translations)
        self.assertNotIn("Some random", contexts["Ctx"])
        self.assertIn("Empty translation", translations)

    def test_escapes(self):
        po = parsed('msgid "Say \\"hi\\""\nmsgstr "Line\\nbreak\\tand \\\\ slash"\n')
        self.assertEqual(po.get('Say "hi"'), "Line\nbreak\tand \\ slash")

    def test_plural_entries(self):
        po = parsed(
            'msgid "File"\n'
            'msgid_plural "Files"\n'
            'msgstr[0] "Archivo"\n'
            'msgstr[1] "Archivos"\n'
        )
        entry = po.get_translations()["File"]

        self.assertEqual(entry.plural_id, "Files")
        self.assertEqual(entry.forms, {0: "Archivo", 1: "Archivos"})

    def test_multiline_strings(self):
        po = parsed(
            'msgid ""\n'
            '"Multi"\n'
            '"line id"\n'
            'msgid_plural "Multi"\n'
            '"line plural"\n'
            'msgstr[0] "First "\n'
            '"form"\n'
            'msgstr[1] ""\n'
            '"Second form"\n'
        )
        entry = po.get_translations()["Multiline id"]

        self.assertEqual(entry.plural_id, "Multiline plural")
        self.assertEqual(entry.forms, {0: "First form", 1: "Second form"})

    def test_multiline_context(self):
        po = parsed('msgctxt "Long"\n" context"\nmsgid "A"\nmsgstr "B"\n')
        self.assertEqual(po.get_c("A", "Long context"), "B")
        self.assertEqual(po.get("A"), "A")

    def test_comments_and_flags_are_ignored(self):
        po = parsed(
            "# translator comment\n"
            "#: src/main.c:10\n"
            "#, fuzzy\n"
            'msgid "A"\n'
            'msgstr "B"\n'
        )
        self.assertEqual(len(po), 1)
        self.assertEqual(po.get("A"), "B")

    def test_obsolete_entries_are_skipped(self):
        po = parsed('msgid "A"\nmsgstr "B"\n\n#~ msgid "Old"\n#~ msgstr "Viejo"\n')
        self.assertEqual(len(po), 1)
        self.assertFalse(po.is_translated("Old"))

    def test_duplicate_msgid_last_wins(self):
        po = parsed('msgid "A"\nmsgstr "First"\n\nmsgid "A"\nmsgstr "Second"\n')
        self.assertEqual(po.get("A"), "Second")

    def test_empty_text(self):
        po = parsed("")
        self.assertEqual(len(po), 0)
        self.assertEqual(po.nplurals, 0)


class TestPoSyntaxErrors(unittest.TestCase):
    """Malformed text is logged and leaves the catalog empty."""

    def setUp(self):
        self.po = parsed('msgid "Keep"\nmsgstr "Mantener"\n')

    def assert_rejected(self, text):
        with self.assertLogs("pogettext.po", level="WARNING"):
            self.po.parse(text)
        self.assertEqual(len(self.po), 0)
        self.assertEqual(self.po.get("Keep"), "Keep")

    def test_invalid_plural_index(self):
        self.assert_rejected(
            'msgid "File"\n'
            'msgid_plural "Files"\n'
            'msgstr[0] "Archivo"\n'
            'msgstr[x] "Broken"\n'
        )

    def test_garbage_line(self):
        self.assert_rejected('random line\nmsgid "A"\nmsgstr "B"\n')

    def test_msgstr_before_msgid(self):
        self.assert_rejected('msgstr "orphan"\n"more"\n')


class TestByteOrderMark(unittest.TestCase):
    """A leading UTF-8 BOM must not hide the header block."""

    def assert_arabic_header(self, po):
        self.assertEqual(po.language, "ar")
        self.assertEqual(po.nplurals, 6)
        self.assertTrue(po.plural_forms)
        self.assertEqual(po.plural_form(2), 2)
        self.assertEqual(po.get("Alcohol & Tobacco"), "الكحول والتبغ")

    def test_bom_bytes(self):
        po = Po()
        po.parse(b"\xef\xbb\xbf" + CATEGORIES_PO.read_bytes())
        self.assert_arabic_header(po)

    def test_bom_text(self):
        po = Po()
        po.parse("\ufeff" + CATEGORIES_PO.read_text(encoding="utf-8"))
        self.assert_arabic_header(po)

    def test_bom_file(self):
        fd, path = tempfile.mkstemp(suffix=".po")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(b"\xef\xbb\xbf" + CATEGORIES_PO.read_bytes())

            po = Po()
            po.parse_file(path)
            self.assert_arabic_header(po)
        finally:
            os.unlink(path)


class TestPo(unittest.TestCase):
    """Tests for the Po domain."""

    def setUp(self):
        self.po = Po()
        self.po.parse_file(FIXTURES / "en_US" / "default.po")

    def test_headers(self):
        self.assertEqual(self.po.language, "en_US")
        self.assertEqual(self.po.nplurals, 2)
        self.assertEqual(self.po.header("POT-Creation-Date"), "2024-01-15 10:00+0000")
        self.assertEqual(self.po.header("Content-Type"), "text/plain; charset=UTF-8")

    def test_lookups(self):
        self.assertEqual(self.po.get("My text"), "Translated text")
        self.assertEqual(self.po.get("Another string"), "Another string")
        self.assertEqual(self.po.get("language"), "en_US")
        self.assertEqual(self.po.get("Empty translation"), "Empty translation")
        self.assertEqual(self.po.get("More"), "More translation")

    def test_plural_lookups(self):
        self.assertEqual(
            self.po.get_n("One with var: %s", "Several with vars: %s", 1, "v"),
            "This one is the singular: v",
        )
        self.assertEqual(
            self.po.get_n("One with var: %s", "Several with vars: %s", 50, "v"),
            "This one is the plural: v",
        )
        self.assertEqual(
            self.po.get_n("Empty plural form singular", "Empty plural form", 1),
            "Singular translated",
        )
        self.assertEqual(
            self.po.get_n("Empty plural form singular", "Empty plural form", 2),
            "Empty plural form",
        )

    def test_context_lookups(self):
        self.assertEqual(
            self.po.get_c("Some random in a context", "Ctx"),
            "Some random translation in a context",
        )
        self.assertEqual(self.po.get("Some random in a context"), "Some random in a context")
        self.assertEqual(
            self.po.get_nc("One with var: %s", "Several with vars: %s", 3, "Ctx", "v"),
            "This one is the plural in a Ctx context: v",
        )

    def test_parse_bytes(self):
        po = Po()
        po.parse('msgid "Alcohol"\nmsgstr "الكحول"\n'.encode("utf-8"))
        self.assertEqual(po.get("Alcohol"), "الكحول")

    def test_multiline_header(self):
        po = Po()
        po.parse_file(CATEGORIES_PO)

        self.assertEqual(po.nplurals, 6)
        self.assertIsNotNone(po.expression)
        self.assertEqual(po.plural_form(116), 4)
        self.assertEqual(po.plural_form(102), 5)

    def test_missing_file_leaves_catalog_empty(self):
        with self.assertLogs("pogettext.po", level="WARNING"):
            self.po.parse_file(FIXTURES / "missing.po")

        self.assertEqual(len(self.po), 0)
        self.assertEqual(self.po.get("My text"), "My text")

    def test_marshal_text_round_trip(self):
        text = self.po.marshal_text()

        restored = Po()
        restored.parse(text)

        self.assertEqual(restored.headers, self.po.headers)
        self.assertEqual(restored.language, "en_US")
        self.assertEqual(restored.get_ctx_translations(), self.po.get_ctx_translations())

        expected = self.po.get_translations()
        actual = restored.get_translations()
        # Header entry text is rewritten in polib's header order
        del expected[HEADER_ID]
        del actual[HEADER_ID]
        self.assertEqual(actual, expected)

    def test_marshal_text_writes_file(self):
        fd, path = tempfile.mkstemp(suffix=".po")
        os.close(fd)
        try:
            self.po.set("New message", "Nuevo mensaje")
            self.po.set_c("Quoted \"text\"", "Menu", "Texto\nen dos líneas")
            Path(path).write_text(self.po.marshal_text(), encoding="utf-8")

            reloaded = Po()
            reloaded.parse_file(path)
            self.assertEqual(reloaded.get("New message"), "Nuevo mensaje")
            self.assertEqual(reloaded.get_c('Quoted "text"', "Menu"), "Texto\nen dos líneas")
        finally:
            os.unlink(path)


if __name__ == "__main__":
    unittest.main()
