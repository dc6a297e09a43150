"""
Tests for Locale domain routing.
"""

import shutil
import tempfile
import threading
import unittest
from pathlib import Path

from pogettext.locale import Locale
from pogettext.po import Po

FIXTURES = Path(__file__).parent / "fixtures"


class TestCatalogLookup(unittest.TestCase):
    """Tests for locating catalog files."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.root = Path(self.temp_dir)

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def write(self, relative, content='msgid "A"\nmsgstr "B"\n'):
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def test_lc_messages_directory(self):
        path = self.write("es_ES/LC_MESSAGES/default.po")
        self.assertEqual(Locale(self.root, "es_ES").find_catalog("default"), path)

    def test_language_directory(self):
        path = self.write("es_ES/default.po")
        self.assertEqual(Locale(self.root, "es_ES").find_catalog("default"), path)

    def test_lc_messages_preferred(self):
        self.write("es_ES/default.po")
        path = self.write("es_ES/LC_MESSAGES/default.po")
        self.assertEqual(Locale(self.root, "es_ES").find_catalog("default"), path)

    def test_primary_subtag_fallback(self):
        path = self.write("es/LC_MESSAGES/default.po")
        self.assertEqual(Locale(self.root, "es_AR").find_catalog("default"), path)

    def test_full_code_preferred_over_primary(self):
        self.write("pt/default.po")
        path = self.write("pt_BR/default.po")
        self.assertEqual(Locale(self.root, "pt_BR").find_catalog("default"), path)

    def test_po_preferred_over_mo(self):
        self.write("de/default.mo", "")
        path = self.write("de/default.po")
        self.assertEqual(Locale(self.root, "de").find_catalog("default"), path)

    def test_missing_catalog(self):
        self.assertIsNone(Locale(self.root, "fr").find_catalog("default"))


class TestLocale(unittest.TestCase):
    """Tests for Locale lookups against the fixture catalogs."""

    def setUp(self):
        self.locale = Locale(FIXTURES, "en_US")
        self.locale.add_domain("default")

    def test_get(self):
        self.assertEqual(self.locale.get("My text"), "Translated text")
        self.assertEqual(self.locale.get("Another string"), "Another string")
        self.assertEqual(self.locale.get("language"), "en_US")

    def test_get_with_vars(self):
        self.assertEqual(
            self.locale.get("One with var: %s", "Variable"),
            "This one is the singular: Variable",
        )

    def test_get_n(self):
        self.assertEqual(
            self.locale.get_n("One with var: %s", "Several with vars: %s", 50, "Variable"),
            "This one is the plural: Variable",
        )
        self.assertEqual(
            self.locale.get_n("One with var: %s", "Several with vars: %s", 1, "Variable"),
            "This one is the singular: Variable",
        )

    def test_get_c(self):
        self.assertEqual(
            self.locale.get_c("Some random in a context", "Ctx"),
            "Some random translation in a context",
        )

    def test_get_nc(self):
        self.assertEqual(
            self.locale.get_nc("One with var: %s", "Several with vars: %s", 17, "Ctx", "Test"),
            "This one is the plural in a Ctx context: Test",
        )

    def test_get_d(self):
        self.assertEqual(self.locale.get_d("default", "My text"), "Translated text")
        self.assertEqual(
            self.locale.get_dc("default", "Some random in a context", "Ctx"),
            "Some random translation in a context",
        )

    def test_unknown_domain_returns_input(self):
        self.assertEqual(self.locale.get_d("missing", "My text"), "My text")
        self.assertEqual(self.locale.get_nd("missing", "One", "Many", 1), "One")
        self.assertEqual(self.locale.get_nd("missing", "One", "Many", 0), "Many")
        self.assertEqual(self.locale.get_ndc("missing", "One", "Many", 3, "Ctx"), "Many")
        self.assertEqual(self.locale.get_dc("missing", "One %s", "Ctx", "x"), "One x")
        self.assertFalse(self.locale.is_translated_d("missing", "My text"))

    def test_missing_catalog_registers_empty_domain(self):
        catalog = self.locale.add_domain("nonexistent")

        self.assertTrue(self.locale.has_domain("nonexistent"))
        self.assertEqual(len(catalog), 0)
        self.assertEqual(self.locale.get_d("nonexistent", "My text"), "My text")

    def test_is_translated(self):
        self.assertTrue(self.locale.is_translated("My text"))
        self.assertFalse(self.locale.is_translated("Another string"))
        self.assertTrue(self.locale.is_translated_n("One with var: %s", 5))
        self.assertFalse(self.locale.is_translated_n("Empty plural form singular", 5))
        self.assertTrue(self.locale.is_translated_c("Some random in a context", "Ctx"))
        self.assertFalse(self.locale.is_translated_c("Some random in a context", "Other"))
        self.assertTrue(self.locale.is_translated_nc("One with var: %s", 1, "Ctx"))
        self.assertTrue(self.locale.is_translated_dc("default", "Some random in a context", "Ctx"))

    def test_gettext_aliases(self):
        self.assertEqual(self.locale.gettext("My text"), "Translated text")
        self.assertEqual(self.locale.dgettext("default", "More"), "More translation")
        self.assertEqual(
            self.locale.ngettext("One with var: %s", "Several with vars: %s", 2),
            "This one is the plural: %s",
        )
        self.assertEqual(
            self.locale.dngettext("default", "One with var: %s", "Several with vars: %s", 1),
            "This one is the singular: %s",
        )
        self.assertEqual(
            self.locale.pgettext("Ctx", "Some random in a context"),
            "Some random translation in a context",
        )
        self.assertEqual(
            self.locale.dpgettext("default", "Ctx", "Some random in a context"),
            "Some random translation in a context",
        )
        self.assertEqual(
            self.locale.npgettext("Ctx", "One with var: %s", "Several with vars: %s", 2),
            "This one is the plural in a Ctx context: %s",
        )
        self.assertEqual(
            self.locale.dnpgettext("default", "Ctx", "One with var: %s", "Several with vars: %s", 1),
            "This one is the singular in a Ctx context: %s",
        )

    def test_set_domain(self):
        po = Po()
        po.parse('msgid "My text"\nmsgstr "Other domain text"\n')
        self.locale.add_translator("other", po)

        self.locale.set_domain("other")
        self.assertEqual(self.locale.get_domain(), "other")
        self.assertEqual(self.locale.get("My text"), "Other domain text")
        self.assertEqual(self.locale.get_d("default", "My text"), "Translated text")

    def test_set_domain_while_reading(self):
        """Test lookups see one default domain or the other while it changes."""
        po = Po()
        po.parse('msgid "My text"\nmsgstr "Other domain text"\n')
        self.locale.add_translator("other", po)
        stop = threading.Event()
        unexpected = []

        def reader():
            while not stop.is_set():
                text = self.locale.get("My text")
                if text not in ("Translated text", "Other domain text"):
                    unexpected.append(text)

        threads = [threading.Thread(target=reader) for _ in range(4)]
        for thread in threads:
            thread.start()
        for i in range(500):
            self.locale.set_domain("other" if i % 2 else "default")
        stop.set()
        for thread in threads:
            thread.join()

        self.assertEqual(unexpected, [])
        self.assertEqual(self.locale.get_domain(), "other")

    def test_add_translator_replaces_domain(self):
        po = Po()
        po.parse('msgid "My text"\nmsgstr "Replaced"\n')
        self.locale.add_translator("default", po)

        self.assertIs(self.locale.get_catalog("default"), po)
        self.assertEqual(self.locale.get("My text"), "Replaced")

    def test_get_translations(self):
        translations = self.locale.get_translations()
        self.assertEqual(translations["My text"].get(), "Translated text")
        self.assertNotIn("Some random in a context", translations)

    def test_domains(self):
        self.assertEqual(list(self.locale.domains), ["default"])

    def test_marshal_round_trip(self):
        restored = Locale.unmarshal(self.locale.marshal())

        self.assertEqual(restored.path, self.locale.path)
        self.assertEqual(restored.lang, "en_US")
        self.assertEqual(restored.get_domain(), "default")
        self.assertEqual(restored.get("My text"), "Translated text")
        self.assertEqual(
            restored.get_nc("One with var: %s", "Several with vars: %s", 17, "Ctx", "Test"),
            "This one is the plural in a Ctx context: Test",
        )
        self.assertEqual(
            restored.get_catalog("default").get_translations(),
            self.locale.get_catalog("default").get_translations(),
        )

    def test_unmarshal_rejects_invalid_data(self):
        with self.assertRaises(ValueError):
            Locale.unmarshal("just a string")


class TestArabicLocale(unittest.TestCase):
    """Tests for a six-form language."""

    def setUp(self):
        self.locale = Locale(FIXTURES, "ar")
        self.locale.add_domain("categories")

    def test_simple_translation(self):
        self.assertEqual(self.locale.get_d("categories", "Alcohol & Tobacco"), "الكحول والتبغ")
        self.assertTrue(self.locale.is_translated_d("categories", "Alcohol & Tobacco"))

    def test_default_domain_lookups_agree(self):
        self.locale.set_domain("categories")
        self.assertEqual(self.locale.get("Alcohol & Tobacco"), "الكحول والتبغ")
        self.assertTrue(self.locale.is_translated("Alcohol & Tobacco"))
        self.assertFalse(self.locale.is_translated("%d selected"))

    def test_empty_plural_forms_fall_back(self):
        self.assertEqual(
            self.locale.get_nd("categories", "%d selected", "%d selected", 10),
            "%d selected",
        )

    def test_each_plural_form(self):
        expected = {
            0: "حمّل %d مستندات إضافيّة",
            1: "حمّل مستند واحد إضافي",
            2: "حمّل مستندين إضافيين",
            6: "حمّل %d مستندات إضافيّة",
            116: "حمّل %d مستندا إضافيّا",
            102: "حمّل %d مستند إضافي",
        }
        for n, text in expected.items():
            with self.subTest(n=n):
                self.assertEqual(
                    self.locale.get_nd(
                        "categories", "Load %d more document", "Load %d more documents", n
                    ),
                    text,
                )

    def test_regional_code_uses_primary_language(self):
        locale = Locale(FIXTURES, "ar_EG")
        locale.add_domain("categories")
        self.assertEqual(locale.get_d("categories", "Alcohol & Tobacco"), "الكحول والتبغ")

    def test_missing_plural_header(self):
        self.locale.add_domain("no_plural_header")

        self.assertEqual(self.locale.get_d("no_plural_header", "Alcohol & Tobacco"), "الكحول والتبغ")
        self.assertEqual(
            self.locale.get_nd("no_plural_header", "%d selected", "%d selected", 1, 1),
            "1 محدد",
        )
        self.assertEqual(
            self.locale.get_nd("no_plural_header", "%d selected", "%d selected", 5, 5),
            "5 selected",
        )


if __name__ == "__main__":
    unittest.main()
