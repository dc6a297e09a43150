"""
Locale wraps the translation domains for a single language.

Example:
    from pogettext.locale import Locale

    # Create Locale with library path and language code
    locale = Locale("/path/to/i18n/dir", "en_US")

    # Load domain '/path/to/i18n/dir/en_US/LC_MESSAGES/default.po'
    locale.add_domain("default")
    print(locale.get("Translate this"))

    # Load and use a different domain
    locale.add_domain("extras")
    print(locale.get_d("extras", "Translate this"))
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

import yaml

from pogettext.detector import primary_language
from pogettext.domain import Domain
from pogettext.helpers import printf
from pogettext.mo import Mo
from pogettext.plurals import germanic_plural
from pogettext.po import Po
from pogettext.translation import Translation

logger = logging.getLogger(__name__)

DEFAULT_DOMAIN = "default"

CATALOG_EXTENSIONS = (".po", ".mo")


class Locale:
    """
    All translation domains of one language.

    Thread Safety:
        A lock guards the domain registry. Lookups on a registered domain
        are lock-free, see :class:`pogettext.domain.Domain`.
    """

    def __init__(self, path: str | Path, lang: str):
        """
        Args:
            path: Library directory holding one sub-directory per language
            lang: Language code, e.g. 'en_US' or 'es'
        """
        self.path = Path(path)
        self.lang = lang
        self._default_domain = DEFAULT_DOMAIN
        self._domains: dict[str, Domain] = {}
        self._lock = threading.RLock()

    # -------------------------------------------------------------------------
    # Domain registry
    # -------------------------------------------------------------------------

    def find_catalog(self, name: str) -> Path | None:
        """
        Locate the catalog file for a domain.

        Tries the full language code first, then the two-letter primary
        subtag, each with and without an LC_MESSAGES directory.
        """
        languages = [self.lang]
        primary = primary_language(self.lang)
        if primary and primary != self.lang:
            languages.append(primary)

        for lang in languages:
            for directory in (self.path / lang / "LC_MESSAGES", self.path / lang):
                for extension in CATALOG_EXTENSIONS:
                    candidate = directory / f"{name}{extension}"
                    if candidate.is_file():
                        return candidate
        return None

    def add_domain(self, name: str) -> Domain:
        """
        Load (or reload) a domain from the library path.

        A domain without a catalog file is registered empty, so its
        lookups return the untranslated input.
        """
        catalog_path = self.find_catalog(name)
        domain: Domain
        if catalog_path is None:
            logger.debug(f"No catalog for domain '{name}' in {self.path} ({self.lang})")
            domain = Po()
        elif catalog_path.suffix == ".mo":
            domain = Mo()
            domain.parse_file(catalog_path)
        else:
            domain = Po()
            domain.parse_file(catalog_path)

        self.add_translator(name, domain)
        return domain

    def add_translator(self, name: str, domain: Domain) -> None:
        """Register an already loaded catalog under a domain name."""
        with self._lock:
            self._domains[name] = domain

    def has_domain(self, name: str) -> bool:
        with self._lock:
            return name in self._domains

    def get_catalog(self, name: str) -> Domain | None:
        with self._lock:
            return self._domains.get(name)

    @property
    def domains(self) -> dict[str, Domain]:
        with self._lock:
            return dict(self._domains)

    def get_domain(self) -> str:
        with self._lock:
            return self._default_domain

    def set_domain(self, name: str) -> None:
        with self._lock:
            self._default_domain = name

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def get(self, msgid: str, *vars: Any) -> str:
        return self.get_d(self.get_domain(), msgid, *vars)

    def get_n(self, msgid: str, plural_msgid: str, n: int, *vars: Any) -> str:
        return self.get_nd(self.get_domain(), msgid, plural_msgid, n, *vars)

    def get_d(self, domain: str, msgid: str, *vars: Any) -> str:
        catalog = self.get_catalog(domain)
        if catalog is not None:
            return catalog.get(msgid, *vars)
        return printf(msgid, *vars)

    def get_nd(self, domain: str, msgid: str, plural_msgid: str, n: int, *vars: Any) -> str:
        catalog = self.get_catalog(domain)
        if catalog is not None:
            return catalog.get_n(msgid, plural_msgid, n, *vars)
        return printf(msgid if germanic_plural(n) == 0 else plural_msgid, *vars)

    def get_c(self, msgid: str, ctx: str, *vars: Any) -> str:
        return self.get_dc(self.get_domain(), msgid, ctx, *vars)

    def get_nc(self, msgid: str, plural_msgid: str, n: int, ctx: str, *vars: Any) -> str:
        return self.get_ndc(self.get_domain(), msgid, plural_msgid, n, ctx, *vars)

    def get_dc(self, domain: str, msgid: str, ctx: str, *vars: Any) -> str:
        catalog = self.get_catalog(domain)
        if catalog is not None:
            return catalog.get_c(msgid, ctx, *vars)
        return printf(msgid, *vars)

    def get_ndc(
        self, domain: str, msgid: str, plural_msgid: str, n: int, ctx: str, *vars: Any
    ) -> str:
        catalog = self.get_catalog(domain)
        if catalog is not None:
            return catalog.get_nc(msgid, plural_msgid, n, ctx, *vars)
        return printf(msgid if germanic_plural(n) == 0 else plural_msgid, *vars)

    def is_translated(self, msgid: str) -> bool:
        return self.is_translated_d(self.get_domain(), msgid)

    def is_translated_n(self, msgid: str, n: int) -> bool:
        return self.is_translated_nd(self.get_domain(), msgid, n)

    def is_translated_d(self, domain: str, msgid: str) -> bool:
        catalog = self.get_catalog(domain)
        return catalog is not None and catalog.is_translated(msgid)

    def is_translated_nd(self, domain: str, msgid: str, n: int) -> bool:
        catalog = self.get_catalog(domain)
        return catalog is not None and catalog.is_translated_n(msgid, n)

    def is_translated_c(self, msgid: str, ctx: str) -> bool:
        return self.is_translated_dc(self.get_domain(), msgid, ctx)

    def is_translated_nc(self, msgid: str, n: int, ctx: str) -> bool:
        return self.is_translated_ndc(self.get_domain(), msgid, n, ctx)

    def is_translated_dc(self, domain: str, msgid: str, ctx: str) -> bool:
        catalog = self.get_catalog(domain)
        return catalog is not None and catalog.is_translated_c(msgid, ctx)

    def is_translated_ndc(self, domain: str, msgid: str, n: int, ctx: str) -> bool:
        catalog = self.get_catalog(domain)
        return catalog is not None and catalog.is_translated_nc(msgid, n, ctx)

    def get_translations(self) -> dict[str, Translation]:
        """All context-free entries of the default domain."""
        catalog = self.get_catalog(self.get_domain())
        if catalog is None:
            return {}
        return catalog.get_translations()

    # gettext-style aliases

    def gettext(self, msgid: str) -> str:
        return self.get(msgid)

    def dgettext(self, domain: str, msgid: str) -> str:
        return self.get_d(domain, msgid)

    def ngettext(self, msgid: str, msgid_plural: str, count: int) -> str:
        return self.get_n(msgid, msgid_plural, count)

    def dngettext(self, domain: str, msgid: str, msgid_plural: str, count: int) -> str:
        return self.get_nd(domain, msgid, msgid_plural, count)

    def pgettext(self, msgctxt: str, msgid: str) -> str:
        return self.get_c(msgid, msgctxt)

    def dpgettext(self, domain: str, msgctxt: str, msgid: str) -> str:
        return self.get_dc(domain, msgid, msgctxt)

    def npgettext(self, msgctxt: str, msgid: str, msgid_plural: str, count: int) -> str:
        return self.get_nc(msgid, msgid_plural, count, msgctxt)

    def dnpgettext(
        self, domain: str, msgctxt: str, msgid: str, msgid_plural: str, count: int
    ) -> str:
        return self.get_ndc(domain, msgid, msgid_plural, count, msgctxt)

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "lang": self.lang,
            "default_domain": self.get_domain(),
            "domains": {name: catalog.to_dict() for name, catalog in self.domains.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Locale:
        locale = cls(data.get("path", ""), data.get("lang", ""))
        locale.set_domain(data.get("default_domain") or DEFAULT_DOMAIN)
        for name, catalog_data in (data.get("domains") or {}).items():
            locale.add_translator(name, Po.from_dict(catalog_data or {}))
        return locale

    def marshal(self) -> str:
        """Serialize the locale and all of its domains to YAML text."""
        return yaml.safe_dump(self.to_dict(), allow_unicode=True, sort_keys=False)

    @classmethod
    def unmarshal(cls, text: str) -> Locale:
        """
        Rebuild a locale from :meth:`marshal` output.

        Raises:
            ValueError: If the text is not a serialized locale
        """
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(f"Malformed locale data: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Locale data has invalid type: {type(data).__name__}, expected dict")
        return cls.from_dict(data)

    def __repr__(self) -> str:
        return f"Locale(path={str(self.path)!r}, lang={self.lang!r})"
