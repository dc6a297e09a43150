"""
Translation context and package-level convenience functions.

A Translator owns one set of settings (library path, language, default
domain) and the Locale built from them. Domains are loaded the first
time they are used. Independent Translators can coexist; the module
functions below delegate to a process-wide default one.

Usage:
    from pogettext import translator

    translator.configure("/path/to/locales", "es_ES", "messages")
    print(translator.get("Translate this"))
    print(translator.get_n("One file", "%d files", 3, 3))
"""

from __future__ import annotations

import logging
import threading
from typing import Any

from pogettext.config import GettextConfig
from pogettext.detector import simplified_locale
from pogettext.locale import Locale

logger = logging.getLogger(__name__)


class Translator:
    """
    Explicit translation context.

    Thread Safety:
        An RLock guards the settings and the locale storage. Changing a
        setting rebuilds the storage; lookups on already loaded domains
        run on immutable catalog snapshots.
    """

    def __init__(self, config: GettextConfig | None = None):
        """
        Args:
            config: Settings to start from; defaults to GettextConfig.load()
        """
        config = config or GettextConfig.load()
        self._library = config.library
        self._language = config.language
        self._domain = config.domain
        self._storage: Locale | None = None
        self._lock = threading.RLock()

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    @property
    def library(self) -> str:
        return self._library

    @property
    def language(self) -> str:
        return self._language

    @property
    def domain(self) -> str:
        return self._domain

    def get_library(self) -> str:
        return self._library

    def set_library(self, library: str) -> None:
        """Set the locale root directory and reload the default domain."""
        with self._lock:
            self._library = library
            self._load_storage(force=True)

    def get_language(self) -> str:
        return self._language

    def set_language(self, language: str) -> None:
        """
        Set the language and reload the default domain.

        Raises:
            ValueError: If the language simplifies to an empty string
        """
        simplified = simplified_locale(language)
        if not simplified:
            raise ValueError(f"Invalid language: {language!r}")
        with self._lock:
            self._language = simplified
            self._load_storage(force=True)

    def get_domain(self) -> str:
        with self._lock:
            if self._storage is not None:
                return self._storage.get_domain() or self._domain
            return self._domain

    def set_domain(self, domain: str) -> None:
        """Set the default domain and load it."""
        with self._lock:
            self._domain = domain
            if self._storage is not None:
                self._storage.set_domain(domain)
            self._load_storage(force=True)

    def configure(self, library: str, language: str, domain: str) -> None:
        """
        Change all settings at once, loading the default domain a single time.

        Raises:
            ValueError: If the language simplifies to an empty string
        """
        simplified = simplified_locale(language)
        if not simplified:
            raise ValueError(f"Invalid language: {language!r}")
        with self._lock:
            self._library = library
            self._language = simplified
            self._domain = domain
            self._load_storage(force=True)

    def get_storage(self) -> Locale:
        """The Locale backing this context, created on first use."""
        with self._lock:
            return self._load_storage(force=False)

    def set_storage(self, storage: Locale) -> None:
        """
        Replace the backing Locale with one built manually.

        The library, language and default domain are taken from it. Any
        later call to a setter or configure() replaces it again.
        """
        with self._lock:
            self._storage = storage
            self._library = str(storage.path)
            self._language = storage.lang
            self._domain = storage.get_domain()

    def _load_storage(self, force: bool) -> Locale:
        # Caller holds self._lock
        storage = self._storage
        if storage is None or force:
            logger.debug(
                f"Loading locale storage: library={self._library}, "
                f"language={self._language}, domain={self._domain}"
            )
            storage = Locale(self._library, self._language)
            storage.set_domain(self._domain)
            self._storage = storage
        if force or not storage.has_domain(self._domain):
            storage.add_domain(self._domain)
        return storage

    def _storage_with(self, domain: str) -> Locale:
        with self._lock:
            storage = self._load_storage(force=False)
            if not storage.has_domain(domain):
                storage.add_domain(domain)
            return storage

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def get(self, msgid: str, *vars: Any) -> str:
        return self.get_d(self.get_domain(), msgid, *vars)

    def get_n(self, msgid: str, plural_msgid: str, n: int, *vars: Any) -> str:
        return self.get_nd(self.get_domain(), msgid, plural_msgid, n, *vars)

    def get_d(self, domain: str, msgid: str, *vars: Any) -> str:
        return self._storage_with(domain).get_d(domain, msgid, *vars)

    def get_nd(self, domain: str, msgid: str, plural_msgid: str, n: int, *vars: Any) -> str:
        return self._storage_with(domain).get_nd(domain, msgid, plural_msgid, n, *vars)

    def get_c(self, msgid: str, ctx: str, *vars: Any) -> str:
        return self.get_dc(self.get_domain(), msgid, ctx, *vars)

    def get_nc(self, msgid: str, plural_msgid: str, n: int, ctx: str, *vars: Any) -> str:
        return self.get_ndc(self.get_domain(), msgid, plural_msgid, n, ctx, *vars)

    def get_dc(self, domain: str, msgid: str, ctx: str, *vars: Any) -> str:
        return self._storage_with(domain).get_dc(domain, msgid, ctx, *vars)

    def get_ndc(
        self, domain: str, msgid: str, plural_msgid: str, n: int, ctx: str, *vars: Any
    ) -> str:
        return self._storage_with(domain).get_ndc(domain, msgid, plural_msgid, n, ctx, *vars)

    def is_translated(self, msgid: str) -> bool:
        return self.is_translated_d(self.get_domain(), msgid)

    def is_translated_n(self, msgid: str, n: int) -> bool:
        return self.is_translated_nd(self.get_domain(), msgid, n)

    def is_translated_d(self, domain: str, msgid: str) -> bool:
        return self._storage_with(domain).is_translated_d(domain, msgid)

    def is_translated_nd(self, domain: str, msgid: str, n: int) -> bool:
        return self._storage_with(domain).is_translated_nd(domain, msgid, n)

    def is_translated_c(self, msgid: str, ctx: str) -> bool:
        return self.is_translated_dc(self.get_domain(), msgid, ctx)

    def is_translated_nc(self, msgid: str, n: int, ctx: str) -> bool:
        return self.is_translated_ndc(self.get_domain(), msgid, n, ctx)

    def is_translated_dc(self, domain: str, msgid: str, ctx: str) -> bool:
        return self._storage_with(domain).is_translated_dc(domain, msgid, ctx)

    def is_translated_ndc(self, domain: str, msgid: str, n: int, ctx: str) -> bool:
        return self._storage_with(domain).is_translated_ndc(domain, msgid, n, ctx)


# Global translator instance
_translator: Translator | None = None
_translator_lock = threading.Lock()


def get_translator() -> Translator:
    """
    Get or create the global translator instance.

    Returns:
        The global Translator instance
    """
    global _translator
    with _translator_lock:
        if _translator is None:
            _translator = Translator(GettextConfig.load())
        return _translator


def reset_translator() -> None:
    """Reset the global translator (mainly for testing)."""
    global _translator
    with _translator_lock:
        _translator = None


def configure(library: str, language: str, domain: str) -> None:
    get_translator().configure(library, language, domain)


def get_library() -> str:
    return get_translator().get_library()


def set_library(library: str) -> None:
    get_translator().set_library(library)


def get_language() -> str:
    return get_translator().get_language()


def set_language(language: str) -> None:
    get_translator().set_language(language)


def get_domain() -> str:
    return get_translator().get_domain()


def set_domain(domain: str) -> None:
    get_translator().set_domain(domain)


def get_storage() -> Locale:
    return get_translator().get_storage()


def set_storage(storage: Locale) -> None:
    get_translator().set_storage(storage)


def get(msgid: str, *vars: Any) -> str:
    """
    Translate a message using the default domain.

    Examples:
        >>> get("Translate this")
        'Traduce esto'
    """
    return get_translator().get(msgid, *vars)


def get_n(msgid: str, plural_msgid: str, n: int, *vars: Any) -> str:
    return get_translator().get_n(msgid, plural_msgid, n, *vars)


def get_d(domain: str, msgid: str, *vars: Any) -> str:
    return get_translator().get_d(domain, msgid, *vars)


def get_nd(domain: str, msgid: str, plural_msgid: str, n: int, *vars: Any) -> str:
    return get_translator().get_nd(domain, msgid, plural_msgid, n, *vars)


def get_c(msgid: str, ctx: str, *vars: Any) -> str:
    return get_translator().get_c(msgid, ctx, *vars)


def get_nc(msgid: str, plural_msgid: str, n: int, ctx: str, *vars: Any) -> str:
    return get_translator().get_nc(msgid, plural_msgid, n, ctx, *vars)


def get_dc(domain: str, msgid: str, ctx: str, *vars: Any) -> str:
    return get_translator().get_dc(domain, msgid, ctx, *vars)


def get_ndc(domain: str, msgid: str, plural_msgid: str, n: int, ctx: str, *vars: Any) -> str:
    return get_translator().get_ndc(domain, msgid, plural_msgid, n, ctx, *vars)


def is_translated(msgid: str) -> bool:
    return get_translator().is_translated(msgid)


def is_translated_n(msgid: str, n: int) -> bool:
    return get_translator().is_translated_n(msgid, n)


def is_translated_c(msgid: str, ctx: str) -> bool:
    return get_translator().is_translated_c(msgid, ctx)


def is_translated_nc(msgid: str, n: int, ctx: str) -> bool:
    return get_translator().is_translated_nc(msgid, n, ctx)
