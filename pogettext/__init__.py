"""
gettext-compatible internationalization runtime.

Provides:
- PO and MO catalog parsing
- Plural-form selection compiled from each catalog's Plural-Forms header
- Context (msgctxt) and multi-domain lookups
- printf-style positional and named parameter substitution

Usage:
    from pogettext import Locale

    locale = Locale("/path/to/locales", "es_ES")
    locale.add_domain("default")
    print(locale.get("Translate this"))
    print(locale.get_n("One file", "%d files", 3, 3))

    # Or through the package-level context
    from pogettext import configure, get

    configure("/path/to/locales", "es_ES", "default")
    print(get("Translate this"))
"""

from pogettext.config import GettextConfig
from pogettext.detector import detect_os_language, simplified_locale
from pogettext.domain import Domain
from pogettext.helpers import printf, sprintf
from pogettext.locale import Locale
from pogettext.mo import Mo
from pogettext.plurals import CompileError, Expression, compile_plural, germanic_plural
from pogettext.po import Po
from pogettext.translation import Translation
from pogettext.translator import (
    Translator,
    configure,
    get,
    get_c,
    get_d,
    get_dc,
    get_domain,
    get_language,
    get_library,
    get_n,
    get_nc,
    get_nd,
    get_ndc,
    get_storage,
    get_translator,
    is_translated,
    is_translated_c,
    is_translated_n,
    is_translated_nc,
    reset_translator,
    set_domain,
    set_language,
    set_library,
    set_storage,
)

__version__ = "0.3.0"

__all__ = [
    # Plural expressions
    "compile_plural",
    "germanic_plural",
    "Expression",
    "CompileError",
    # Catalogs
    "Translation",
    "Domain",
    "Po",
    "Mo",
    "Locale",
    # Context and package-level functions
    "Translator",
    "get_translator",
    "reset_translator",
    "configure",
    "get",
    "get_n",
    "get_d",
    "get_nd",
    "get_c",
    "get_nc",
    "get_dc",
    "get_ndc",
    "is_translated",
    "is_translated_n",
    "is_translated_c",
    "is_translated_nc",
    "get_domain",
    "set_domain",
    "get_language",
    "set_language",
    "get_library",
    "set_library",
    "get_storage",
    "set_storage",
    # Configuration
    "GettextConfig",
    # Helpers
    "printf",
    "sprintf",
    "simplified_locale",
    "detect_os_language",
]
