"""
Translation catalog for one gettext domain.

A Domain owns the entries of one PO or MO file, the parsed header block
and the compiled Plural-Forms expression. Lookups are lock-free: all
state lives in a snapshot that writers rebuild and publish in one
assignment, so readers see either the old or the new catalog, never a mix.

Concurrency Safety:
- Readers take a single reference to the current snapshot per call
- Writers serialize on a threading.Lock and publish a complete new snapshot
- Edits are copy-on-write; published snapshots are never mutated
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from typing import Any

import yaml

from pogettext.helpers import printf
from pogettext.plurals import CompileError, Expression, compile_plural, germanic_plural
from pogettext.translation import Translation

logger = logging.getLogger(__name__)

HEADER_ID = ""


class _Snapshot:
    """Immutable-by-convention view of a catalog's content."""

    __slots__ = (
        "translations",
        "contexts",
        "headers",
        "language",
        "plural_forms",
        "nplurals",
        "plural",
        "expression",
    )

    def __init__(
        self,
        translations: dict[str, Translation],
        contexts: dict[str, dict[str, Translation]],
    ):
        self.translations = translations
        self.contexts = contexts
        self.headers: dict[str, str] = {}
        self.language = ""
        self.plural_forms = ""
        self.nplurals = 0
        self.plural = ""
        self.expression: Expression | None = None

    def plural_form(self, n: int) -> int:
        if self.expression is None:
            return germanic_plural(n)
        return self.expression.evaluate(n)

    def lookup(self, msgid: str, ctx: str | None = None) -> Translation | None:
        if ctx:
            entries = self.contexts.get(ctx)
            if entries is None:
                return None
            return entries.get(msgid)
        return self.translations.get(msgid)


def parse_header_block(text: str) -> dict[str, str]:
    """
    Parse a gettext header block into a mapping.

    Keys keep their original spelling. Lines without a colon, or starting
    with whitespace, continue the previous header.
    """
    headers: dict[str, str] = {}
    last_key: str | None = None
    for raw_line in text.split("\n"):
        if not raw_line.strip():
            continue
        if ":" in raw_line and not raw_line[0].isspace():
            key, value = raw_line.split(":", 1)
            last_key = key.strip()
            headers[last_key] = value.strip()
        elif last_key is not None:
            headers[last_key] = f"{headers[last_key]} {raw_line.strip()}".strip()
    return headers


def _find_header(headers: dict[str, str], name: str) -> str:
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return ""


class Domain:
    """
    Catalog of translations for one domain.

    Example:
        domain = Domain()
        domain.load([(None, Translation("Apple", "Apples", {0: "Manzana", 1: "Manzanas"}))])
        domain.get_n("Apple", "Apples", 3)  # "Manzanas"
    """

    def __init__(self) -> None:
        self._write_lock = threading.Lock()
        self._snapshot = _Snapshot({}, {})

    # -------------------------------------------------------------------------
    # Header information
    # -------------------------------------------------------------------------

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._snapshot.headers)

    @property
    def language(self) -> str:
        return self._snapshot.language

    @property
    def plural_forms(self) -> str:
        """Raw Plural-Forms header value."""
        return self._snapshot.plural_forms

    @property
    def nplurals(self) -> int:
        return self._snapshot.nplurals

    @property
    def plural(self) -> str:
        """Raw plural expression text from the Plural-Forms header."""
        return self._snapshot.plural

    @property
    def expression(self) -> Expression | None:
        return self._snapshot.expression

    def header(self, name: str) -> str:
        """Get a header value by case-insensitive name ("" if absent)."""
        return _find_header(self._snapshot.headers, name)

    def plural_form(self, n: int) -> int:
        """Plural-form index for a count, using the Germanic rule as fallback."""
        return self._snapshot.plural_form(n)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load(self, entries: Iterable[tuple[str | None, Translation]]) -> None:
        """
        Replace the catalog content.

        Args:
            entries: ``(context, translation)`` pairs in file order. A falsy
                context stores the entry in the context-free map. Later
                entries with the same key replace earlier ones.

        The header block is read from the entry with an empty msgid.
        """
        translations: dict[str, Translation] = {}
        contexts: dict[str, dict[str, Translation]] = {}
        for ctx, entry in entries:
            if ctx:
                contexts.setdefault(ctx, {})[entry.id] = entry
            else:
                translations[entry.id] = entry

        snapshot = _Snapshot(translations, contexts)
        self._parse_headers(snapshot)
        self._publish(snapshot)

    def clear(self) -> None:
        self._publish(_Snapshot({}, {}))

    def _publish(self, snapshot: _Snapshot) -> None:
        with self._write_lock:
            self._snapshot = snapshot

    @staticmethod
    def _parse_headers(snapshot: _Snapshot) -> None:
        header_entry = snapshot.translations.get(HEADER_ID)
        if header_entry is None:
            return

        snapshot.headers = parse_header_block(header_entry.get())
        snapshot.language = _find_header(snapshot.headers, "Language")
        snapshot.plural_forms = _find_header(snapshot.headers, "Plural-Forms")
        if not snapshot.plural_forms:
            return

        for part in snapshot.plural_forms.split(";"):
            if "=" not in part:
                continue
            key, value = part.split("=", 1)
            key = key.strip()
            if key == "nplurals":
                try:
                    snapshot.nplurals = int(value.strip())
                except ValueError:
                    snapshot.nplurals = 0
            elif key == "plural":
                snapshot.plural = value
                try:
                    snapshot.expression = compile_plural(value)
                except CompileError as e:
                    logger.debug(f"Invalid plural expression {value!r}, using fallback: {e}")

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def get(self, msgid: str, *vars: Any) -> str:
        """Translation of ``msgid``, or ``msgid`` itself when untranslated."""
        entry = self._snapshot.translations.get(msgid)
        if entry is not None:
            return printf(entry.get(), *vars)
        return printf(msgid, *vars)

    def get_n(self, msgid: str, plural_msgid: str, n: int, *vars: Any) -> str:
        """Plural-aware translation selected by the catalog's plural rule."""
        return self._get_n(self._snapshot, msgid, plural_msgid, n, None, vars)

    def get_c(self, msgid: str, ctx: str, *vars: Any) -> str:
        """Translation of ``msgid`` within a context."""
        entry = self._snapshot.lookup(msgid, ctx)
        if entry is not None:
            return printf(entry.get(), *vars)
        return printf(msgid, *vars)

    def get_nc(self, msgid: str, plural_msgid: str, n: int, ctx: str, *vars: Any) -> str:
        """Plural-aware translation within a context."""
        return self._get_n(self._snapshot, msgid, plural_msgid, n, ctx, vars)

    @staticmethod
    def _get_n(
        snapshot: _Snapshot,
        msgid: str,
        plural_msgid: str,
        n: int,
        ctx: str | None,
        vars: tuple[Any, ...],
    ) -> str:
        index = snapshot.plural_form(n)
        entry = snapshot.lookup(msgid, ctx)
        if entry is not None:
            return printf(entry.get_n(index), *vars)
        # Untranslated input follows the same rule as translated entries
        if index == 0:
            return printf(msgid, *vars)
        return printf(plural_msgid, *vars)

    def is_translated(self, msgid: str) -> bool:
        """Whether :meth:`get` returns a translation, that is slot 0 is non-empty."""
        entry = self._snapshot.lookup(msgid)
        return entry is not None and entry.is_translated()

    def is_translated_n(self, msgid: str, n: int) -> bool:
        snapshot = self._snapshot
        entry = snapshot.lookup(msgid)
        return entry is not None and entry.is_translated_n(snapshot.plural_form(n))

    def is_translated_c(self, msgid: str, ctx: str) -> bool:
        entry = self._snapshot.lookup(msgid, ctx)
        return entry is not None and entry.is_translated()

    def is_translated_nc(self, msgid: str, n: int, ctx: str) -> bool:
        snapshot = self._snapshot
        entry = snapshot.lookup(msgid, ctx)
        return entry is not None and entry.is_translated_n(snapshot.plural_form(n))

    def get_translations(self) -> dict[str, Translation]:
        """Copy of the context-free entries keyed by msgid."""
        return {msgid: entry.copy() for msgid, entry in self._snapshot.translations.items()}

    def get_ctx_translations(self) -> dict[str, dict[str, Translation]]:
        """Copy of the context entries keyed by context, then msgid."""
        return {
            ctx: {msgid: entry.copy() for msgid, entry in entries.items()}
            for ctx, entries in self._snapshot.contexts.items()
        }

    # -------------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------------

    def set(self, msgid: str, text: str) -> None:
        """Set the singular translation of ``msgid``."""
        self._edit(msgid, "", None, None, text)

    def set_n(self, msgid: str, plural_msgid: str, n: int, text: str) -> None:
        """Set the translation used for count ``n``."""
        self._edit(msgid, plural_msgid, n, None, text)

    def set_c(self, msgid: str, ctx: str, text: str) -> None:
        self._edit(msgid, "", None, ctx, text)

    def set_nc(self, msgid: str, plural_msgid: str, ctx: str, n: int, text: str) -> None:
        self._edit(msgid, plural_msgid, n, ctx, text)

    def _edit(
        self,
        msgid: str,
        plural_msgid: str,
        n: int | None,
        ctx: str | None,
        text: str,
    ) -> None:
        with self._write_lock:
            current = self._snapshot
            translations = dict(current.translations)
            contexts = dict(current.contexts)
            if ctx:
                scope = dict(contexts.get(ctx, {}))
                contexts[ctx] = scope
            else:
                scope = translations

            existing = scope.get(msgid)
            entry = existing.copy() if existing is not None else Translation(msgid)
            if plural_msgid and not entry.plural_id:
                entry.plural_id = plural_msgid
            index = 0 if n is None else current.plural_form(n)
            entry.set_n(index, text)
            scope[msgid] = entry

            snapshot = _Snapshot(translations, contexts)
            if msgid == HEADER_ID and not ctx:
                self._parse_headers(snapshot)
            else:
                self._copy_headers(current, snapshot)
            self._snapshot = snapshot

    @staticmethod
    def _copy_headers(source: _Snapshot, target: _Snapshot) -> None:
        target.headers = source.headers
        target.language = source.language
        target.plural_forms = source.plural_forms
        target.nplurals = source.nplurals
        target.plural = source.plural
        target.expression = source.expression

    def drop_stale_translations(self) -> None:
        """
        Remove entries that were not edited since the catalog was loaded.

        The header entry is always kept.
        """
        with self._write_lock:
            current = self._snapshot
            translations = {
                msgid: entry
                for msgid, entry in current.translations.items()
                if entry.dirty or msgid == HEADER_ID
            }
            contexts = {}
            for ctx, entries in current.contexts.items():
                kept = {msgid: entry for msgid, entry in entries.items() if entry.dirty}
                if kept:
                    contexts[ctx] = kept

            snapshot = _Snapshot(translations, contexts)
            self._copy_headers(current, snapshot)
            self._snapshot = snapshot

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def iter_entries(self) -> list[tuple[str | None, Translation]]:
        """All entries as ``(context, translation)`` pairs, header first."""
        snapshot = self._snapshot
        entries: list[tuple[str | None, Translation]] = []
        header = snapshot.translations.get(HEADER_ID)
        if header is not None:
            entries.append((None, header))
        for msgid in sorted(snapshot.translations):
            if msgid != HEADER_ID:
                entries.append((None, snapshot.translations[msgid]))
        for ctx in sorted(snapshot.contexts):
            entries_in_ctx = snapshot.contexts[ctx]
            for msgid in sorted(entries_in_ctx):
                entries.append((ctx, entries_in_ctx[msgid]))
        return entries

    def to_dict(self) -> dict[str, Any]:
        snapshot = self._snapshot
        contexts: dict[str, list[dict[str, Any]]] = {}
        translations: list[dict[str, Any]] = []
        for ctx, entry in self.iter_entries():
            if ctx:
                contexts.setdefault(ctx, []).append(entry.to_dict())
            else:
                translations.append(entry.to_dict())
        return {
            "language": snapshot.language,
            "plural_forms": snapshot.plural_forms,
            "translations": translations,
            "contexts": contexts,
        }

    def load_dict(self, data: dict[str, Any]) -> None:
        """Replace the catalog content from :meth:`to_dict` output."""
        entries: list[tuple[str | None, Translation]] = []
        for item in data.get("translations") or []:
            entries.append((None, Translation.from_dict(item)))
        for ctx, items in (data.get("contexts") or {}).items():
            for item in items or []:
                entries.append((str(ctx), Translation.from_dict(item)))
        self.load(entries)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Domain:
        domain = cls()
        domain.load_dict(data)
        return domain

    def marshal(self) -> str:
        """Serialize the catalog to YAML text."""
        return yaml.safe_dump(self.to_dict(), allow_unicode=True, sort_keys=False)

    def unmarshal(self, text: str) -> None:
        """
        Replace the catalog content from :meth:`marshal` output.

        Raises:
            ValueError: If the text is not a serialized catalog
        """
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(f"Malformed catalog data: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(
                f"Catalog data has invalid type: {type(data).__name__}, expected dict"
            )
        self.load_dict(data)

    def __len__(self) -> int:
        snapshot = self._snapshot
        return len(snapshot.translations) + sum(len(e) for e in snapshot.contexts.values())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(language={self.language!r}, entries={len(self)})"
