"""
PO (portable object) catalog parsing and writing.

Parsing is delegated to polib; this module maps polib entries onto
:class:`~pogettext.translation.Translation` pairs. A leading UTF-8 byte
order mark is dropped. A file that cannot be read or does not parse is
logged and leaves the catalog empty.

Usage:
    from pogettext.po import Po

    po = Po()
    po.parse_file("/path/to/locales/es/default.po")
    print(po.get("Translate this"))
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import polib

from pogettext.domain import HEADER_ID, Domain
from pogettext.translation import Translation

logger = logging.getLogger(__name__)

BOM = "\ufeff"


def catalog_entries(
    catalog: polib.POFile | polib.MOFile,
) -> Iterator[tuple[str | None, Translation]]:
    """
    Yield ``(context, translation)`` pairs for a parsed polib catalog.

    The metadata polib splits off is yielded first, rebuilt as the header
    entry. Obsolete entries are skipped.
    """
    if catalog.metadata:
        block = "".join(f"{key}: {value}\n" for key, value in catalog.metadata.items())
        yield None, Translation(HEADER_ID, forms={0: block})

    for entry in catalog:
        if entry.obsolete:
            continue
        if entry.msgid_plural:
            forms = {int(index): text for index, text in entry.msgstr_plural.items()}
        else:
            forms = {0: entry.msgstr}
        yield entry.msgctxt or None, Translation(entry.msgid, entry.msgid_plural or "", forms)


class Po(Domain):
    """
    Domain loaded from PO text.

    Safe for concurrent lookups while another thread reparses.
    """

    def parse(self, data: str | bytes) -> None:
        """
        Replace the catalog content with the messages in ``data``.

        Note:
            Text with a syntax error is logged and leaves the catalog empty.
        """
        if isinstance(data, bytes):
            text = data.decode("utf-8-sig", errors="replace")
        else:
            text = data.lstrip(BOM)

        try:
            catalog = polib.pofile(text)
        except OSError as e:
            logger.warning(f"Invalid PO data: {e}")
            self.clear()
            return
        self.load(catalog_entries(catalog))

    def parse_file(self, path: str | Path) -> None:
        """
        Parse a PO file.

        Note:
            A missing or unreadable file is logged and leaves the catalog empty.
        """
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            logger.warning(f"Could not read PO file {path}: {e}")
            self.clear()
            return
        self.parse(data)

    def marshal_text(self) -> str:
        """Render the catalog as PO text that :meth:`parse` reads back."""
        po = polib.POFile()
        po.metadata = self.headers
        for ctx, entry in self.iter_entries():
            if entry.id == HEADER_ID and not ctx:
                continue
            if entry.plural_id:
                po.append(
                    polib.POEntry(
                        msgctxt=ctx or None,
                        msgid=entry.id,
                        msgid_plural=entry.plural_id,
                        msgstr_plural=dict(entry.forms) or {0: ""},
                    )
                )
            else:
                po.append(
                    polib.POEntry(msgctxt=ctx or None, msgid=entry.id, msgstr=entry.forms.get(0, ""))
                )
        return str(po)
