"""
MO (machine object) catalog parsing.

Reads the binary format produced by msgfmt, in either byte order, through
polib. Corrupt data is logged and leaves the catalog empty.
"""

from __future__ import annotations

import logging
import struct
from pathlib import Path

import polib

from pogettext.domain import Domain
from pogettext.po import catalog_entries

logger = logging.getLogger(__name__)


class Mo(Domain):
    """Domain loaded from a compiled MO catalog."""

    def parse(self, data: bytes) -> None:
        """
        Replace the catalog content with the messages in ``data``.

        Note:
            Invalid data is logged and leaves the catalog empty.
        """
        try:
            catalog = polib.mofile(data)
        except (OSError, ValueError, struct.error) as e:
            # polib raises OSError for a bad magic number or major revision,
            # struct.error for truncated tables
            logger.warning(f"Invalid MO data: {e}")
            self.clear()
            return
        self.load(catalog_entries(catalog))

    def parse_file(self, path: str | Path) -> None:
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            logger.warning(f"Could not read MO file {path}: {e}")
            self.clear()
            return
        self.parse(data)
