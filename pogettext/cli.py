"""
Command line interface for inspecting catalogs and plural expressions.

Commands:
    pogettext plural "n%10==1 && n%100!=11 ? 0 : n != 0 ? 1 : 2" --max 25
    pogettext show locales/es/default.po --untranslated
    pogettext get locales/es/default.po "One file" --plural "%d files" -n 3
    pogettext locale
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.markup import escape

from pogettext import __version__
from pogettext.config import GettextConfig, debug_enabled
from pogettext.detector import get_os_locale_info
from pogettext.mo import Mo
from pogettext.plurals import CompileError, compile_plural, germanic_plural
from pogettext.po import Po
from pogettext.ui import console, error, info, message_table, success, summary_box, warning

logger = logging.getLogger(__name__)


def load_catalog(path: Path) -> Po | Mo:
    """
    Parse a PO or MO file, chosen by extension.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    if not path.is_file():
        raise FileNotFoundError(f"Catalog not found: {path}")
    catalog: Po | Mo = Mo() if path.suffix == ".mo" else Po()
    catalog.parse_file(path)
    return catalog


class GettextCLI:
    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def plural(self, expression: str, maximum: int) -> int:
        """Show the plural-form index chosen for each n in [0, maximum]."""
        try:
            compiled = compile_plural(expression)
        except CompileError as e:
            error(f"Invalid plural expression: {escape(str(e))}")
            warning("Catalogs with this header use the fallback rule: n == 1 ? 0 : 1")
            return 1

        success(f"Compiled: {escape(str(compiled))}")

        rows: list[list[object]] = []
        for n in range(maximum + 1):
            rows.append([n, compiled.evaluate(n), germanic_plural(n)])

        message_table(
            [
                ("n", "cyan", "right"),
                ("Form", "bold white", "center"),
                ("Fallback", "dim", "center"),
            ],
            rows,
            title="Plural forms",
        )
        return 0

    def show(self, path: Path, untranslated_only: bool = False) -> int:
        """Show headers and entries of a catalog."""
        catalog = load_catalog(path)

        entries = [(ctx, entry) for ctx, entry in catalog.iter_entries() if entry.id]
        translated = sum(1 for _, entry in entries if any(entry.forms.values()))

        summary_box(
            "CATALOG",
            {
                "File": str(path),
                "Language": catalog.language or "-",
                "Plural-Forms": catalog.plural_forms or "-",
                "Plural rule": str(catalog.expression) if catalog.expression else "fallback",
                "Entries": str(len(entries)),
                "Translated": str(translated),
            },
        )

        rows: list[list[object]] = []
        for ctx, entry in entries:
            is_translated = any(entry.forms.values())
            if untranslated_only and is_translated:
                continue
            forms = " | ".join(entry.forms[i] for i in sorted(entry.forms) if entry.forms[i])
            rows.append([ctx or "", entry.id, entry.plural_id, forms or "-"])

        if not rows:
            info("No entries to show.")
            return 0

        message_table(
            [
                ("Context", "magenta", "left"),
                ("Msgid", "cyan", "left"),
                ("Plural", "dim", "left"),
                ("Translation", "white", "left"),
            ],
            rows,
        )
        return 0

    def get(
        self,
        path: Path,
        msgid: str,
        plural: str | None,
        count: int | None,
        context: str | None,
    ) -> int:
        """Print the translation of a single message."""
        catalog = load_catalog(path)

        if plural is not None or count is not None:
            n = 1 if count is None else count
            plural_msgid = plural if plural is not None else msgid
            if context:
                result = catalog.get_nc(msgid, plural_msgid, n, context)
                translated = catalog.is_translated_nc(msgid, n, context)
            else:
                result = catalog.get_n(msgid, plural_msgid, n)
                translated = catalog.is_translated_n(msgid, n)
        elif context:
            result = catalog.get_c(msgid, context)
            translated = catalog.is_translated_c(msgid, context)
        else:
            result = catalog.get(msgid)
            translated = catalog.is_translated(msgid)

        info(result)
        if not translated and self.verbose:
            warning("Message is not translated; showing the fallback text")
        return 0

    def locale(self) -> int:
        """Show detected locale settings and the effective configuration."""
        config = GettextConfig.load()
        items = {key: value or "-" for key, value in get_os_locale_info().items()}
        items.update(
            {
                "Library": config.library,
                "Language": config.language,
                "Domain": config.domain,
            }
        )
        summary_box("LOCALE", items)
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pogettext",
        description="Inspect gettext catalogs and plural expressions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", "-V", action="version", version=f"pogettext {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show detailed output")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    plural_parser = subparsers.add_parser("plural", help="Evaluate a Plural-Forms expression")
    plural_parser.add_argument("expression", help="Expression after 'plural=' in the header")
    plural_parser.add_argument("--max", type=int, default=20, help="Largest n to show")

    show_parser = subparsers.add_parser("show", help="Show a PO or MO catalog")
    show_parser.add_argument("file", type=Path)
    show_parser.add_argument("--untranslated", "-u", action="store_true")

    get_parser = subparsers.add_parser("get", help="Translate one message")
    get_parser.add_argument("file", type=Path)
    get_parser.add_argument("msgid")
    get_parser.add_argument("--plural", "-p")
    get_parser.add_argument("-n", "--count", type=int)
    get_parser.add_argument("--context", "-c")

    subparsers.add_parser("locale", help="Show locale detection and configuration")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose or debug_enabled():
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if not args.command:
        parser.print_help()
        return 0

    cli = GettextCLI(verbose=args.verbose)
    logger.debug(f"Running command: {args.command}")

    try:
        if args.command == "plural":
            if args.max < 0:
                error("--max must not be negative")
                return 1
            return cli.plural(args.expression, args.max)
        elif args.command == "show":
            return cli.show(args.file, untranslated_only=args.untranslated)
        elif args.command == "get":
            return cli.get(args.file, args.msgid, args.plural, args.count, args.context)
        elif args.command == "locale":
            return cli.locale()
        else:
            parser.print_help()
            return 1
    except KeyboardInterrupt:
        console.print()
        error("Operation cancelled")
        return 130
    except (ValueError, OSError) as e:
        error(f"Error: {escape(str(e))}")
        return 1
    except Exception as e:
        error(f"Unexpected error: {escape(str(e))}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
