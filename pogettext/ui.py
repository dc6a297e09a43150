"""
Console output for the pogettext CLI.

Status lines carry a PO badge; catalog summaries are drawn as a panel
and message listings as a table. Catalog text is escaped before it is
handed to rich, since msgids routinely contain ``[`` and ``%``.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

console = Console()

BADGE = "[bold white on dark_cyan] PO [/bold white on dark_cyan]"
PANEL_BORDER = "cyan"
PANEL_WIDTH = 70

# (header, style, justify)
Column = tuple[str, str, str]


# ============================================================================
# STATUS LINES
# ============================================================================


def _status(mark: str, message: str, details: str, details_style: str, badge: bool) -> None:
    prefix = f"{BADGE} " if badge else ""
    console.print(f"{prefix}{mark} {message}")
    if details:
        console.print(f"    [{details_style}]{details}[/{details_style}]")


def success(message: str, details: str = "", badge: bool = True):
    """Report a completed command, e.g. a plural expression that compiled.

    Args:
        message: Rich markup; escape catalog text before passing it
        details: Dimmed second line
        badge: Prefix the PO badge
    """
    _status("[green]✓[/green]", message, details, "dim", badge)


def error(message: str, details: str = "", badge: bool = True):
    _status("[red]✗[/red]", message, details, "red", badge)


def warning(message: str, details: str = "", badge: bool = True):
    _status("[yellow]⚠[/yellow]", message, details, "dim", badge)


def info(message: str):
    """Print a translation or other catalog text verbatim, without markup."""
    console.print(message, markup=False)


# ============================================================================
# CATALOG VIEWS
# ============================================================================


def summary_box(title: str, fields: dict[str, str]):
    """Draw a panel of label/value rows, such as catalog headers.

    Example:
        summary_box("CATALOG", {"Language": "ar", "Plural-Forms": "nplurals=6; ..."})
    """
    grid = Table(show_header=False, box=None, padding=(0, 1))
    grid.add_column("Field", style="dim", no_wrap=True)
    grid.add_column("Value", style="white")
    for label, value in fields.items():
        grid.add_row(f"{label}:", escape(value))

    console.print(
        Panel(
            grid,
            title=f"[bold]{title}[/bold]",
            border_style=PANEL_BORDER,
            padding=(1, 2),
            expand=False,
            width=PANEL_WIDTH,
        )
    )


def message_table(
    columns: list[Column], rows: list[list[object]], title: str | None = None
) -> Table:
    """Draw catalog rows (messages, plural forms) as a table and return it.

    Every cell is converted with ``str`` and escaped.
    """
    table = Table(title=title, border_style="dim", title_style="bold", padding=(0, 1))
    for header, style, justify in columns:
        table.add_column(header, style=style, justify=justify)
    for row in rows:
        table.add_row(*(escape(str(cell)) for cell in row))

    console.print()
    console.print(table)
    console.print()
    return table
