"""Table building utilities for CLI output."""

from typing import Any, List, Optional, Sequence

import click
from tabulate import tabulate, tabulate_formats

from .config import DEFAULT_TABLE_STYLE, get_table_style


def stringify(value: Any) -> str:
    """Default cell conversion: None becomes an empty cell, everything else ``str()``."""
    if value is None:
        return ""
    return str(value)


def resolve_table_style(style: Optional[str] = None) -> str:
    """Return a tabulate format name, falling back to the default for unknown names."""
    style = style or get_table_style()
    if style not in tabulate_formats:
        return DEFAULT_TABLE_STYLE
    return style


def render_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[Any]],
    style: Optional[str] = None,
) -> str:
    """Render rows under upper-cased headers as a single string.

    Args:
        headers: Column labels
        rows: Cell values, one sequence per row; values are stringified
        style: Tabulate format name (defaults to the configured table style)

    Returns:
        The rendered table, or an empty string when there are no columns.
    """
    if not headers:
        return ""

    table: List[List[str]] = [[stringify(cell) for cell in row] for row in rows]
    return tabulate(
        table,
        headers=[h.upper() for h in headers],
        tablefmt=resolve_table_style(style),
        disable_numparse=True,
    )


def echo_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[Any]],
    style: Optional[str] = None,
) -> None:
    """Render a table and write it to stdout in one piece."""
    text = render_table(headers, rows, style)
    if text:
        click.echo(text)
