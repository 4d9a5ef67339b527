"""Rendering of API results for the tracker CLI.

Tables are described by ``Column`` specs. Each column names the kind of
figure it holds, so money and percentages get two decimals while
quantities keep every digit the API returned.
"""

import json
from typing import Any, NamedTuple

import click
import yaml


def _text(value: Any) -> str:
    return str(value)


def _money(value: Any) -> str:
    if isinstance(value, (int, float)):
        return f"{value:,.2f}"
    return str(value)


def _percent(value: Any) -> str:
    if isinstance(value, (int, float)):
        return f"{value:.2f}"
    return str(value)


def _quantity(value: Any) -> str:
    if isinstance(value, float):
        # Fixed point without float noise, trailing zeros dropped
        return f"{value:,.10f}".rstrip("0").rstrip(".")
    if isinstance(value, int):
        return f"{value:,}"
    return str(value)


FORMATTERS = {
    "text": _text,
    "money": _money,
    "percent": _percent,
    "quantity": _quantity,
}


class Column(NamedTuple):
    """One table column: dict key, header label, width and figure kind."""

    key: str
    header: str
    width: int
    kind: str = "text"

    def render(self, item: dict) -> str:
        value = item.get(self.key)
        cell = "" if value is None else FORMATTERS[self.kind](value)
        if len(cell) > self.width:
            cell = cell[: self.width - 3] + "..."
        return cell.ljust(self.width)


def format_table(data: list[dict], columns: list[Column]) -> str:
    """Lay out ``data`` as fixed-width rows under a header line."""
    if not data:
        return "No data found."

    header = "  ".join(column.header.ljust(column.width) for column in columns)
    lines = [header, "-" * len(header)]
    lines.extend("  ".join(column.render(item) for column in columns) for item in data)
    return "\n".join(lines)


def format_mapping(data: dict, kinds: dict[str, str] | None = None) -> str:
    """Lay out a single record as ``key  value`` lines.

    Nested mappings are flattened onto one line and lists show their length.
    ``kinds`` picks the formatter per key; unlisted keys print as text.
    """
    kinds = kinds or {}
    width = max((len(str(key)) for key in data), default=0)

    lines = []
    for key, value in data.items():
        fmt = FORMATTERS[kinds.get(key, "text")]
        if isinstance(value, dict):
            shown = ", ".join(f"{k}: {fmt(v)}" for k, v in value.items()) or "(none)"
        elif isinstance(value, list):
            shown = f"({len(value)} entries)"
        elif value is None:
            shown = "(none)"
        else:
            shown = fmt(value)
        lines.append(f"{str(key).ljust(width)}  {shown}")
    return "\n".join(lines)


def format_output(
    data: Any,
    fmt: str,
    columns: list[Column] | None = None,
    kinds: dict[str, str] | None = None,
) -> str:
    """Render ``data`` as json, yaml or a table.

    Lists need ``columns`` to become a table; dicts use ``kinds``.
    """
    if fmt == "json":
        return json.dumps(data, indent=2, default=str)
    if fmt == "yaml":
        return yaml.dump(data, default_flow_style=False, allow_unicode=True)
    if isinstance(data, list) and columns:
        return format_table(data, columns)
    if isinstance(data, dict):
        return format_mapping(data, kinds)
    return str(data)


def output(
    data: Any,
    fmt: str,
    columns: list[Column] | None = None,
    kinds: dict[str, str] | None = None,
) -> None:
    """Write rendered data to stdout."""
    click.echo(format_output(data, fmt, columns, kinds))


def success(message: str) -> None:
    click.echo(click.style(message, fg="green"))


def error(message: str) -> None:
    """Write ``Error: message`` to stderr."""
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)


def info(message: str) -> None:
    click.echo(message)
