"""Rich table rendering for human-friendly output.

:func:`print_table` accepts whatever a command wants to show:

* a sequence of dataclasses, mappings or plain objects — one row each;
* a single dataclass, mapping or object — one row;
* scalars — a single ``VALUE`` column.

Column headers come from dataclass field names (override with
``field(metadata={"header": "..."})``), mapping keys or public
attribute names, upper-cased like ``BUILD TIME``.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TextIO

from rich.table import Table
from rich.text import Text

from cliweave.cli.console import get_rich_console

RowFilter = Callable[[Any], bool]
"""Predicate deciding whether an item is shown in the table."""

_SCALARS = (str, bytes, bytearray, int, float, complex, bool)


# ---------------------------------------------------------------------------
# Presentation helpers (pure transforms, no I/O)
# ---------------------------------------------------------------------------

def _header(key: str) -> str:
    return str(key).replace("_", " ").replace("-", " ").upper()


def _cell(value: Any) -> Text:
    """Render a cell as plain text so brackets are never read as markup."""
    if value is None:
        return Text("")
    if isinstance(value, bool):
        return Text("true" if value else "false")
    if isinstance(value, (list, tuple, set, frozenset)):
        return Text(", ".join(str(v) for v in value))
    return Text(str(value))


def _items(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (_SCALARS, Mapping)) or dataclasses.is_dataclass(value):
        return [value]
    if isinstance(value, Iterable):
        return list(value)
    return [value]


def _record(item: Any) -> Mapping[str, Any]:
    """Column values of *item*; items without attributes fill a ``value`` column."""
    if isinstance(item, Mapping):
        return item
    if not isinstance(item, _SCALARS) and hasattr(item, "__dict__"):
        return {k: v for k, v in vars(item).items() if not k.startswith("_")}
    return {"value": item}


def _columns_and_rows(items: list[Any]) -> tuple[list[str], list[list[Any]]]:
    """Derive headers from the first item and one row per item."""
    first = items[0]

    if dataclasses.is_dataclass(first):
        fields = dataclasses.fields(first)
        headers = [f.metadata.get("header", _header(f.name)) for f in fields]
        rows = [[getattr(item, f.name, None) for f in fields] for item in items]
        return headers, rows

    if isinstance(first, Mapping) or (
        not isinstance(first, _SCALARS) and hasattr(first, "__dict__")
    ):
        keys: list[str] = []
        records = [_record(item) for item in items]
        for record in records:
            keys.extend(k for k in record if k not in keys)
        return [_header(k) for k in keys], [[record.get(k) for k in keys] for record in records]

    return ["VALUE"], [[item] for item in items]


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def print_table(out: TextIO, value: Any, *filters: RowFilter) -> None:
    """Render *value* as a table on *out*.

    Items failing any of *filters* are left out. Nothing is written when
    no item remains.
    """
    items = [item for item in _items(value) if all(keep(item) for keep in filters)]
    if not items:
        return

    headers, rows = _columns_and_rows(items)

    table = Table(show_header=True, header_style="bold magenta", border_style="dim")
    for header in headers:
        table.add_column(header)
    for row in rows:
        table.add_row(*(_cell(cell) for cell in row))

    get_rich_console(out).print(table)
