"""Utilities for rendering extracted records in the CLI."""

from __future__ import annotations

import json
from typing import Dict, Iterable, List, Sequence
from urllib.parse import urljoin

Record = Dict[str, str]


def _columns(records: Sequence[Record]) -> List[str]:
    """Field names in first-seen order across all records."""
    columns: List[str] = []
    for record in records:
        for name in record:
            if name not in columns:
                columns.append(name)
    return columns


def _cell(value: str) -> str:
    # Keep one record per row.
    return " ".join(value.split())


def render_table(records: Sequence[Record]) -> str:
    """Render *records* as an ASCII grid with one row per record.

    Args:
        records: Extracted records; missing fields render as empty cells.

    Returns:
        The table as a string, or an empty string when there are no records.
    """
    if not records:
        return ""
    columns = _columns(records)
    rows = [[_cell(record.get(col, "")) for col in columns] for record in records]
    widths = [
        max(len(col), *(len(row[i]) for row in rows)) for i, col in enumerate(columns)
    ]

    border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"

    def _line(cells: Iterable[str]) -> str:
        return "| " + " | ".join(c.ljust(w) for c, w in zip(cells, widths)) + " |"

    lines = [border, _line(columns), border]
    lines.extend(_line(row) for row in rows)
    lines.append(border)
    return "\n".join(lines)


def render_lines(records: Sequence[Record]) -> str:
    """One record per line, values tab-separated."""
    return "\n".join("\t".join(_cell(v) for v in record.values()) for record in records)


def render_json(records: Sequence[Record]) -> str:
    return json.dumps(list(records), indent=2, ensure_ascii=False)


RENDERERS = {
    "table": render_table,
    "lines": render_lines,
    "json": render_json,
}


def absolutize(records: Sequence[Record], base_url: str, fields: Sequence[str] = ("href",)) -> List[Record]:
    """Return copies of *records* with *fields* resolved against *base_url*.

    Display-only: extraction results are never rewritten in place.
    """
    resolved = []
    for record in records:
        copy = dict(record)
        for name in fields:
            if name in copy:
                copy[name] = urljoin(base_url, copy[name])
        resolved.append(copy)
    return resolved
