"""Output rendering helpers for ledger-sync."""

from __future__ import annotations

import json
import sys
from typing import IO, Any, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from .types import LedgerRow, LedgerTailState, RunFailure, RunResult


def render_result(
    result: RunResult,
    *,
    output_format: str = "json",
    include_trace: bool = False,
    stream: IO[str] | None = None,
) -> None:
    """Render a run result as a JSON payload or a table of appended rows."""
    output_stream = stream or sys.stdout
    if isinstance(result, RunFailure):
        _write_json(result.to_payload(include_trace=include_trace), output_stream)
        return

    fmt = (output_format or "json").lower()
    if fmt == "json":
        payload = result.to_payload()
        payload["rows"] = [_row_payload(row) for row in result.rows]
        _write_json(payload, output_stream)
    elif fmt == "table":
        _render_rows_table(result.rows, title=result.sheet, stream=output_stream)
    else:  # pragma: no cover - Click validation should prevent this
        raise ValueError(f"Unsupported output format '{output_format}'.")


def render_tail(tail: LedgerTailState, *, sheet: str, stream: IO[str] | None = None) -> None:
    """Render the ledger tail state as JSON."""
    _write_json(
        {
            "sheet": sheet,
            "empty": tail.is_empty,
            "row": tail.row_number,
            "date": tail.date or None,
            "expenditure": tail.expenditure,
            "income": tail.income,
        },
        stream or sys.stdout,
    )


def _row_payload(row: LedgerRow) -> dict[str, Any]:
    return {
        "date": row.date,
        "expenditure": row.expenditure,
        "income": row.income,
        "description": row.description,
    }


def _write_json(payload: dict[str, Any], stream: IO[str]) -> None:
    stream.write(json.dumps(payload, indent=2, ensure_ascii=False))
    stream.write("\n")


def _format_amount(value: float | None) -> str:
    if value is None:
        return ""
    return f"{value:,.2f}"


def _render_rows_table(rows: Sequence[LedgerRow], *, title: str, stream: IO[str]) -> None:
    if not rows:
        print("No rows to append.", file=stream)
        return
    console = Console(file=stream, highlight=False, force_terminal=False)
    table = Table(title=title, box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Date")
    table.add_column("Expenditure", justify="right")
    table.add_column("Income", justify="right")
    table.add_column("Description")
    for row in rows:
        table.add_row(
            row.date,
            _format_amount(row.expenditure),
            _format_amount(row.income),
            row.description,
        )
    console.print(table)
