"""Conversion of un-recorded transactions into ledger rows."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from .types import LedgerRow, Transaction
from .utils.amounts import convert_currency_string_to_number, parse_statement_amount
from .utils.dates import format_ledger_date, parse_statement_date

# Grid columns holding currency: expenditure and income.
CURRENCY_COLUMNS = (1, 2)


def materialize_row(transaction: Transaction) -> LedgerRow:
    """Build the ledger row for a single transaction.

    Zero or unreadable amounts are left blank rather than written as ``0``.
    """

    expenditure = parse_statement_amount(transaction.charges)
    income = parse_statement_amount(transaction.credits)
    return LedgerRow(
        date=format_ledger_date(parse_statement_date(transaction.date)),
        expenditure=expenditure or None,
        income=income or None,
        description=transaction.description.strip(),
    )


def materialize_rows(transactions: Iterable[Transaction]) -> list[LedgerRow]:
    """Build ledger rows in transaction order."""
    return [materialize_row(transaction) for transaction in transactions]


def _has_value(cell: Any) -> bool:
    return cell is not None and not (isinstance(cell, str) and not cell.strip())


def is_structurally_empty(grid: Sequence[Sequence[Any]] | None) -> bool:
    """True for a ledger grid without a single populated cell (``[]``, ``[[]]``, ...)."""
    return not any(any(_has_value(cell) for cell in row) for row in grid or ())


def build_replacement_grid(
    existing: Sequence[Sequence[Any]] | None,
    rows: Sequence[LedgerRow],
) -> list[list[Any]]:
    """Return the full grid to write back: existing rows followed by ``rows``.

    Existing currency cells are renormalized to plain numbers so old and new
    rows share one representation. A grid with no populated cell yields only
    the new rows; any other grid is kept whole, blank rows included.
    """

    new_cells = [row.as_cells() for row in rows]
    if is_structurally_empty(existing):
        return new_cells

    merged: list[list[Any]] = []
    for cells in existing or ():
        normalized = list(cells)
        for column in CURRENCY_COLUMNS:
            if column < len(normalized) and normalized[column] not in (None, ""):
                normalized[column] = convert_currency_string_to_number(normalized[column])
        merged.append(normalized)
    return merged + new_cells
