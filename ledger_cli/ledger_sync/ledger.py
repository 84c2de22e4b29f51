"""Ledger access adapters and the tail reader shared by both of them.

Two ledger shapes exist: a value grid (rows of cell strings, as returned by
the spreadsheet values API for range ``A3:D``) and an addressable workbook
worksheet. Both expose :class:`LedgerAccess`, so the tail reader and the
reconciliation never care which one they are talking to.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from datetime import datetime, time
from typing import Any, NamedTuple, Protocol, runtime_checkable

from openpyxl.worksheet.worksheet import Worksheet

from ledger_cli.shared.logging import Logger

from .materialize import build_replacement_grid
from .types import LedgerRow, LedgerTailState
from .utils.amounts import convert_currency_string_to_number
from .utils.dates import format_ledger_date, parse_ledger_date, parse_statement_date

DEFAULT_SCAN_START_ROW = 3
DEFAULT_SCAN_WINDOW = 300


class ScannedRow(NamedTuple):
    row_number: int
    date: Any
    expenditure: Any
    income: Any


@runtime_checkable
class LedgerAccess(Protocol):
    """Read/write surface of a destination ledger."""

    scan_start_row: int
    scan_window: int

    def scan_rows(self) -> Iterator[ScannedRow]:
        """Yield at most ``scan_window`` rows starting at ``scan_start_row``."""

    def write_rows(self, rows: Sequence[LedgerRow], tail: LedgerTailState) -> None:
        """Persist ``rows`` after the current tail."""


@dataclass(frozen=True, slots=True)
class ColumnLayout:
    date: int
    expenditure: int
    income: int
    description: int


GRID_LAYOUT = ColumnLayout(date=0, expenditure=1, income=2, description=3)
WORKSHEET_LAYOUT = ColumnLayout(date=1, expenditure=3, income=4, description=8)

LEDGER_NUMBER_FORMAT = "DD/MM/YYYY"


def _cell(row: Sequence[Any] | None, index: int) -> Any:
    if not row or index >= len(row):
        return None
    return row[index]


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class GridLedger:
    """Ledger backed by an in-memory grid of rows.

    ``commit`` receives the replacement grid when rows are written; without
    one the grid is only updated in memory.
    """

    def __init__(
        self,
        values: Sequence[Sequence[Any]] | None,
        *,
        scan_start_row: int = DEFAULT_SCAN_START_ROW,
        scan_window: int = DEFAULT_SCAN_WINDOW,
        commit: Callable[[list[list[Any]]], None] | None = None,
    ) -> None:
        self.values: list[list[Any]] = [list(row) for row in values or [[]]]
        self.scan_start_row = scan_start_row
        self.scan_window = scan_window
        self._commit = commit

    def scan_rows(self) -> Iterator[ScannedRow]:
        for offset, row in enumerate(self.values[: self.scan_window]):
            yield ScannedRow(
                row_number=self.scan_start_row + offset,
                date=_cell(row, GRID_LAYOUT.date),
                expenditure=_cell(row, GRID_LAYOUT.expenditure),
                income=_cell(row, GRID_LAYOUT.income),
            )

    def write_rows(self, rows: Sequence[LedgerRow], tail: LedgerTailState) -> None:
        grid = build_replacement_grid(self.values, rows)
        if self._commit is not None:
            self._commit(grid)
        self.values = grid


class WorksheetLedger:
    """Ledger backed by an openpyxl worksheet with cell-addressed access."""

    def __init__(
        self,
        worksheet: Worksheet,
        *,
        scan_start_row: int = DEFAULT_SCAN_START_ROW,
        scan_window: int = DEFAULT_SCAN_WINDOW,
        commit: Callable[[], None] | None = None,
    ) -> None:
        self.worksheet = worksheet
        self.scan_start_row = scan_start_row
        self.scan_window = scan_window
        self._commit = commit

    def scan_rows(self) -> Iterator[ScannedRow]:
        last_row = self.scan_start_row + self.scan_window - 1
        for row_number in range(self.scan_start_row, last_row + 1):
            yield ScannedRow(
                row_number=row_number,
                date=self.worksheet.cell(row=row_number, column=WORKSHEET_LAYOUT.date).value,
                expenditure=self.worksheet.cell(
                    row=row_number, column=WORKSHEET_LAYOUT.expenditure
                ).value,
                income=self.worksheet.cell(row=row_number, column=WORKSHEET_LAYOUT.income).value,
            )

    def write_rows(self, rows: Sequence[LedgerRow], tail: LedgerTailState) -> None:
        row_number = self.scan_start_row if tail.row_number is None else tail.row_number + 1
        for offset, row in enumerate(rows):
            target = row_number + offset
            date_cell = self.worksheet.cell(row=target, column=WORKSHEET_LAYOUT.date)
            date_cell.value = datetime.combine(parse_ledger_date(row.date), time())
            date_cell.number_format = LEDGER_NUMBER_FORMAT
            self.worksheet.cell(row=target, column=WORKSHEET_LAYOUT.description).value = (
                row.description
            )
            if row.expenditure:
                self.worksheet.cell(row=target, column=WORKSHEET_LAYOUT.expenditure).value = (
                    row.expenditure
                )
            if row.income:
                self.worksheet.cell(row=target, column=WORKSHEET_LAYOUT.income).value = row.income
        if self._commit is not None:
            self._commit()


def _parse_tail_date(value: Any) -> str:
    if isinstance(value, str) and value.strip().isdigit():
        return format_ledger_date(parse_statement_date(value))
    return format_ledger_date(parse_ledger_date(value))


def _tail_from(row: ScannedRow) -> LedgerTailState:
    return LedgerTailState(
        date=_parse_tail_date(row.date),
        expenditure=convert_currency_string_to_number(row.expenditure),
        income=convert_currency_string_to_number(row.income),
        row_number=row.row_number,
    )


def read_ledger_tail(ledger: LedgerAccess, *, logger: Logger | None = None) -> LedgerTailState:
    """Return the last populated row before the first row without a date.

    An empty first row yields :meth:`LedgerTailState.empty`. Rows past the
    scan window are never considered; when every scanned row is populated the
    last scanned row is used.
    """

    previous: ScannedRow | None = None
    scanned = 0
    for row in ledger.scan_rows():
        scanned += 1
        if _is_blank(row.date):
            break
        previous = row
    else:
        if previous is not None and scanned >= ledger.scan_window and logger is not None:
            logger.warning(
                f"Ledger scan window of {ledger.scan_window} rows is full; "
                f"using row {previous.row_number} as the tail."
            )

    if previous is None:
        return LedgerTailState.empty()
    return _tail_from(previous)
