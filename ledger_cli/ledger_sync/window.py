"""Month-window selection over a parsed transaction sequence."""

from __future__ import annotations

from collections.abc import Sequence

from ledger_cli.shared.exceptions import NoDataForMonthError

from .types import MonthWindow, Transaction
from .utils.dates import parse_statement_date


def _is_after_month(month: int, year: int, *, target_month: int, target_year: int) -> bool:
    # Compares month and year separately: a higher month in a later year is
    # not "after" under this rule. Kept as the bank sheets have always been
    # reconciled; confirm before widening to a plain (year, month) ordering.
    return (month > target_month and year == target_year) or (
        month < target_month and year > target_year
    )


def select_month_window(
    transactions: Sequence[Transaction],
    month: int,
    year: int,
) -> MonthWindow:
    """Return the contiguous run of ``transactions`` belonging to ``month``/``year``.

    The whole sequence is scanned so either chronological ordering works.
    When no later month closes the window, the end falls back to the final
    index; if that transaction is still in the target month the full,
    unsliced sequence is returned and the window is flagged ``degenerate``.

    Raises:
        NoDataForMonthError: no transaction falls in the target month.
        ParseError: a transaction date cannot be parsed.
    """

    items = list(transactions)
    start: int | None = None
    end: int | None = None
    last_index = 0

    for index, transaction in enumerate(items):
        posted = parse_statement_date(transaction.date)
        if start is None and (posted.month, posted.year) == (month, year):
            start = index
        elif (
            start is not None
            and end is None
            and _is_after_month(posted.month, posted.year, target_month=month, target_year=year)
        ):
            end = index
        if start is not None and end is not None:
            continue
        last_index = index

    if start is None:
        raise NoDataForMonthError(f"No data to extract for {month:02d}/{year}")

    if end is None:
        end = last_index

    # Year is part of the check: the same month of another year still slices.
    closing = parse_statement_date(items[end].date)
    if (closing.month, closing.year) == (month, year):
        return MonthWindow(start=start, end=end, transactions=items, degenerate=True)
    return MonthWindow(start=start, end=end, transactions=items[start:end])
