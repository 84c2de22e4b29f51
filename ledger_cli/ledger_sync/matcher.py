"""Locate transactions that the ledger already records."""

from __future__ import annotations

from collections.abc import Sequence

from .types import LedgerTailState, RegistryMatch, Transaction
from .utils.amounts import parse_statement_amount
from .utils.dates import format_ledger_date, parse_statement_date


def is_recorded(transaction: Transaction, tail: LedgerTailState) -> bool:
    """True when ``transaction`` has the tail's date and a matching nonzero amount."""

    if tail.is_empty:
        return False
    if format_ledger_date(parse_statement_date(transaction.date)) != tail.date:
        return False
    charges = parse_statement_amount(transaction.charges)
    credits = parse_statement_amount(transaction.credits)
    same_expenditure = bool(charges) and bool(tail.expenditure) and charges == tail.expenditure
    same_income = bool(credits) and bool(tail.income) and credits == tail.income
    return same_expenditure or same_income


def find_last_registry(
    transactions: Sequence[Transaction],
    tail: LedgerTailState,
) -> RegistryMatch:
    """Return the highest index whose transaction is already in the ledger.

    The scan never stops early, so repeated date+amount pairs resolve to the
    latest one. An empty tail, or no match, gives ``RegistryMatch(0, False)``.
    """

    if tail.is_empty:
        return RegistryMatch()
    match = RegistryMatch()
    for index, transaction in enumerate(transactions):
        if is_recorded(transaction, tail):
            match = RegistryMatch(index=index, matched=True)
    return match


def pending_transactions(
    transactions: Sequence[Transaction],
    match: RegistryMatch,
) -> list[Transaction]:
    """Return the transactions after the matched position."""
    return list(transactions[match.append_from :])
