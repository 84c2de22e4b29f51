"""Public exports for the ledger-sync package."""

from .extract import filter_extract_text, parse_transactions
from .ledger import GridLedger, LedgerAccess, WorksheetLedger, read_ledger_tail
from .matcher import find_last_registry, pending_transactions
from .materialize import build_replacement_grid, materialize_rows
from .pipeline import run_extraction, sync_extract
from .types import (
    ExtractionRequest,
    LedgerRow,
    LedgerTailState,
    MonthWindow,
    RegistryMatch,
    RunFailure,
    RunSuccess,
    Transaction,
)
from .window import select_month_window

__all__ = [
    "ExtractionRequest",
    "GridLedger",
    "LedgerAccess",
    "LedgerRow",
    "LedgerTailState",
    "MonthWindow",
    "RegistryMatch",
    "RunFailure",
    "RunSuccess",
    "Transaction",
    "WorksheetLedger",
    "build_replacement_grid",
    "filter_extract_text",
    "find_last_registry",
    "materialize_rows",
    "parse_transactions",
    "pending_transactions",
    "read_ledger_tail",
    "run_extraction",
    "select_month_window",
    "sync_extract",
]
