"""Shared utilities for extract and ledger handling."""

from __future__ import annotations

from .amounts import convert_currency_string_to_number, parse_statement_amount
from .dates import (
    format_ledger_date,
    parse_ledger_date,
    parse_request_date,
    parse_statement_date,
    sheet_title_for,
)

__all__ = [
    "convert_currency_string_to_number",
    "parse_statement_amount",
    "format_ledger_date",
    "parse_ledger_date",
    "parse_request_date",
    "parse_statement_date",
    "sheet_title_for",
]
