"""Date parsing and formatting for extracts, ledgers and sheet titles."""

from __future__ import annotations

import re
from datetime import date, datetime

from ledger_cli.shared.exceptions import ParseError

LEDGER_DATE_FORMAT = "%d/%m/%Y"
STATEMENT_DATE_FORMAT = "%d%m%Y"
ISO_DATE_FORMAT = "%Y-%m-%d"

SPANISH_MONTHS = (
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
)

_SEPARATOR_RE = re.compile(r"[/.\-]")


def parse_statement_date(value: str) -> date:
    """Parse an extract date written as ``DDMMYYYY``, with or without separators."""

    cleaned = (value or "").strip()
    try:
        if _SEPARATOR_RE.search(cleaned):
            day, month, year = (int(part) for part in _SEPARATOR_RE.split(cleaned))
            return date(year, month, day)
        return datetime.strptime(cleaned, STATEMENT_DATE_FORMAT).date()
    except ValueError as exc:
        raise ParseError(f"Invalid statement date '{value}'") from exc


def parse_ledger_date(value: object) -> date:
    """Parse a ledger date cell.

    Worksheet cells usually come back as ``datetime`` objects; grid cells are
    ``DD/MM/YYYY`` text, and some workbooks store ISO text.
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    for fmt in (LEDGER_DATE_FORMAT, ISO_DATE_FORMAT):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ParseError(f"Invalid ledger date '{value}'")


def format_ledger_date(value: date) -> str:
    """Return the canonical ``DD/MM/YYYY`` form written to the ledger."""
    return value.strftime(LEDGER_DATE_FORMAT)


def parse_request_date(value: str) -> date:
    """Strictly parse a zero-padded ``DD/MM/YYYY`` request date."""

    try:
        parsed = datetime.strptime(value, LEDGER_DATE_FORMAT).date()
    except (TypeError, ValueError) as exc:
        raise ParseError(f"Date format will be DD/MM/YYYY, {value} is not valid") from exc
    if format_ledger_date(parsed) != value:
        raise ParseError(f"Date format will be DD/MM/YYYY, {value} is not valid")
    return parsed


def sheet_title_for(value: date) -> str:
    """Return the month sheet title, e.g. ``Marzo 2024``."""
    return f"{SPANISH_MONTHS[value.month - 1].capitalize()} {value.year}"
