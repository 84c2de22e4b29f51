from __future__ import annotations

from datetime import date, datetime

import pytest

from ledger_cli.ledger_sync.utils import (
    convert_currency_string_to_number,
    format_ledger_date,
    parse_ledger_date,
    parse_request_date,
    parse_statement_amount,
    parse_statement_date,
    sheet_title_for,
)
from ledger_cli.shared.exceptions import ParseError


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("0001234", 1234),
        ("$12.500", 12500),
        ("1.234.567", 1234567),
        ("", 0),
        ("abc", 0),
        (None, 0),
    ],
)
def test_convert_currency_string_to_number(raw: object, expected: int) -> None:
    assert convert_currency_string_to_number(raw) == expected


def test_convert_currency_passes_numbers_through() -> None:
    assert convert_currency_string_to_number(32450) == 32450
    assert convert_currency_string_to_number(12.5) == 12.5


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("0001234", 1234.0),
        ("12,50", 12.5),
        ("0000032450,00", 32450.0),
        ("0000000000,50", 0.5),
        ("0000000000,00", 0.0),
    ],
)
def test_parse_statement_amount(raw: str, expected: float) -> None:
    assert parse_statement_amount(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", ["", "0000", "abc", None])
def test_parse_statement_amount_unparseable_is_none(raw: str | None) -> None:
    assert parse_statement_amount(raw) is None


@pytest.mark.parametrize("raw", ["05032024", "05/03/2024", "5-3-2024", " 05.03.2024 "])
def test_parse_statement_date_accepts_separators(raw: str) -> None:
    assert parse_statement_date(raw) == date(2024, 3, 5)


@pytest.mark.parametrize("raw", ["", "2024", "31022024", "aa/bb/cccc"])
def test_parse_statement_date_rejects_garbage(raw: str) -> None:
    with pytest.raises(ParseError):
        parse_statement_date(raw)


@pytest.mark.parametrize(
    "value", [date(2024, 1, 1), date(2024, 2, 29), date(2024, 12, 31), date(2031, 7, 9)]
)
def test_ledger_date_round_trip(value: date) -> None:
    assert parse_ledger_date(format_ledger_date(value)) == value


def test_parse_ledger_date_accepts_cell_types() -> None:
    assert parse_ledger_date(datetime(2024, 3, 5, 0, 0)) == date(2024, 3, 5)
    assert parse_ledger_date(date(2024, 3, 5)) == date(2024, 3, 5)
    assert parse_ledger_date("2024-03-05") == date(2024, 3, 5)


def test_parse_request_date_is_strict() -> None:
    assert parse_request_date("15/03/2024") == date(2024, 3, 15)
    for raw in ("15/3/2024", "2024-03-15", "15032024", "31/02/2024"):
        with pytest.raises(ParseError):
            parse_request_date(raw)


def test_sheet_title_uses_spanish_month_name() -> None:
    assert sheet_title_for(date(2024, 3, 1)) == "Marzo 2024"
    assert sheet_title_for(date(2025, 9, 30)) == "Septiembre 2025"
