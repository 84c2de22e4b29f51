from __future__ import annotations

from collections.abc import Callable

import pytest

from ledger_cli.ledger_sync.materialize import (
    build_replacement_grid,
    materialize_row,
    materialize_rows,
)
from ledger_cli.ledger_sync.types import LedgerRow, Transaction
from ledger_cli.shared.exceptions import ParseError

TxnFactory = Callable[..., Transaction]


def test_materialize_row_normalizes_fields(make_transaction: TxnFactory) -> None:
    row = materialize_row(
        make_transaction(
            "05032024",
            charges="0000032450,50",
            credits="0000000000,00",
            description="  Pago Luz  ",
        )
    )

    assert row == LedgerRow(date="05/03/2024", expenditure=32450.5, income=None, description="Pago Luz")


def test_unparseable_amounts_are_left_blank(make_transaction: TxnFactory) -> None:
    row = materialize_row(make_transaction("05032024", charges="n/a", credits=""))

    assert row.expenditure is None
    assert row.income is None
    assert row.as_cells() == ["05/03/2024", "", "", "Movimiento"]


def test_materialize_rows_preserves_order(make_transaction: TxnFactory) -> None:
    transactions = [
        make_transaction("03032024", charges="100", description="b"),
        make_transaction("01032024", credits="200", description="a"),
    ]

    rows = materialize_rows(transactions)

    assert [row.description for row in rows] == ["b", "a"]
    assert rows[1].income == 200.0


def test_materialize_rows_of_nothing_is_empty() -> None:
    assert materialize_rows([]) == []


def test_materialize_rejects_bad_dates(make_transaction: TxnFactory) -> None:
    with pytest.raises(ParseError):
        materialize_row(make_transaction("32132024", charges="100"))


@pytest.mark.parametrize("existing", [None, [], [[]], [[], ["", None, "  "]]])
def test_replacement_grid_for_unwritten_ledger_has_only_new_rows(existing) -> None:
    rows = [LedgerRow(date="01/03/2024", expenditure=1500.0, income=None, description="Cafe")]

    assert build_replacement_grid(existing, rows) == [["01/03/2024", 1500.0, "", "Cafe"]]


def test_replacement_grid_renormalizes_existing_currency_cells() -> None:
    existing = [
        ["01/03/2024", "$1.500", "", "Cafe"],
        ["02/03/2024", "", "$250.000", "Abono"],
        ["03/03/2024"],
    ]
    rows = [LedgerRow(date="04/03/2024", expenditure=None, income=9000.0, description="Reembolso")]

    grid = build_replacement_grid(existing, rows)

    assert grid == [
        ["01/03/2024", 1500, "", "Cafe"],
        ["02/03/2024", "", 250000, "Abono"],
        ["03/03/2024"],
        ["04/03/2024", "", 9000.0, "Reembolso"],
    ]
    # The caller's grid is left untouched.
    assert existing[0][1] == "$1.500"


def test_replacement_grid_keeps_populated_rows_after_blank_ones() -> None:
    existing = [[], ["", "", "", ""], ["04/03/2024", "$1.000", "", "Kiosco"]]
    rows = [LedgerRow(date="05/03/2024", expenditure=None, income=700.0, description="Abono")]

    grid = build_replacement_grid(existing, rows)

    assert grid[:2] == [[], ["", "", "", ""]]
    assert grid[2] == ["04/03/2024", 1000, "", "Kiosco"]
    assert grid[3] == ["05/03/2024", "", 700.0, "Abono"]
