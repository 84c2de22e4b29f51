from __future__ import annotations

from pathlib import Path

import pytest

from ledger_cli.ledger_sync.extract import (
    filter_extract_text,
    parse_transactions,
    persist_filtered_extract,
    read_extract,
)
from ledger_cli.ledger_sync.types import Transaction
from ledger_cli.shared.exceptions import ParseError, UpstreamIOError


def test_filter_drops_metadata_and_lowercases_header(sample_extract: str) -> None:
    cleaned = filter_extract_text(sample_extract)
    lines = cleaned.split("\n")

    assert len(lines) == len(sample_extract.split("\n")) - 8
    assert lines[0] == "fecha;descripcion;cargos;abonos;saldo"
    for marker in ("Cartola", "Numero Cuenta", "Ejecutivo", "Sucursal", "Email", "Fono"):
        assert marker not in cleaned
    assert "Fecha" not in cleaned


def test_filter_preserves_line_order() -> None:
    text = "Fecha;Descripcion\n01032024;uno\n02032024;dos"
    cleaned = filter_extract_text(text)
    assert cleaned.split("\n") == ["fecha;descripcion", "01032024;uno", "02032024;dos"]


def test_filter_replaces_keywords_on_every_line_case_sensitively() -> None:
    text = "Fecha;Saldo\n01032024;Abonos Saldo SALDO"
    cleaned = filter_extract_text(text, metadata_markers=())
    assert cleaned == "fecha;saldo\n01032024;abonos saldo SALDO"


def test_filter_accepts_custom_markers() -> None:
    text = "#skip me\nFecha;Cargos\n01032024;10"
    cleaned = filter_extract_text(text, metadata_markers=("#skip",), header_keywords=("Fecha",))
    assert cleaned == "fecha;Cargos\n01032024;10"


def test_parse_transactions_maps_columns(sample_extract: str) -> None:
    transactions = list(parse_transactions(filter_extract_text(sample_extract)))

    assert len(transactions) == 7
    first = transactions[0]
    assert first == Transaction(
        date="28022024",
        charges="0000015990,00",
        credits="0000000000,00",
        description="Compra Supermercado",
        balance="0000500000,00",
    )
    assert transactions[5].description == "Restaurant"


def test_parse_transactions_keeps_empty_values_and_ignores_unknown_columns() -> None:
    text = "fecha;cargos;abonos;extra;descripcion\n01032024;;5000;ignored;Deposito"
    (transaction,) = list(parse_transactions(text))

    assert transaction.charges == ""
    assert transaction.credits == "5000"
    assert transaction.balance == ""
    assert transaction.description == "Deposito"


def test_parse_transactions_is_lazy() -> None:
    parsed = parse_transactions("")
    # Nothing is read until the generator is consumed.
    with pytest.raises(ParseError):
        next(parsed)


def test_parse_transactions_requires_header() -> None:
    with pytest.raises(ParseError):
        list(parse_transactions("\n\n"))


def test_parse_transactions_requires_date_column() -> None:
    with pytest.raises(ParseError):
        list(parse_transactions("descripcion;cargos\nPago;100"))


def test_parse_transactions_honours_delimiter() -> None:
    (transaction,) = list(parse_transactions("fecha,cargos\n01032024,100", delimiter=","))
    assert transaction.charges == "100"


def test_persist_filtered_extract_writes_timestamped_file(tmp_path: Path) -> None:
    target = persist_filtered_extract("fecha;cargos\n", tmp_path / "data")

    assert target.parent == tmp_path / "data"
    assert target.name.startswith("data-") and target.suffix == ".csv"
    assert target.read_text(encoding="utf-8") == "fecha;cargos\n"


def test_read_extract_wraps_os_errors(tmp_path: Path) -> None:
    with pytest.raises(UpstreamIOError):
        read_extract(tmp_path / "missing.dat")
