"""Shared fixtures for ledger-sync tests.

The sample extract mirrors the bank's semicolon export: eight metadata
lines, a mixed-case header, then transactions oldest first spanning
February to April 2024 with zero-padded decimal-comma amounts.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from openpyxl import Workbook

from ledger_cli.shared import paths
from ledger_cli.shared.config import AppConfig, load_config
from ledger_cli.ledger_sync.types import Transaction

METADATA_LINES = [
    ";Cartola de Cuenta Corriente",
    ";Numero Cuenta;000012345678",
    ";Fecha Desde;01/02/2024",
    ";Fecha Hasta;30/04/2024",
    ";Ejecutivo;MARIA SOTO",
    ";Sucursal;PROVIDENCIA",
    ";Email;maria.soto@example.com",
    ";Fono;226923000",
]

HEADER_LINE = "Fecha;Descripcion;Cargos;Abonos;Saldo"

DATA_LINES = [
    "28022024;Compra Supermercado ;0000015990,00;0000000000,00;0000500000,00",
    "01032024;Transferencia recibida;0000000000,00;0000250000,00;0000750000,00",
    "05032024;Pago Luz;0000032450,00;0000000000,00;0000717550,00",
    "05032024;Farmacia;0000008990,00;0000000000,00;0000708560,00",
    "12032024;Sueldo;0000000000,00;0001200000,00;0001908560,00",
    "20032024;  Restaurant;0000045000,00;0000000000,00;0001863560,00",
    "02042024;Bencina;0000040000,00;0000000000,00;0001823560,00",
]

SAMPLE_EXTRACT = "\n".join([*METADATA_LINES, HEADER_LINE, *DATA_LINES]) + "\n"


@pytest.fixture()
def sample_extract() -> str:
    return SAMPLE_EXTRACT


@pytest.fixture()
def extract_file(tmp_path: Path) -> Path:
    path = tmp_path / "bsa.dat"
    path.write_text(SAMPLE_EXTRACT, encoding="utf-8")
    return path


@pytest.fixture()
def make_transaction() -> Callable[..., Transaction]:
    def _factory(
        posted: str,
        *,
        charges: str = "",
        credits: str = "",
        description: str = "Movimiento",
    ) -> Transaction:
        return Transaction(date=posted, charges=charges, credits=credits, description=description)

    return _factory


@pytest.fixture()
def grid_ledger_file(tmp_path: Path) -> Callable[[list[list[Any]]], Path]:
    """Write a JSON grid ledger holding a single ``Marzo 2024`` sheet."""

    def _factory(rows: list[list[Any]], *, title: str = "Marzo 2024") -> Path:
        path = tmp_path / "ledger.json"
        path.write_text(json.dumps({"sheets": {title: rows}}), encoding="utf-8")
        return path

    return _factory


@pytest.fixture()
def workbook_ledger_file(tmp_path: Path) -> Callable[..., Path]:
    """Write an .xlsx ledger whose data rows start at row 3."""

    def _factory(rows: list[tuple[Any, Any, Any, str]], *, title: str = "Marzo 2024") -> Path:
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = title
        sheet.cell(row=1, column=1).value = "Adm Mensual"
        sheet.cell(row=2, column=1).value = "Fecha"
        for offset, (posted, expenditure, income, description) in enumerate(rows):
            row_number = 3 + offset
            sheet.cell(row=row_number, column=1).value = posted
            sheet.cell(row=row_number, column=3).value = expenditure
            sheet.cell(row=row_number, column=4).value = income
            sheet.cell(row=row_number, column=8).value = description
        path = tmp_path / "ledger.xlsx"
        workbook.save(path)
        return path

    return _factory


@pytest.fixture()
def app_config(tmp_path: Path) -> AppConfig:
    """AppConfig rooted in tmp_path with no user config file."""

    env = {
        paths.CONFIG_DIR_ENV: str(tmp_path / "config"),
        paths.DATA_DIR_ENV: str(tmp_path / "data"),
        "LEDGER_SYNC_LEDGER_DEV": str(tmp_path / "ledger.json"),
        "LEDGER_SYNC_LEDGER_PROD": str(tmp_path / "ledger.xlsx"),
    }
    return load_config(env=env)
