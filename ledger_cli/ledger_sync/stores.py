"""File-backed ledger stores that hand out :class:`LedgerAccess` adapters."""

from __future__ import annotations

import json
import zipfile
from pathlib import Path
from typing import Any, Protocol

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from ledger_cli.shared.config import LedgerSettings
from ledger_cli.shared.exceptions import (
    ConfigurationError,
    EmptyLedgerError,
    LedgerReadError,
    UpstreamIOError,
)

from .ledger import GridLedger, LedgerAccess, WorksheetLedger

GRID_SUFFIXES = {".json"}
WORKBOOK_SUFFIXES = {".xlsx", ".xlsm"}


class LedgerStore(Protocol):
    path: Path

    def sheet_titles(self) -> list[str]: ...

    def open_sheet(self, title: str) -> LedgerAccess: ...


def _match_title(titles: list[str], wanted: str, path: Path) -> str:
    if not titles:
        raise EmptyLedgerError(f"Ledger {path} has no sheets to read")
    for title in titles:
        if title.lower() == wanted.lower():
            return title
    raise LedgerReadError(f"No sheet '{wanted}' in ledger {path}")


class GridLedgerStore:
    """JSON document of sheet grids: ``{"sheets": {"Marzo 2024": [[...], ...]}}``.

    Mirrors what the spreadsheet values API returns for the ledger range;
    writing replaces the whole sheet grid.
    """

    def __init__(self, path: Path, settings: LedgerSettings) -> None:
        self.path = path
        self.settings = settings
        self._document = self._load()

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            raise LedgerReadError(f"Ledger file {self.path} does not exist")
        try:
            document = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except OSError as exc:
            raise UpstreamIOError(f"Could not read ledger {self.path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise LedgerReadError(f"Ledger {self.path} is not valid JSON: {exc}") from exc
        if not isinstance(document, dict) or not isinstance(document.get("sheets", {}), dict):
            raise LedgerReadError(f"Ledger {self.path} must hold a 'sheets' mapping")
        document.setdefault("sheets", {})
        return document

    def sheet_titles(self) -> list[str]:
        return list(self._document["sheets"])

    def open_sheet(self, title: str) -> GridLedger:
        resolved = _match_title(self.sheet_titles(), title, self.path)
        values = self._document["sheets"][resolved] or [[]]

        def commit(grid: list[list[Any]]) -> None:
            self._document["sheets"][resolved] = grid
            self._save()

        return GridLedger(
            values,
            scan_start_row=self.settings.scan_start_row,
            scan_window=self.settings.scan_window,
            commit=commit,
        )

    def _save(self) -> None:
        try:
            self.path.write_text(
                json.dumps(self._document, indent=2, ensure_ascii=False), encoding="utf-8"
            )
        except OSError as exc:
            raise UpstreamIOError(f"Could not write ledger {self.path}: {exc}") from exc


class WorkbookLedgerStore:
    """Excel workbook opened with openpyxl; saved in place after writing."""

    def __init__(self, path: Path, settings: LedgerSettings) -> None:
        self.path = path
        self.settings = settings
        if not path.exists():
            raise LedgerReadError(f"Ledger file {path} does not exist")
        try:
            self.workbook = load_workbook(path)
        except OSError as exc:
            raise UpstreamIOError(f"Could not read ledger {path}: {exc}") from exc
        except (InvalidFileException, zipfile.BadZipFile, KeyError, ValueError) as exc:
            raise LedgerReadError(f"Ledger {path} is not a readable workbook: {exc}") from exc

    def sheet_titles(self) -> list[str]:
        return list(self.workbook.sheetnames)

    def open_sheet(self, title: str) -> WorksheetLedger:
        resolved = _match_title(self.sheet_titles(), title, self.path)
        return WorksheetLedger(
            self.workbook[resolved],
            scan_start_row=self.settings.scan_start_row,
            scan_window=self.settings.scan_window,
            commit=self._save,
        )

    def _save(self) -> None:
        try:
            self.workbook.save(self.path)
        except OSError as exc:
            raise UpstreamIOError(f"Could not write ledger {self.path}: {exc}") from exc


def open_ledger_store(path: Path, settings: LedgerSettings) -> GridLedgerStore | WorkbookLedgerStore:
    """Open the ledger at ``path`` using the store matching its suffix."""

    suffix = path.suffix.lower()
    if suffix in GRID_SUFFIXES:
        return GridLedgerStore(path, settings)
    if suffix in WORKBOOK_SUFFIXES:
        return WorkbookLedgerStore(path, settings)
    raise ConfigurationError(
        f"Unsupported ledger file '{path.name}'; expected one of "
        f"{', '.join(sorted(GRID_SUFFIXES | WORKBOOK_SUFFIXES))}."
    )
