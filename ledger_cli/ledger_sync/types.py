"""Dataclasses describing extract transactions, ledger rows and run state."""

from __future__ import annotations

import enum
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Any


@dataclass(frozen=True, slots=True)
class Transaction:
    """One extract line, fields kept as the raw strings found in the file."""

    date: str
    charges: str = ""
    credits: str = ""
    description: str = ""
    balance: str = ""


@dataclass(frozen=True, slots=True)
class LedgerRow:
    """A row appended to the destination ledger."""

    date: str
    expenditure: float | None
    income: float | None
    description: str

    def as_cells(self) -> list[Any]:
        """Return the row as grid cells (date, expenditure, income, description)."""
        return [
            self.date,
            "" if self.expenditure is None else self.expenditure,
            "" if self.income is None else self.income,
            self.description,
        ]


@dataclass(frozen=True, slots=True)
class LedgerTailState:
    """Last populated ledger row, used as the reconciliation anchor."""

    date: str = ""
    expenditure: float = 0
    income: float = 0
    row_number: int | None = None

    @classmethod
    def empty(cls) -> LedgerTailState:
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.date


@dataclass(frozen=True, slots=True)
class ExtractionRequest:
    """Validated request parameters for a single extraction run."""

    extract_date: date
    environment: str

    @property
    def month(self) -> int:
        return self.extract_date.month

    @property
    def year(self) -> int:
        return self.extract_date.year


@dataclass(frozen=True, slots=True)
class MonthWindow:
    """Contiguous run of transactions selected for the target month.

    ``degenerate`` is set when no later month bounded the window and the
    whole sequence was kept.
    """

    start: int
    end: int
    transactions: list[Transaction]
    degenerate: bool = False

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self.transactions)

    def __len__(self) -> int:
        return len(self.transactions)


@dataclass(frozen=True, slots=True)
class RegistryMatch:
    """Position of the last transaction already present in the ledger."""

    index: int = 0
    matched: bool = False

    @property
    def append_from(self) -> int:
        return self.index + 1 if self.matched else 0


class RunStage(enum.Enum):
    IDLE = "idle"
    FILTERED = "filtered"
    PARSED = "parsed"
    WINDOWED = "windowed"
    TAIL_READ = "tail_read"
    MATCHED = "matched"
    MATERIALIZED = "materialized"
    DONE = "done"


_STAGE_ORDER = tuple(RunStage)


@dataclass(slots=True)
class RunContext:
    """Per-run state threaded through every pipeline stage."""

    request: ExtractionRequest
    stage: RunStage = RunStage.IDLE
    cleaned_text: str = ""
    transactions: list[Transaction] = field(default_factory=list)
    window: MonthWindow | None = None
    tail: LedgerTailState | None = None
    match: RegistryMatch | None = None
    rows: list[LedgerRow] = field(default_factory=list)

    def advance(self, stage: RunStage) -> None:
        """Move to the next stage; stages only ever move one step forward."""
        position = _STAGE_ORDER.index(self.stage) + 1
        if position >= len(_STAGE_ORDER) or stage is not _STAGE_ORDER[position]:
            raise RuntimeError(f"Cannot move from {self.stage.value} to {stage.value}")
        self.stage = stage


@dataclass(frozen=True, slots=True)
class RunSuccess:
    environment: str
    ledger: str
    sheet: str
    rows: Sequence[LedgerRow]
    dry_run: bool = False

    ok = True

    @property
    def appended(self) -> int:
        return len(self.rows)

    def to_payload(self) -> dict[str, Any]:
        return {
            "status": "dry-run" if self.dry_run else "ok",
            "environment": self.environment,
            "ledger": self.ledger,
            "sheet": self.sheet,
            "appended": self.appended,
        }


@dataclass(frozen=True, slots=True)
class RunFailure:
    message: str
    error_kind: str
    trace: str | None = None

    ok = False

    def to_payload(self, *, include_trace: bool = False) -> dict[str, Any]:
        payload: dict[str, Any] = {"message": self.message, "error": self.error_kind}
        if include_trace and self.trace:
            payload["trace"] = self.trace
        return payload


RunResult = RunSuccess | RunFailure
