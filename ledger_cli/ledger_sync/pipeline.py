"""Extraction run: extract text in, reconciled ledger rows out.

Each run owns a fresh :class:`RunContext`; nothing is shared between runs.
The ledger is written exactly once, after every stage has succeeded, and any
failure comes back as a :class:`RunFailure` instead of propagating.
"""

from __future__ import annotations

import traceback
from pathlib import Path

from ledger_cli.shared.config import AppConfig, ExtractSettings
from ledger_cli.shared.exceptions import LedgerSyncError, NoRowsToAppendError
from ledger_cli.shared.logging import Logger, get_logger

from .extract import filter_extract_text, parse_transactions, persist_filtered_extract, read_extract
from .ledger import LedgerAccess, read_ledger_tail
from .matcher import find_last_registry, pending_transactions
from .materialize import materialize_rows
from .stores import open_ledger_store
from .types import (
    ExtractionRequest,
    LedgerTailState,
    RunContext,
    RunFailure,
    RunResult,
    RunStage,
    RunSuccess,
)
from .utils.dates import sheet_title_for
from .window import select_month_window


def _failure(exc: Exception, logger: Logger) -> RunFailure:
    kind = exc.kind if isinstance(exc, LedgerSyncError) else type(exc).__name__
    logger.debug(f"Run aborted with {kind}: {exc}")
    return RunFailure(message=str(exc), error_kind=kind, trace=traceback.format_exc())


def _staged(logger: Logger, context: RunContext) -> Logger:
    return logger.for_stage(context.stage.value)


def reconcile(
    context: RunContext,
    *,
    extract_text: str,
    ledger: LedgerAccess,
    settings: ExtractSettings,
    logger: Logger,
    data_dir: Path | None = None,
) -> RunContext:
    """Advance ``context`` from IDLE to MATERIALIZED without writing the ledger."""

    request = context.request

    context.cleaned_text = filter_extract_text(
        extract_text,
        metadata_markers=settings.metadata_markers,
        header_keywords=settings.header_keywords,
    )
    context.advance(RunStage.FILTERED)
    if data_dir is not None:
        saved = persist_filtered_extract(context.cleaned_text, data_dir)
        _staged(logger, context).debug(f"Cleaned extract saved to {saved}")

    context.transactions = list(
        parse_transactions(context.cleaned_text, delimiter=settings.delimiter)
    )
    context.advance(RunStage.PARSED)
    _staged(logger, context).debug(f"Parsed {len(context.transactions)} transactions from extract")

    context.window = select_month_window(context.transactions, request.month, request.year)
    context.advance(RunStage.WINDOWED)
    window_note = " (no later month found; full extract kept)" if context.window.degenerate else ""
    _staged(logger, context).info(
        f"{len(context.window)} transactions selected for "
        f"{request.month:02d}/{request.year}{window_note}"
    )

    context.tail = read_ledger_tail(ledger, logger=logger.for_stage(RunStage.TAIL_READ.value))
    context.advance(RunStage.TAIL_READ)
    if context.tail.is_empty:
        _staged(logger, context).debug(
            "Ledger sheet is empty; every selected transaction will be appended"
        )
    else:
        _staged(logger, context).debug(
            f"Ledger tail at row {context.tail.row_number}: {context.tail.date} "
            f"expenditure={context.tail.expenditure} income={context.tail.income}"
        )

    context.match = find_last_registry(context.window.transactions, context.tail)
    context.advance(RunStage.MATCHED)
    pending = pending_transactions(context.window.transactions, context.match)
    if not pending:
        raise NoRowsToAppendError("No data to update.")
    if context.match.matched:
        _staged(logger, context).debug(
            f"Last recorded transaction found at window index {context.match.index}"
        )

    context.rows = materialize_rows(pending)
    context.advance(RunStage.MATERIALIZED)
    return context


def run_extraction(
    request: ExtractionRequest,
    *,
    extract_text: str,
    ledger: LedgerAccess,
    settings: ExtractSettings,
    ledger_name: str = "",
    sheet: str = "",
    data_dir: Path | None = None,
    dry_run: bool = False,
    logger: Logger | None = None,
) -> RunResult:
    """Reconcile ``extract_text`` against ``ledger`` and append the new rows."""

    logger = logger or get_logger()
    context = RunContext(request=request)
    try:
        reconcile(
            context,
            extract_text=extract_text,
            ledger=ledger,
            settings=settings,
            logger=logger,
            data_dir=None if dry_run else data_dir,
        )
        if not dry_run:
            ledger.write_rows(context.rows, context.tail or LedgerTailState.empty())
        context.advance(RunStage.DONE)
    except LedgerSyncError as exc:
        return _failure(exc, logger)
    except Exception as exc:  # pragma: no cover
        return _failure(exc, logger)

    return RunSuccess(
        environment=request.environment,
        ledger=ledger_name,
        sheet=sheet or sheet_title_for(request.extract_date),
        rows=tuple(context.rows),
        dry_run=dry_run,
    )


def sync_extract(
    request: ExtractionRequest,
    *,
    extract_path: str | Path,
    config: AppConfig,
    ledger_path: Path | None = None,
    dry_run: bool = False,
    logger: Logger | None = None,
) -> RunResult:
    """Read the extract, open the month sheet of the environment's ledger and run."""

    logger = logger or get_logger()
    sheet = sheet_title_for(request.extract_date)
    try:
        extract_text = read_extract(extract_path)
        path = ledger_path or config.ledger.ledger_path(request.environment)
        store = open_ledger_store(path, config.ledger)
        ledger = store.open_sheet(sheet)
    except LedgerSyncError as exc:
        return _failure(exc, logger)

    logger.debug(f"Reconciling {extract_path} against {path} [{sheet}]")
    return run_extraction(
        request,
        extract_text=extract_text,
        ledger=ledger,
        settings=config.extract,
        ledger_name=str(path),
        sheet=sheet,
        data_dir=config.data_dir,
        dry_run=dry_run,
        logger=logger,
    )
