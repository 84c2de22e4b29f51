"""ledger-sync CLI entrypoint."""

from __future__ import annotations

from pathlib import Path

import click

from ledger_cli.shared.cli import CLIContext, common_cli_options, handle_cli_errors, pass_cli_context

from .extract import filter_extract_text, read_extract
from .ledger import read_ledger_tail
from .pipeline import sync_extract
from .render import render_result, render_tail
from .request import parse_extraction_request
from .stores import open_ledger_store
from .types import ExtractionRequest, RunFailure
from .utils.dates import sheet_title_for

_DATE_HELP = "Any day of the month to reconcile, as DD/MM/YYYY."


@click.group(help="Append new bank extract transactions to the monthly ledger.")
@common_cli_options
def main(cli_ctx: CLIContext) -> None:
    return


@main.command("run", help="Reconcile an extract against the ledger and append new rows.")
@click.argument("extract", type=click.Path(exists=True, dir_okay=False, path_type=str))
@click.option("--date", "extract_date", required=True, help=_DATE_HELP)
@click.option("--env", "environment", required=True, help="Ledger environment (e.g. dev, prod).")
@click.option("--ledger", "ledger_path", type=click.Path(path_type=str), help="Override the ledger file.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "table"], case_sensitive=False),
    default="json",
    show_default=True,
    help="Output format for the run result.",
)
@handle_cli_errors
@pass_cli_context
def run_command(
    cli_ctx: CLIContext,
    extract: str,
    extract_date: str,
    environment: str,
    ledger_path: str | None,
    output_format: str,
) -> None:
    request = _build_request(cli_ctx, extract_date, environment)
    result = sync_extract(
        request,
        extract_path=extract,
        config=cli_ctx.config,
        ledger_path=Path(ledger_path).expanduser() if ledger_path else None,
        dry_run=cli_ctx.dry_run,
        logger=cli_ctx.logger,
    )
    render_result(
        result,
        output_format=output_format,
        include_trace=cli_ctx.verbose,
    )
    if isinstance(result, RunFailure):
        cli_ctx.logger.error(result.message)
        raise click.exceptions.Exit(1)
    if result.dry_run:
        cli_ctx.logger.info(f"Dry run: {result.appended} rows would be appended to {result.sheet}")
    else:
        cli_ctx.logger.success(f"Appended {result.appended} rows to {result.sheet} ({result.ledger})")


@main.command("filter", help="Strip metadata lines from an extract and normalize its header.")
@click.argument("extract", type=click.Path(exists=True, dir_okay=False, path_type=str))
@click.option("--output", "output_path", type=click.Path(path_type=str), help="Write to file (default stdout).")
@handle_cli_errors
@pass_cli_context
def filter_command(cli_ctx: CLIContext, extract: str, output_path: str | None) -> None:
    settings = cli_ctx.config.extract
    cleaned = filter_extract_text(
        read_extract(extract),
        metadata_markers=settings.metadata_markers,
        header_keywords=settings.header_keywords,
    )
    if output_path is None:
        click.echo(cleaned, nl=not cleaned.endswith("\n"))
        return
    path = Path(output_path).expanduser()
    if cli_ctx.dry_run:
        cli_ctx.logger.info(f"Dry run: cleaned extract not written to {path}")
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(cleaned, encoding="utf-8")
    cli_ctx.logger.info(f"Cleaned extract written to {path}")


@main.command("tail", help="Show the last recorded row of the month sheet.")
@click.option("--date", "extract_date", required=True, help=_DATE_HELP)
@click.option("--env", "environment", required=True, help="Ledger environment (e.g. dev, prod).")
@click.option("--ledger", "ledger_path", type=click.Path(path_type=str), help="Override the ledger file.")
@handle_cli_errors
@pass_cli_context
def tail_command(
    cli_ctx: CLIContext,
    extract_date: str,
    environment: str,
    ledger_path: str | None,
) -> None:
    request = _build_request(cli_ctx, extract_date, environment)
    path = (
        Path(ledger_path).expanduser()
        if ledger_path
        else cli_ctx.config.ledger.ledger_path(request.environment)
    )
    sheet = sheet_title_for(request.extract_date)
    store = open_ledger_store(path, cli_ctx.config.ledger)
    tail = read_ledger_tail(store.open_sheet(sheet), logger=cli_ctx.logger)
    render_tail(tail, sheet=sheet)


def _build_request(cli_ctx: CLIContext, extract_date: str, environment: str) -> ExtractionRequest:
    return parse_extraction_request(
        extract_date,
        environment,
        environments=cli_ctx.config.ledger.environments,
        min_year=cli_ctx.config.extract.min_year,
    )


if __name__ == "__main__":  # pragma: no cover
    main()
