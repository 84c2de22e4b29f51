"""Boundary validation for extraction requests."""

from __future__ import annotations

from collections.abc import Iterable

from ledger_cli.shared.exceptions import ParseError, RequestValidationError

from .types import ExtractionRequest
from .utils.dates import parse_request_date


def parse_extraction_request(
    raw_date: str,
    environment: str,
    *,
    environments: Iterable[str],
    min_year: int = 2024,
) -> ExtractionRequest:
    """Validate raw request parameters and build an :class:`ExtractionRequest`."""

    try:
        extract_date = parse_request_date(raw_date)
    except ParseError as exc:
        raise RequestValidationError(str(exc)) from exc

    if extract_date.year < min_year:
        raise RequestValidationError(
            f"Only can extract data since year greater or equal {min_year}"
        )

    if environment not in set(environments):
        raise RequestValidationError(f"Environment <{environment}> doesn't exists")

    return ExtractionRequest(extract_date=extract_date, environment=environment)
