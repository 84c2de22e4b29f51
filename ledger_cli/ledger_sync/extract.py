"""Raw extract cleanup and transaction parsing."""

from __future__ import annotations

import csv
import time
from collections.abc import Iterable, Iterator
from pathlib import Path

from ledger_cli.shared.config import DEFAULT_HEADER_KEYWORDS, DEFAULT_METADATA_MARKERS
from ledger_cli.shared.exceptions import ParseError, UpstreamIOError

from .types import Transaction

# Lowercased header name -> Transaction field.
COLUMN_FIELDS = {
    "fecha": "date",
    "cargos": "charges",
    "abonos": "credits",
    "descripcion": "description",
    "saldo": "balance",
}


def filter_extract_text(
    text: str,
    *,
    metadata_markers: Iterable[str] = DEFAULT_METADATA_MARKERS,
    header_keywords: Iterable[str] = DEFAULT_HEADER_KEYWORDS,
) -> str:
    """Drop statement metadata lines and lowercase the header keywords.

    Keyword replacement is case-sensitive and applies to every remaining
    line, not only the header.
    """

    markers = tuple(metadata_markers)
    keywords = tuple(header_keywords)
    kept: list[str] = []
    for line in text.split("\n"):
        if any(marker in line for marker in markers):
            continue
        for keyword in keywords:
            line = line.replace(keyword, keyword.lower())
        kept.append(line)
    return "\n".join(kept)


def parse_transactions(text: str, *, delimiter: str = ";") -> Iterator[Transaction]:
    """Yield transactions from cleaned extract text.

    The first non-blank line is the header. Unknown columns are ignored and
    missing cells become empty strings.
    """

    lines = (line.rstrip("\r") for line in text.split("\n"))
    reader = csv.reader((line for line in lines if line.strip()), delimiter=delimiter)
    header = next(reader, None)
    if header is None:
        raise ParseError("Extract has no header row")
    columns = [name.strip().lower() for name in header]
    if "fecha" not in columns:
        raise ParseError(f"Extract header has no 'fecha' column: {delimiter.join(header)}")

    for cells in reader:
        values: dict[str, str] = {}
        for name, cell in zip(columns, cells):
            field_name = COLUMN_FIELDS.get(name)
            if field_name and field_name not in values:
                values[field_name] = cell
        if not any(value.strip() for value in values.values()):
            continue
        values.setdefault("date", "")
        values["description"] = values.get("description", "").strip()
        yield Transaction(**values)


def read_extract(path: str | Path, *, encoding: str = "utf-8") -> str:
    """Read raw extract text from disk."""

    try:
        return Path(path).expanduser().read_text(encoding=encoding)
    except OSError as exc:
        raise UpstreamIOError(f"Could not read extract '{path}': {exc}") from exc


def persist_filtered_extract(text: str, data_dir: Path) -> Path:
    """Write cleaned extract text to ``data-<epoch-ms>.csv`` inside ``data_dir``."""

    target = data_dir / f"data-{int(time.time() * 1000)}.csv"
    try:
        data_dir.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise UpstreamIOError(f"Could not write cleaned extract to {target}: {exc}") from exc
    return target
