"""Currency parsing helpers for extract and ledger amounts.

Two parsers coexist because the two sides store money differently:

* the bank extract writes amounts as zero-padded decimal-comma strings
  (``0000012500,00``), handled by :func:`parse_statement_amount`;
* ledger cells hold formatted currency (``$12.500``), handled by
  :func:`convert_currency_string_to_number`, which keeps only the digits.
"""

from __future__ import annotations

import re
from numbers import Real

_NON_DIGIT_RE = re.compile(r"[^\d]")
_LEADING_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)")


def convert_currency_string_to_number(value: object) -> int | float:
    """Strip every non-digit character and read the rest as an integer.

    Numeric values pass through untouched. Anything without digits yields ``0``.
    """

    if isinstance(value, bool):
        return 0
    if isinstance(value, Real):
        return value  # type: ignore[return-value]
    digits = _NON_DIGIT_RE.sub("", str(value or ""))
    if not digits:
        return 0
    return int(digits)


def parse_statement_amount(value: str | None) -> float | None:
    """Parse a decimal-comma extract amount such as ``0001234`` or ``12,50``.

    Leading zeros are dropped and the first comma becomes the decimal point.
    Returns ``None`` when no number can be read.
    """

    cleaned = (value or "").strip().lstrip("0").replace(",", ".", 1)
    match = _LEADING_NUMBER_RE.match(cleaned)
    if not match:
        return None
    return float(match.group())
