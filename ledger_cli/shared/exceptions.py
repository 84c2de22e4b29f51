"""Project-wide custom exceptions."""

from __future__ import annotations


class LedgerSyncError(Exception):
    """Base exception for the ledger sync tooling."""

    kind = "LedgerSyncError"


class ConfigurationError(LedgerSyncError):
    """Raised when configuration loading or validation fails."""

    kind = "ConfigurationError"


class RequestValidationError(LedgerSyncError):
    """Raised when extraction request parameters are rejected at the boundary."""

    kind = "RequestValidationError"


class ParseError(LedgerSyncError):
    """Raised for malformed extract headers, dates or currency fields."""

    kind = "ParseError"


class NoDataForMonthError(LedgerSyncError):
    """Raised when no transaction falls in the requested month."""

    kind = "NoDataForMonth"


class LedgerReadError(LedgerSyncError):
    """Raised when the ledger (or its month sheet) cannot be located or read."""

    kind = "LedgerReadFailure"


class EmptyLedgerError(LedgerReadError):
    """Raised when the ledger source holds no sheets at all."""

    kind = "EmptyLedger"


class NoRowsToAppendError(LedgerSyncError):
    """Raised when every transaction in the window is already recorded."""

    kind = "NoRowsToAppend"


class UpstreamIOError(LedgerSyncError):
    """Raised when reading the extract or reading/writing the ledger store fails."""

    kind = "UpstreamIOError"
