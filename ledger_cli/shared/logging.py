"""Rich-based logging helpers shared across ledger sync commands.

Log lines go to stderr so stdout stays reserved for JSON payloads and tables.
A logger can be bound to a run stage with :meth:`Logger.for_stage`; every
message it emits is then prefixed with the stage name, e.g.
``[windowed] 5 transactions selected for 03/2024``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from rich.console import Console
from rich.theme import Theme
from rich.traceback import install

install(show_locals=False)

_THEME = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "success": "bold green",
        "debug": "dim",
    }
)

# Highlighting is off so amounts and dates inside messages stay free of ANSI codes.
_stderr_console = Console(stderr=True, theme=_THEME, highlight=False)


@dataclass(frozen=True, slots=True)
class Logger:
    """Stderr logger facade; ``debug`` only prints when ``verbose`` is set."""

    verbose: bool = False
    stage: str | None = None

    def for_stage(self, stage: str) -> Logger:
        return replace(self, stage=stage)

    def info(self, message: str) -> None:
        self._emit(message, "info")

    def success(self, message: str) -> None:
        self._emit(message, "success")

    def warning(self, message: str) -> None:
        self._emit(message, "warning")

    def error(self, message: str) -> None:
        self._emit(message, "error")

    def debug(self, message: str) -> None:
        if self.verbose:
            self._emit(message, "debug")

    def _emit(self, message: str, style: str) -> None:
        if self.stage:
            message = f"[{self.stage}] {message}"
        _stderr_console.print(message, style=style, markup=False)


def get_logger(verbose: bool = False) -> Logger:
    """Return a configured Logger instance."""
    return Logger(verbose=verbose)
