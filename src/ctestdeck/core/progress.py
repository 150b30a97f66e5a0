"""User-facing console feedback for CLI operations.

Usage::

    from ctestdeck.core.progress import spinner, status

    status("Found 3 build directories", style="success")  # ✓ Found ...

    # Spinner with log suppression
    with spinner("Querying ctest"):
        do_work()  # structlog console output suppressed during this block
"""

from __future__ import annotations

import logging
import sys
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ctestdeck.testing.models import TestRecord, TestStatus

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

_console = Console(stderr=True)

_STYLES = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
    "none": "",
}

STATUS_STYLES: dict[TestStatus, str] = {
    TestStatus.NOT_RUN: "dim",
    TestStatus.RUNNING: "cyan",
    TestStatus.PASSED: "green",
    TestStatus.FAILED: "red",
    TestStatus.TIMEOUT: "yellow",
}

_suppress_console_logs = threading.local()


def is_console_suppressed() -> bool:
    """Check if console logging is currently suppressed."""
    return getattr(_suppress_console_logs, "active", False)


@contextmanager
def suppress_console_logs() -> Iterator[None]:
    """Suppress structlog console output while a live display is shown.

    File handlers keep receiving logs.
    """
    _suppress_console_logs.active = True
    try:
        yield
    finally:
        _suppress_console_logs.active = False


class ConsoleSuppressingFilter(logging.Filter):
    """Filter that blocks console output when suppression is active."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: ARG002
        return not is_console_suppressed()


def _get_logger() -> BoundLogger:
    """Get logger lazily to respect runtime config."""
    from ctestdeck.core.logging import get_logger

    return get_logger("progress")


def _is_tty() -> bool:
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


def get_console() -> Console:
    """Get the shared Rich console instance."""
    return _console


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print a styled status message to stderr."""
    prefix = _STYLES.get(style, "")
    padding = " " * indent
    _console.print(f"{padding}{prefix}{message}", highlight=False)

    _get_logger().debug("status", message=message, style=style)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return '<count> <word>' with the word pluralized when needed."""
    word = singular if count == 1 else (plural or f"{singular}s")
    return f"{count} {word}"


@contextmanager
def spinner(message: str, *, indent: int = 0) -> Iterator[None]:
    """Context manager for a spinner with log suppression."""
    padding = " " * indent
    if _is_tty():
        with (
            suppress_console_logs(),
            _console.status(f"{padding}[cyan]{message}[/cyan]", spinner="dots"),
        ):
            yield
    else:
        _console.print(f"{padding}{message}...")
        yield


def format_record(name: str, record: TestRecord) -> Text:
    """One styled line for a status update: ``Passed  name  (0.12s)``."""
    line = Text()
    line.append(f"{record.status.label:<8}", style=STATUS_STYLES[record.status])
    line.append(f" {name}")
    if record.elapsed_seconds is not None:
        line.append(f"  ({record.elapsed_seconds:.2f}s)", style="dim")
    return line


def make_status_table(records: Mapping[str, TestRecord]) -> Table:
    """Build a table of every recorded test and its latest status."""
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Test")
    table.add_column("Status")
    table.add_column("Time", justify="right")

    for name, record in sorted(records.items()):
        elapsed = f"{record.elapsed_seconds:.2f}s" if record.elapsed_seconds is not None else ""
        table.add_row(
            name,
            Text(record.status.label, style=STATUS_STYLES[record.status]),
            elapsed,
        )
    return table
