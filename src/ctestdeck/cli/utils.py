"""CLI utilities."""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import click

from ctestdeck.config.models import CTestDeckConfig
from ctestdeck.core.errors import CTestDeckError
from ctestdeck.core.logging import get_log_file_path, get_logger
from ctestdeck.testing.discovery import validate_build_directory
from ctestdeck.testing.session import TestSession

log = get_logger("cli")


def get_config(ctx: click.Context) -> CTestDeckConfig:
    obj = ctx.find_object(dict) or {}
    return obj.get("config") or CTestDeckConfig()


@contextmanager
def reported_errors() -> Iterator[None]:
    """Turn ctestdeck errors into clean click errors (no traceback).

    The full error goes to the log; when a log file is configured the
    message ends with a pointer to it.
    """
    try:
        yield
    except CTestDeckError as e:
        log.info("command_failed", **e.to_dict())
        message = e.message
        if (log_file := get_log_file_path()) is not None:
            message = f"{message}. See {log_file} for details."
        raise click.ClickException(message) from e


def open_session(ctx: click.Context, build_dir: Path) -> TestSession:
    """Validate ``build_dir`` and create a session for it.

    Raises:
        click.ClickException: If the directory is not a CTest build directory.
    """
    config = get_config(ctx)
    with reported_errors():
        resolved = validate_build_directory(build_dir, config.discovery)
    return TestSession(resolved, config=config)
