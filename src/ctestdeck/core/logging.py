"""structlog setup for ctestdeck.

Events from the library go through stdlib ``logging`` so every output in
``LoggingConfig.outputs`` gets its own handler, level and renderer. While
an execution handle pumps runner output, its run id is bound in a context
variable and added to every event, which keeps overlapping runs apart in
log files.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from ctestdeck.config.models import LoggingConfig, LogOutputConfig

_run_id: ContextVar[str | None] = ContextVar("run_id", default=None)

# First file output of the active configuration; the CLI points users at it.
_log_file: Path | None = None

_CONSOLE_DESTINATIONS = {"stderr", "stdout"}


def get_run_id() -> str | None:
    return _run_id.get()


def set_run_id(run_id: str | None = None) -> str:
    """Bind ``run_id`` (or a fresh one) to the current context."""
    rid = run_id or uuid4().hex[:8]
    _run_id.set(rid)
    return rid


def get_log_file_path() -> Path | None:
    """The file that receives full event details, if one is configured."""
    return _log_file


def _add_run_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    rid = get_run_id()
    if rid is not None:
        event_dict.setdefault("run_id", rid)
    return event_dict


def _level_number(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Install structlog and one stdlib handler per configured output.

    Without ``config`` a single stderr output is used, rendered as JSON when
    ``json_format`` is set. Reconfiguring replaces all previous handlers.
    """
    from ctestdeck.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,  # type: ignore[arg-type]
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    root_level = _level_number(config.level)
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
        _add_run_id,  # type: ignore[list-item]
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Uncached so a later configure_logging() call takes effect everywhere.
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for old in root.handlers:
        old.close()
    root.handlers.clear()
    root.setLevel(root_level)

    global _log_file
    _log_file = None
    for output in config.outputs:
        if output.destination not in _CONSOLE_DESTINATIONS and _log_file is None:
            _log_file = Path(output.destination)
        handler = _make_handler(output, pre_chain)
        handler.setLevel(_level_number(output.level or config.level))
        root.addHandler(handler)


def _make_handler(
    output: LogOutputConfig, pre_chain: list[structlog.types.Processor]
) -> logging.Handler:
    handler: logging.Handler
    if output.destination == "stderr":
        handler = logging.StreamHandler(sys.stderr)
    elif output.destination == "stdout":
        handler = logging.StreamHandler(sys.stdout)
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a")

    on_console = output.destination in _CONSOLE_DESTINATIONS
    if on_console:
        from ctestdeck.core.progress import ConsoleSuppressingFilter

        handler.addFilter(ConsoleSuppressingFilter())

    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=on_console and sys.stderr.isatty(),
            pad_event_to=0,
            pad_level=False,
        )
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)
    )
    return handler


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]
