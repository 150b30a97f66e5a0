"""Core module exports."""

from ctestdeck.core.errors import (
    CatalogError,
    ConfigError,
    CTestDeckError,
    ErrorCode,
    ExecutionError,
    LogError,
)
from ctestdeck.core.logging import (
    configure_logging,
    get_log_file_path,
    get_logger,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "CTestDeckError",
    "CatalogError",
    "ConfigError",
    "ErrorCode",
    "ExecutionError",
    "LogError",
    # Logging
    "configure_logging",
    "get_log_file_path",
    "get_logger",
    "get_run_id",
    "set_run_id",
]
