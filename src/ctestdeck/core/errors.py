"""ctestdeck error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 7xxx: Test runner (execution, catalog, logs)
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004
    NO_BUILD_DIRECTORY = 2005
    INVALID_BUILD_DIRECTORY = 2006

    # Execution (70xx)
    LAUNCH_FAILURE = 7001
    RUN_IN_PROGRESS = 7002

    # Catalog (71xx)
    CATALOG_QUERY_FAILED = 7101
    CATALOG_TEST_NOT_FOUND = 7102
    CATALOG_COMMAND_UNAVAILABLE = 7103

    # Logs (72xx)
    LOG_FILE_MISSING = 7201
    TEST_NOT_FOUND_IN_LOG = 7202


@dataclass(frozen=True, slots=True)
class CTestDeckError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'LAUNCH_FAILURE')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(CTestDeckError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )

    @classmethod
    def no_build_directory(cls) -> "ConfigError":
        return cls(
            code=ErrorCode.NO_BUILD_DIRECTORY,
            message="No build directory selected",
        )

    @classmethod
    def invalid_build_directory(cls, path: str, missing: list[str]) -> "ConfigError":
        return cls(
            code=ErrorCode.INVALID_BUILD_DIRECTORY,
            message=f"Not a CTest build directory: {path} (missing {', '.join(missing)})",
            details={"path": path, "missing": missing},
        )


class ExecutionError(CTestDeckError):
    """Errors starting or supervising a test runner process."""

    @classmethod
    def launch_failure(cls, command: list[str], reason: str) -> "ExecutionError":
        return cls(
            code=ErrorCode.LAUNCH_FAILURE,
            message=f"Failed to launch {command[0] if command else '<empty>'}: {reason}",
            details={"command": command, "reason": reason},
        )

    @classmethod
    def run_in_progress(cls, run_id: str) -> "ExecutionError":
        return cls(
            code=ErrorCode.RUN_IN_PROGRESS,
            message=f"Run {run_id} is still active",
            details={"run_id": run_id},
        )


class CatalogError(CTestDeckError):
    """Errors querying the runner for its test catalog."""

    @classmethod
    def query_failed(cls, build_dir: str, reason: str) -> "CatalogError":
        return cls(
            code=ErrorCode.CATALOG_QUERY_FAILED,
            message=f"Failed to query tests in {build_dir}: {reason}",
            details={"build_dir": build_dir, "reason": reason},
        )

    @classmethod
    def test_not_found(cls, build_dir: str, name: str) -> "CatalogError":
        return cls(
            code=ErrorCode.CATALOG_TEST_NOT_FOUND,
            message=f"No test named '{name}' in {build_dir}",
            details={"build_dir": build_dir, "name": name},
        )

    @classmethod
    def command_unavailable(cls, name: str) -> "CatalogError":
        return cls(
            code=ErrorCode.CATALOG_COMMAND_UNAVAILABLE,
            message=f"Test '{name}' has no command (is it built?)",
            details={"name": name},
        )


class LogError(CTestDeckError):
    """Errors extracting a test's section from the persisted log."""

    @classmethod
    def file_missing(cls, path: str) -> "LogError":
        return cls(
            code=ErrorCode.LOG_FILE_MISSING,
            message=f"Log file not found: {path}",
            details={"path": path},
        )

    @classmethod
    def test_not_found(cls, path: str, name: str) -> "LogError":
        return cls(
            code=ErrorCode.TEST_NOT_FOUND_IN_LOG,
            message=f"No output for test '{name}' in {path}",
            details={"path": path, "name": name},
        )
