"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (CTESTDECK__SECTION__KEY)
3. Explicit YAML file (--config PATH)
4. Global YAML (~/.config/ctestdeck/config.yaml)
5. Built-in defaults (this file)

Examples:
    CTESTDECK__LOGGING__LEVEL=DEBUG
    CTESTDECK__RUNNER__EXCLUSIVE_RUNS=true
    CTESTDECK__RUNNER__CTEST_COMMAND='["/opt/cmake/bin/ctest"]'
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        CTESTDECK__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. INFO logs every run start and exit.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class RunnerConfig(BaseModel):
    """How the test runner is invoked and its output consumed.

    Env vars:
        CTESTDECK__RUNNER__CTEST_COMMAND: Base invocation (JSON list)
        CTESTDECK__RUNNER__EXCLUSIVE_RUNS: Reject a run while another is active
    """

    ctest_command: list[str] = Field(
        default_factory=lambda: ["ctest"],
        description="Base invocation of the test runner (executable plus fixed args).",
    )
    output_on_failure: bool = Field(
        default=True,
        description="Pass --output-on-failure so failing tests print their output.",
    )
    extra_args: list[str] = Field(
        default_factory=list,
        description="Extra arguments appended before the test filter (e.g. ['-j', '8']).",
    )
    read_chunk_size: int = Field(
        default=65536,
        description="Maximum bytes read from the runner per output increment.",
    )
    catalog_timeout_sec: float = Field(
        default=60.0,
        description="Timeout for catalog queries (ctest --show-only).",
    )
    log_relpath: str = Field(
        default="Testing/Temporary/LastTest.log",
        description="Location of the runner's persisted log, relative to the build directory.",
    )
    exclusive_runs: bool = Field(
        default=False,
        description="Reject starting a run while another run of the session is active.",
    )
    terminate_grace_sec: float = Field(
        default=5.0,
        description="Seconds between SIGTERM and SIGKILL when a run is cancelled.",
    )

    @field_validator("ctest_command")
    @classmethod
    def validate_ctest_command(cls, v: list[str]) -> list[str]:
        if not v or not v[0]:
            raise ValueError("ctest_command must name an executable")
        return v

    @field_validator("read_chunk_size")
    @classmethod
    def validate_read_chunk_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"read_chunk_size must be positive, got {v}")
        return v


class DiscoveryConfig(BaseModel):
    """Build directory discovery.

    Env vars:
        CTESTDECK__DISCOVERY__MAX_DEPTH: How deep below the root to look
    """

    markers: list[str] = Field(
        default_factory=lambda: ["CMakeCache.txt", "CTestTestfile.cmake"],
        description="Files that must all exist for a directory to count as a build directory.",
    )
    max_depth: int = Field(
        default=3,
        description="Maximum directory depth searched below the root.",
    )
    pruned_dirs: list[str] = Field(
        default_factory=lambda: [
            ".git",
            ".hg",
            ".svn",
            "node_modules",
            ".venv",
            "venv",
            "__pycache__",
            "CMakeFiles",
            "Testing",
        ],
        description="Directory names never descended into.",
    )

    @field_validator("max_depth")
    @classmethod
    def validate_max_depth(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"max_depth must be >= 0, got {v}")
        return v


class CTestDeckConfig(BaseModel):
    """Root configuration for ctestdeck."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    runner: RunnerConfig = Field(default_factory=RunnerConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
