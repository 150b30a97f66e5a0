"""Config module exports."""

from ctestdeck.config.loader import load_config
from ctestdeck.config.models import (
    CTestDeckConfig,
    DiscoveryConfig,
    LoggingConfig,
    LogOutputConfig,
    RunnerConfig,
)

__all__ = [
    "load_config",
    "CTestDeckConfig",
    "DiscoveryConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "RunnerConfig",
]
