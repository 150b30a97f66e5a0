"""Test runner front end: execution, status streaming and log lookup."""

from ctestdeck.testing.models import (
    LogRange,
    RunRequest,
    StatusTable,
    TestCommand,
    TestRecord,
    TestStatus,
)
from ctestdeck.testing.session import TestSession

__all__ = [
    "TestSession",
    "TestStatus",
    "TestRecord",
    "StatusTable",
    "RunRequest",
    "TestCommand",
    "LogRange",
]
