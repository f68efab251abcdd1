"""Shared helpers for usage-report."""

from usage_common.errors import (
    ClockError,
    ExecError,
    LogSetupError,
    SpawnError,
    UsageError,
    UsageQueryError,
    wrap_error,
)
from usage_common.logging import configure_logging

__all__ = [
    "ClockError",
    "ExecError",
    "LogSetupError",
    "SpawnError",
    "UsageError",
    "UsageQueryError",
    "configure_logging",
    "wrap_error",
]
