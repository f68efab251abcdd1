"""Data models for the usage reporter."""

from usage_runner.models.config import LoggingConfig
from usage_runner.models.report import UsageReport

__all__ = ["LoggingConfig", "UsageReport"]
