"""Shared error taxonomy for usage-report."""

from __future__ import annotations

from typing import Any, Mapping, TypeVar


def _normalize_context_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return normalize_context(value)
    if isinstance(value, (list, tuple)):
        return [_normalize_context_value(item) for item in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


def normalize_context(context: Mapping[str, Any]) -> dict[str, Any]:
    """Return a JSON-friendly copy of an error context mapping."""
    return {key: _normalize_context_value(val) for key, val in context.items()}


class UsageError(Exception):
    """Base error type for a failed launch/report stage."""

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.context = normalize_context(context or {})
        if cause is not None:
            self.__cause__ = cause

    @property
    def error_type(self) -> str:
        return self.__class__.__name__

    @property
    def reason(self) -> str:
        """Platform description of the underlying failure."""
        cause = self.__cause__
        if cause is None:
            return "Unknown error"
        strerror = getattr(cause, "strerror", None)
        if strerror:
            return strerror
        return str(cause) or cause.__class__.__name__

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.error_type,
            "message": str(self),
            "reason": self.reason,
            "context": self.context,
        }


class SpawnError(UsageError):
    """The child process could not be created."""


class ExecError(UsageError):
    """The child could not run the requested command."""


class ClockError(UsageError):
    """A wall-clock timestamp could not be read."""


class UsageQueryError(UsageError):
    """Resource-usage statistics could not be retrieved."""


class LogSetupError(UsageError):
    """The configured log file could not be opened."""


T = TypeVar("T", bound=UsageError)


def wrap_error(
    error_cls: type[T],
    message: str,
    *,
    context: Mapping[str, Any] | None = None,
    cause: Exception | None = None,
) -> T:
    """Create a typed UsageError with optional context and cause."""
    return error_cls(message, context=context, cause=cause)
