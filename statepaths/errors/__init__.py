"""Error exports."""

from statepaths.errors.base import (
    ConfigurationError,
    ErrorCode,
    ErrorContext,
    EventSourceConfigError,
    MachineDefinitionError,
    PathExecutionError,
    ReplayMismatchError,
    StatePathsError,
)

__all__ = [
    "ConfigurationError",
    "ErrorCode",
    "ErrorContext",
    "EventSourceConfigError",
    "MachineDefinitionError",
    "PathExecutionError",
    "ReplayMismatchError",
    "StatePathsError",
]
