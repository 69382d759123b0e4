"""Custom exception hierarchy for statepaths.

statepaths errors carry:
- Structured error codes for programmatic handling
- Rich context describing the path, segment and state involved
- Actionable suggestions for recovery

All statepaths errors inherit from StatePathsError and include:
- error_code: A unique ErrorCode enum for categorization
- context: ErrorContext with path/segment/state details
- suggestions: List of actionable steps to resolve the issue

Example:
    try:
        await path.run()
    except ReplayMismatchError as e:
        print(f"Error: {e}")
        print(f"Suggestions: {e.suggestions}")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for statepaths.

    Error codes are organized by category:
    - E1xx: Replay errors (path execution disagrees with generation)
    - E2xx: Configuration errors
    - E3xx: Machine definition errors
    - E4xx: Path execution errors
    - E9xx: Unknown/internal errors
    """

    # Replay errors (E1xx)
    REPLAY_MISMATCH = "E101"

    # Configuration errors (E2xx)
    INVALID_CONFIG = "E201"
    INVALID_EVENT_SOURCE = "E202"

    # Machine definition errors (E3xx)
    INVALID_MACHINE = "E301"

    # Path execution errors (E4xx)
    PATH_FAILED = "E401"

    # Unknown/internal errors (E9xx)
    UNKNOWN = "E999"

    @property
    def category(self) -> str:
        """Get the error category name."""
        code_num = int(self.value[1:])
        if code_num < 200:
            return "replay"
        elif code_num < 300:
            return "config"
        elif code_num < 400:
            return "machine"
        elif code_num < 500:
            return "execution"
        else:
            return "unknown"


@dataclass
class ErrorContext:
    """Structured context for error logging and debugging.

    Attributes:
        path_description: Description of the path being executed
        segment_description: Description of the segment being executed
        state_value: Value of the state involved
        extra: Additional context-specific information
        timestamp: When the error occurred
    """

    path_description: str | None = None
    segment_description: str | None = None
    state_value: Any = None
    extra: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Convert context to dictionary for serialization."""
        result = {
            "path_description": self.path_description,
            "segment_description": self.segment_description,
            "state_value": self.state_value,
            "extra": self.extra,
            "timestamp": self.timestamp.isoformat(),
        }
        return {k: v for k, v in result.items() if v is not None}

    def format_location(self) -> str:
        """Format the error location as a readable string."""
        parts = []
        if self.path_description:
            parts.append(f"path={self.path_description}")
        if self.segment_description:
            parts.append(f"segment={self.segment_description}")
        return " > ".join(parts) if parts else "unknown location"


class StatePathsError(Exception):
    """Base exception for all statepaths errors.

    Attributes:
        error_code: Unique ErrorCode for this error type
        message: Human-readable error description
        context: ErrorContext with execution details
        suggestions: List of actionable steps to resolve the issue
        recoverable: Whether the error can be retried
        cause: The underlying exception (if any)
    """

    error_code: ErrorCode = ErrorCode.UNKNOWN
    default_message: str = "An unexpected error occurred"
    default_suggestions: list[str] = []

    def __init__(
        self,
        message: str | None = None,
        error_code: ErrorCode | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
        recoverable: bool = True,
        suggestions: list[str] | None = None,
        **extra_context: Any,
    ) -> None:
        self.message = message or self.default_message
        self.error_code = error_code or self.error_code
        self.context = context or ErrorContext()
        self.cause = cause
        self.recoverable = recoverable
        self._suggestions = suggestions

        if extra_context:
            self.context.extra.update(extra_context)

        super().__init__(self.message)

    @property
    def suggestions(self) -> list[str]:
        """Get actionable suggestions for resolving this error."""
        if self._suggestions is not None:
            return self._suggestions
        return self.default_suggestions.copy()

    def __str__(self) -> str:
        parts = [f"[{self.error_code.value}] {self.message}"]

        location = self.context.format_location()
        if location != "unknown location":
            parts.append(f"at {location}")

        return " | ".join(parts)

    def format_verbose(self) -> str:
        """Format error with full details including suggestions."""
        lines = [
            f"Error [{self.error_code.value}]: {self.message}",
            "",
        ]

        location = self.context.format_location()
        if location != "unknown location":
            lines.append(f"Location: {location}")

        if self.context.state_value is not None:
            lines.append(f"State: {self.context.state_value}")

        if self.suggestions:
            lines.append("")
            lines.append("Suggestions:")
            for suggestion in self.suggestions:
                lines.append(f"  - {suggestion}")

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error_code": self.error_code.value,
            "error_type": self.__class__.__name__,
            "message": self.message,
            "recoverable": self.recoverable,
            "suggestions": self.suggestions,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
        }


class ReplayMismatchError(StatePathsError):
    """Replaying a segment reached a different state than it recorded.

    Raised during path execution when applying a segment's event to the
    live state produces a value other than the one seen at generation
    time. The machine is either non-deterministic or changed between
    generation and execution.
    """

    error_code = ErrorCode.REPLAY_MISMATCH
    default_message = "Replayed state does not match the generated target"
    default_suggestions = [
        "Regenerate the paths after changing the machine definition",
        "Make sure guards and transitions do not depend on external state",
        "Replay segments from the state returned by the previous segment",
    ]

    def __init__(
        self,
        expected: Any,
        actual: Any,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        self.expected = expected
        self.actual = actual
        kwargs.setdefault("recoverable", False)
        super().__init__(
            message or f"Expected state to be {expected}, but was {actual}",
            **kwargs,
        )


class ConfigurationError(StatePathsError):
    """Path generation or execution was configured incorrectly."""

    error_code = ErrorCode.INVALID_CONFIG
    default_message = "Invalid configuration"
    default_suggestions = [
        "Check the options passed to make_paths()",
        "Validate the YAML configuration file against PathConfig",
    ]


class EventSourceConfigError(ConfigurationError):
    """An event source entry has an unsupported shape.

    Entries must be a list of events, a callable returning a list of
    events, or a callable returning an iterator of events.
    """

    error_code = ErrorCode.INVALID_EVENT_SOURCE
    default_message = "Unsupported event source entry"
    default_suggestions = [
        "Use a list of event dicts, e.g. [{'type': 'INPUT', 'value': 1}]",
        "Use a generator function that yields event dicts",
        "Use a function returning a list of event dicts",
    ]


class MachineDefinitionError(StatePathsError):
    """A statechart definition could not be built."""

    error_code = ErrorCode.INVALID_MACHINE
    default_message = "Invalid machine definition"
    default_suggestions = [
        "Check that every compound state declares an 'initial' child",
        "Check that transition targets name sibling states or '#id' references",
        "Register named actions in the 'actions' mapping",
    ]


class PathExecutionError(StatePathsError):
    """Executing a path failed.

    Wraps the original exception (available as ``cause``) so run results
    can record it alongside the path that failed.
    """

    error_code = ErrorCode.PATH_FAILED
    default_message = "Path execution failed"
