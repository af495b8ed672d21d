"""Exception taxonomy for tool calling.

Only ModelInvocationError ever leaves the orchestrator. Validation failures are
raised by the validator but converted into failed ToolResults before the
orchestrator returns; malformed markers are never raised at all.
"""

from typing import Any


class ToolCallingError(Exception):
    """Base class for all tool calling errors."""


class ValidationFailure(ToolCallingError):
    """Arguments of a tool call do not satisfy the tool's schema."""

    def __init__(self, parameter: str, message: str):
        self.parameter = parameter
        super().__init__(message)


class MissingRequiredArgument(ValidationFailure):
    def __init__(self, parameter: str):
        super().__init__(parameter, f"Missing required argument '{parameter}'")


class InvalidEnumValue(ValidationFailure):
    def __init__(self, parameter: str, value: Any, allowed: list[Any]):
        self.value = value
        self.allowed = list(allowed)
        super().__init__(
            parameter,
            f"Invalid value {value!r} for '{parameter}': must be one of {self.allowed!r}",
        )


class TypeMismatch(ValidationFailure):
    def __init__(self, parameter: str, expected: str, value: Any):
        self.expected = expected
        self.value = value
        super().__init__(
            parameter,
            f"Argument '{parameter}' expected {expected}, got {type(value).__name__} {value!r}",
        )


class ModelInvocationError(ToolCallingError):
    """The underlying model call failed; there is no text to return."""
