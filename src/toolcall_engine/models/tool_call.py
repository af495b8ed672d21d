"""Data models for tool calls, their results and orchestration outcomes.

Key features:
- ToolCall accepts arguments as a dict or as a JSON string
- ToolResult enforces that exactly one of result/error is present
- ToolCallingResult keeps calls and results parallel-indexed
"""

import json
from typing import Any, Self

from pydantic import BaseModel, Field, field_validator, model_validator


class ToolCall(BaseModel):
    """A tool invocation proposed by the model, not yet validated.

    Attributes:
        tool_name: Name of the tool to call.
        arguments: Arguments to pass to the tool, keyed by parameter name.

    Example:
        >>> call = ToolCall(tool_name="get_weather", arguments={"city": "NYC"})
        >>> call.to_payload()
        {'name': 'get_weather', 'arguments': {'city': 'NYC'}}
    """

    tool_name: str = Field(
        ...,
        min_length=1,
        max_length=256,
        description="Name of the tool to call",
    )
    arguments: dict[str, Any] = Field(
        default_factory=dict,
        description="Arguments to pass to the tool",
    )

    model_config = {
        "str_strip_whitespace": True,
    }

    @field_validator("arguments", mode="before")
    @classmethod
    def parse_arguments(cls, v: Any) -> dict[str, Any]:
        """Parse arguments from string JSON if needed.

        Some models emit the arguments object as an encoded JSON string.
        """
        if v is None:
            return {}

        if isinstance(v, str):
            v = v.strip()
            if not v:
                return {}
            try:
                parsed = json.loads(v)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in arguments: {e}")
            if not isinstance(parsed, dict):
                raise ValueError(f"Arguments must be a JSON object, got {type(parsed).__name__}")
            return parsed

        if isinstance(v, dict):
            return v

        raise ValueError(f"Arguments must be a dict or JSON string, got {type(v).__name__}")

    def to_payload(self) -> dict[str, Any]:
        """Return the wire payload used inside a tool call marker."""
        return {"name": self.tool_name, "arguments": self.arguments}


class ToolResult(BaseModel):
    """Outcome of executing (or failing to execute) a tool call.

    Attributes:
        tool_name: Name of the tool that was called.
        success: Whether the call produced a result.
        result: Returned mapping, present iff success.
        error: Failure message, present iff not success.
    """

    tool_name: str
    success: bool
    result: dict[str, Any] | None = Field(default=None)
    error: str | None = Field(default=None)

    @model_validator(mode="after")
    def validate_outcome(self) -> Self:
        """Exactly one of result and error must be set, matching success."""
        if self.success:
            if self.result is None:
                raise ValueError("Successful ToolResult requires a result")
            if self.error is not None:
                raise ValueError("Successful ToolResult cannot carry an error")
        else:
            if not self.error:
                raise ValueError("Failed ToolResult requires a non-empty error")
            if self.result is not None:
                raise ValueError("Failed ToolResult cannot carry a result")
        return self

    @classmethod
    def ok(cls, tool_name: str, result: dict[str, Any]) -> "ToolResult":
        return cls(tool_name=tool_name, success=True, result=result)

    @classmethod
    def failed(cls, tool_name: str, error: str) -> "ToolResult":
        return cls(tool_name=tool_name, success=False, error=error)

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-able form fed back to the model."""
        if self.success:
            return {"name": self.tool_name, "success": True, "result": self.result}
        return {"name": self.tool_name, "success": False, "error": self.error}


class ParsedOutput(BaseModel):
    """Result of scanning one model output for a tool call.

    Attributes:
        tool_call: The first well-formed call found, if any.
        text: Residual human-readable text with the consumed marker removed.
    """

    tool_call: ToolCall | None = Field(default=None)
    text: str = Field(default="")

    @property
    def has_call(self) -> bool:
        return self.tool_call is not None


class ToolCallingResult(BaseModel):
    """Final outcome of one orchestration request.

    Attributes:
        text: Final model response, possibly empty.
        tool_calls: Calls in the order the model proposed them.
        tool_results: Results parallel-indexed with tool_calls. Empty when
            calls were observed but not executed.
        rounds: Number of model generations performed.
        budget_exhausted: True if the model requested a call after the
            call budget was spent.
    """

    text: str = Field(default="")
    tool_calls: list[ToolCall] = Field(default_factory=list)
    tool_results: list[ToolResult] = Field(default_factory=list)
    rounds: int = Field(default=0, ge=0)
    budget_exhausted: bool = Field(default=False)

    @property
    def num_calls(self) -> int:
        """Return the number of tool calls proposed."""
        return len(self.tool_calls)

    @property
    def has_calls(self) -> bool:
        """Return whether any tool calls were recorded."""
        return len(self.tool_calls) > 0

    def get_call_names(self) -> list[str]:
        """Get list of all tool names called."""
        return [call.tool_name for call in self.tool_calls]

    def failed_results(self) -> list[ToolResult]:
        return [result for result in self.tool_results if not result.success]
