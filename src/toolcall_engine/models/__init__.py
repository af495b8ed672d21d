"""Data models for tool schemas, calls and results.

This module provides Pydantic-validated models for:
- ToolParameter / ToolSchema: Typed description of a callable tool
- ToolCall: A model-proposed invocation
- ToolResult: Outcome of one execution
- ParsedOutput: Parser result for one model output
- ToolCallingResult: Complete orchestration outcome
"""

from .schema import ParameterType, ToolParameter, ToolSchema
from .tool_call import ParsedOutput, ToolCall, ToolCallingResult, ToolResult

__all__ = [
    "ParameterType",
    "ToolParameter",
    "ToolSchema",
    "ToolCall",
    "ToolResult",
    "ParsedOutput",
    "ToolCallingResult",
]
