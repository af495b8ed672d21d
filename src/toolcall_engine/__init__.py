"""Tool calling orchestration for text-only language models.

Describe tools with typed schemas, let the model request them with
``<tool_call>`` markers, validate and execute the calls under a bounded
budget, and feed the results back until the model answers.
"""

from .errors import (
    InvalidEnumValue,
    MissingRequiredArgument,
    ModelInvocationError,
    ToolCallingError,
    TypeMismatch,
    ValidationFailure,
)
from .executor import ToolExecutor
from .llm_client import ChatModel, LLMConfig, OpenAIChatModel, ScriptedChatModel
from .models import (
    ParameterType,
    ParsedOutput,
    ToolCall,
    ToolCallingResult,
    ToolParameter,
    ToolResult,
    ToolSchema,
)
from .orchestrator import GenerationConfig, Orchestrator, OrchestratorState
from .parsers import BaseParser, TagParser
from .registry import ToolRegistration, ToolRegistry
from .validation import ArgumentValidator

__all__ = [
    "ArgumentValidator",
    "BaseParser",
    "ChatModel",
    "GenerationConfig",
    "InvalidEnumValue",
    "LLMConfig",
    "MissingRequiredArgument",
    "ModelInvocationError",
    "OpenAIChatModel",
    "Orchestrator",
    "OrchestratorState",
    "ParameterType",
    "ParsedOutput",
    "ScriptedChatModel",
    "TagParser",
    "ToolCall",
    "ToolCallingError",
    "ToolCallingResult",
    "ToolExecutor",
    "ToolParameter",
    "ToolRegistration",
    "ToolRegistry",
    "ToolResult",
    "ToolSchema",
    "TypeMismatch",
    "ValidationFailure",
]
