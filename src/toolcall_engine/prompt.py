"""Prompt text exchanged with the model around tool calls."""

import json

from toolcall_engine.models import ToolCall, ToolResult, ToolSchema
from toolcall_engine.parsers import DEFAULT_END_TAG, DEFAULT_START_TAG

DEFAULT_PREAMBLE = "You are a helpful assistant with access to tools."

TOOL_RESPONSE_START = "<tool_response>"
TOOL_RESPONSE_END = "</tool_response>"


def build_system_prompt(
    tools: list[ToolSchema],
    start_tag: str = DEFAULT_START_TAG,
    end_tag: str = DEFAULT_END_TAG,
    preamble: str | None = None,
) -> str:
    """Build the system message describing the available tools.

    Args:
        tools: Schemas the model may call.
        start_tag: Opening marker the model must use.
        end_tag: Closing marker the model must use.
        preamble: Optional text placed before the tool instructions.

    Returns:
        System prompt text. Without tools only the preamble is returned.
    """
    preamble = preamble or DEFAULT_PREAMBLE
    if not tools:
        return preamble

    tool_lines = "\n".join(
        json.dumps(
            {
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.to_json_schema(),
            }
        )
        for tool in tools
    )

    return f"""{preamble}
When you need to use a tool, wrap a single call in tags like this:
{start_tag}{{"name": "tool_name", "arguments": {{"param1": "value1"}}}}{end_tag}

Call at most one tool per reply. Tool results are returned to you inside
{TOOL_RESPONSE_START}...{TOOL_RESPONSE_END} tags; use them to answer the user.
If no tool is needed, answer directly.

Available tools:
{tool_lines}"""


def format_assistant_call(
    call: ToolCall,
    start_tag: str = DEFAULT_START_TAG,
    end_tag: str = DEFAULT_END_TAG,
) -> str:
    """Render a call in the marker format the parser understands."""
    return f"{start_tag}{json.dumps(call.to_payload())}{end_tag}"


def format_tool_response(result: ToolResult) -> str:
    """Render a tool result as the message fed back to the model."""
    payload = json.dumps(result.to_payload(), default=str)
    return f"{TOOL_RESPONSE_START}{payload}{TOOL_RESPONSE_END}"
