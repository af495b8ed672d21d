"""Single-shot execution of validated tool calls."""

import inspect
import logging
import time
from collections.abc import Mapping

from pydantic import ValidationError

from toolcall_engine.models import ToolCall, ToolResult
from toolcall_engine.registry import ToolRegistration

logger = logging.getLogger(__name__)


class ToolExecutor:
    """Invokes a registered tool function and captures its outcome.

    Exceptions raised by the tool are converted into a failed ToolResult and
    never propagate. Cancellation is not an Exception and does propagate.
    No retries are attempted.
    """

    async def execute(self, call: ToolCall, registration: ToolRegistration) -> ToolResult:
        """Run the tool for a validated call.

        Args:
            call: Call whose arguments were already normalized.
            registration: Registry entry holding the tool function.

        Returns:
            ToolResult with the returned mapping or the failure message.
        """
        logger.info(f"Calling tool: {call.tool_name} with arguments: {call.arguments}")
        start_time = time.perf_counter()

        try:
            value = registration.executor(dict(call.arguments))
            if inspect.isawaitable(value):
                value = await value
        except Exception as e:
            error = str(e) or type(e).__name__
            logger.warning(f"Tool {call.tool_name} failed: {error}")
            return ToolResult.failed(call.tool_name, f"Tool execution failed: {error}")

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(f"Tool {call.tool_name} completed in {elapsed_ms:.1f}ms")

        if not isinstance(value, Mapping):
            value = {"value": value}

        try:
            return ToolResult.ok(call.tool_name, dict(value))
        except ValidationError as e:
            logger.warning(f"Tool {call.tool_name} returned an invalid result: {e}")
            return ToolResult.failed(
                call.tool_name,
                f"Tool returned an invalid result: {e.errors()[0]['msg']}",
            )
