"""End-to-end tool calling loop.

One orchestration request walks through:

    IDLE -> AWAITING_MODEL_OUTPUT -> PARSING_CALL
         -> (EXECUTING_TOOL -> AWAITING_MODEL_OUTPUT)* -> FINALIZING -> IDLE

Each round executes at most one tool call before returning to the model. Tool
related failures (unknown tool, invalid arguments, tool exceptions) become
failed ToolResults and the conversation continues; only a failing model call
aborts the request with ModelInvocationError.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto

from pydantic import BaseModel, Field

from toolcall_engine.errors import ModelInvocationError, ValidationFailure
from toolcall_engine.executor import ToolExecutor
from toolcall_engine.llm_client import ChatModel, Message
from toolcall_engine.models import ParsedOutput, ToolCall, ToolCallingResult, ToolResult, ToolSchema
from toolcall_engine.parsers import DEFAULT_END_TAG, DEFAULT_START_TAG, BaseParser, TagParser
from toolcall_engine.prompt import build_system_prompt, format_tool_response
from toolcall_engine.registry import ToolFunction, ToolRegistry
from toolcall_engine.validation import ArgumentValidator

logger = logging.getLogger(__name__)


class OrchestratorState(Enum):
    """States of a single orchestration request."""
    IDLE = auto()
    AWAITING_MODEL_OUTPUT = auto()
    PARSING_CALL = auto()
    EXECUTING_TOOL = auto()
    FINALIZING = auto()


class GenerationConfig(BaseModel):
    """Options for one generate_with_tools request.

    Attributes:
        tools: Schemas offered to the model. None offers every registered tool.
        max_tool_calls: Maximum number of tool execution rounds.
        auto_execute: Execute parsed calls without caller confirmation.
        temperature: Forwarded to the model.
        max_tokens: Forwarded to the model.
        system_prompt: Optional preamble placed before the tool instructions.
    """

    tools: list[ToolSchema] | None = Field(default=None)
    max_tool_calls: int = Field(default=3, ge=0)
    auto_execute: bool = Field(default=True)
    temperature: float = Field(default=0.7, ge=0.0)
    max_tokens: int = Field(default=512, gt=0)
    system_prompt: str | None = Field(default=None)


@dataclass
class _Run:
    """Mutable bookkeeping for one request; never shared between requests."""
    budget: int
    offered: set[str]
    messages: list[Message]
    tool_calls: list[ToolCall] = field(default_factory=list)
    tool_results: list[ToolResult] = field(default_factory=list)
    rounds: int = 0
    budget_exhausted: bool = False


class Orchestrator:
    """Drives prompt -> model -> parse -> validate -> execute -> model loops.

    The registry is passed in explicitly and only read during orchestration,
    so many requests may run concurrently once registration is done.

    Args:
        registry: Tools available for execution.
        model: Chat model producing raw text.
        parser: Tool call parser, TagParser by default.
        validator: Argument validator.
        executor: Tool executor.
        on_transition: Called with every state the request enters.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        model: ChatModel,
        parser: BaseParser | None = None,
        validator: ArgumentValidator | None = None,
        executor: ToolExecutor | None = None,
        on_transition: Callable[[OrchestratorState], None] | None = None,
    ):
        self.registry = registry
        self.model = model
        self.parser = parser or TagParser()
        self.validator = validator or ArgumentValidator()
        self.executor = executor or ToolExecutor()
        self.on_transition = on_transition

    def register_tool(self, schema: ToolSchema, executor: ToolFunction) -> None:
        self.registry.register(schema, executor)

    def clear_tools(self) -> None:
        self.registry.clear()

    def parse_tool_call(self, text: str) -> ParsedOutput:
        """Extract the first tool call from a model output."""
        return self.parser.parse(text)

    async def generate_with_tools(
        self,
        prompt: str,
        config: GenerationConfig | None = None,
    ) -> ToolCallingResult:
        """Answer a prompt, letting the model call registered tools.

        Args:
            prompt: User prompt.
            config: Request options, defaults to GenerationConfig().

        Returns:
            ToolCallingResult with the final text, calls and results.

        Raises:
            ModelInvocationError: If the model call itself fails.
        """
        prompt = prompt.strip()
        if not prompt:
            raise ValueError("Prompt must not be empty")

        config = config or GenerationConfig()
        tools = config.tools if config.tools is not None else self.registry.schemas
        start_tag = getattr(self.parser, "start_tag", DEFAULT_START_TAG)
        end_tag = getattr(self.parser, "end_tag", DEFAULT_END_TAG)

        run = _Run(
            budget=config.max_tool_calls,
            offered={tool.name for tool in tools},
            messages=[
                {"role": "system", "content": build_system_prompt(
                    tools, start_tag, end_tag, preamble=config.system_prompt
                )},
                {"role": "user", "content": prompt},
            ],
        )

        try:
            text = await self._loop(run, config)
            self._transition(OrchestratorState.FINALIZING)
            logger.info(
                f"Generation finished after {run.rounds} round(s) "
                f"with {len(run.tool_calls)} tool call(s)"
            )
            return ToolCallingResult(
                text=text,
                tool_calls=run.tool_calls,
                tool_results=run.tool_results,
                rounds=run.rounds,
                budget_exhausted=run.budget_exhausted,
            )
        finally:
            self._transition(OrchestratorState.IDLE)

    async def _loop(self, run: _Run, config: GenerationConfig) -> str:
        """Run rounds until the model stops calling tools; return the final text."""
        while True:
            self._transition(OrchestratorState.AWAITING_MODEL_OUTPUT)
            output = await self._invoke_model(run, config)

            self._transition(OrchestratorState.PARSING_CALL)
            parsed = self.parser.parse(output)
            call = parsed.tool_call

            if call is None:
                return parsed.text

            if run.budget <= 0:
                logger.warning(
                    f"Tool call budget of {config.max_tool_calls} exhausted, "
                    f"ignoring call to {call.tool_name}"
                )
                run.budget_exhausted = True
                return parsed.text

            if not config.auto_execute:
                run.tool_calls.append(call)
                return parsed.text

            self._transition(OrchestratorState.EXECUTING_TOOL)
            call, result = await self._run_call(call, run)
            run.tool_calls.append(call)
            run.tool_results.append(result)
            run.budget -= 1

            run.messages.append({"role": "assistant", "content": output})
            run.messages.append({"role": "user", "content": format_tool_response(result)})

    async def _invoke_model(self, run: _Run, config: GenerationConfig) -> str:
        try:
            output = await self.model.generate(
                run.messages,
                temperature=config.temperature,
                max_tokens=config.max_tokens,
            )
        except Exception as e:
            raise ModelInvocationError(f"Model invocation failed: {e}") from e
        run.rounds += 1
        return output or ""

    async def _run_call(self, call: ToolCall, run: _Run) -> tuple[ToolCall, ToolResult]:
        """Look up, validate and execute one call.

        Returns the call as recorded (normalized when validation succeeded)
        and its result.
        """
        registration = self.registry.lookup(call.tool_name)
        if registration is None or call.tool_name not in run.offered:
            logger.warning(f"Model requested unavailable tool: {call.tool_name}")
            return call, ToolResult.failed(call.tool_name, f"Unknown tool: {call.tool_name}")

        try:
            call = self.validator.validate_call(registration.schema, call)
        except ValidationFailure as e:
            logger.warning(f"Invalid arguments for {call.tool_name}: {e}")
            return call, ToolResult.failed(call.tool_name, f"Invalid arguments: {e}")

        return call, await self.executor.execute(call, registration)

    def _transition(self, state: OrchestratorState) -> None:
        logger.debug(f"Orchestrator state -> {state.name}")
        if self.on_transition is not None:
            self.on_transition(state)
