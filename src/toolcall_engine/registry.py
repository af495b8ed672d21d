"""Registry mapping tool names to their schema and executor."""

import logging
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from toolcall_engine.models import ToolSchema

logger = logging.getLogger(__name__)

ToolFunction = Callable[[dict[str, Any]], Awaitable[dict[str, Any]] | dict[str, Any]]


@dataclass(frozen=True)
class ToolRegistration:
    """A tool schema paired with the function that executes it."""

    schema: ToolSchema
    executor: ToolFunction

    @property
    def name(self) -> str:
        return self.schema.name


class ToolRegistry:
    """Registry of tools available to an orchestrator.

    Last registration for a name wins, so ``clear()`` followed by a fresh
    registration pass is idempotent. Registration is expected to finish before
    concurrent lookups begin; no locking is done.
    """

    def __init__(self):
        self._tools: dict[str, ToolRegistration] = OrderedDict()

    def register(self, schema: ToolSchema, executor: ToolFunction) -> None:
        """Register a tool, replacing any existing tool with the same name.

        Args:
            schema: Tool description shown to the model.
            executor: Function receiving the validated arguments mapping.
        """
        if not callable(executor):
            raise TypeError(f"Executor for tool '{schema.name}' must be callable")

        if schema.name in self._tools:
            logger.debug(f"Tool {schema.name} already registered, replacing")

        self._tools[schema.name] = ToolRegistration(schema=schema, executor=executor)
        logger.debug(f"Registered tool: {schema.name}")

    def unregister(self, name: str) -> None:
        """Remove a tool by name. No-op if not found."""
        self._tools.pop(name, None)

    def clear(self) -> None:
        """Remove all registered tools."""
        logger.debug(f"Clearing {len(self._tools)} registered tools")
        self._tools.clear()

    def lookup(self, name: str) -> ToolRegistration | None:
        """Get a registration by tool name."""
        return self._tools.get(name)

    @property
    def schemas(self) -> list[ToolSchema]:
        """All registered schemas in registration order."""
        return [registration.schema for registration in self._tools.values()]

    @property
    def names(self) -> list[str]:
        return list(self._tools.keys())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools
