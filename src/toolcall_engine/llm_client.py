"""Chat model clients used by the orchestrator.

The orchestrator only needs raw generated text. Any OpenAI-compatible server
works (vLLM, OpenAI, Together AI, Groq, ...); tool calls are requested through
the system prompt and parsed from the text, not through the server's native
tool calling API.
"""

import logging
import os
import time
from dataclasses import dataclass, field
from typing import Any, Protocol

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)

Message = dict[str, str]


class ChatModel(Protocol):
    """Anything that can turn a conversation into generated text."""

    async def generate(
        self,
        messages: list[Message],
        *,
        temperature: float,
        max_tokens: int,
    ) -> str:
        ...


@dataclass
class LLMConfig:
    """Configuration for LLM server connection.

    Works with vLLM, OpenAI, Together AI, Groq, Fireworks, etc.
    """
    base_url: str = "http://localhost:8000/v1"
    api_key: str = "EMPTY"
    model: str | None = None

    @classmethod
    def vllm_local(cls) -> "LLMConfig":
        """Config for local vLLM server."""
        return cls(base_url="http://localhost:8000/v1", api_key="EMPTY")

    @classmethod
    def openai(cls, api_key: str, model: str = "gpt-4o-mini") -> "LLMConfig":
        """Config for OpenAI API."""
        return cls(
            base_url="https://api.openai.com/v1",
            api_key=api_key,
            model=model
        )

    @classmethod
    def together(cls, api_key: str, model: str = "meta-llama/Llama-3.2-3B-Instruct-Turbo") -> "LLMConfig":
        """Config for Together AI."""
        return cls(
            base_url="https://api.together.xyz/v1",
            api_key=api_key,
            model=model
        )

    @classmethod
    def groq(cls, api_key: str, model: str = "llama-3.1-8b-instant") -> "LLMConfig":
        """Config for Groq."""
        return cls(
            base_url="https://api.groq.com/openai/v1",
            api_key=api_key,
            model=model
        )

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "LLMConfig":
        """Config from TOOLCALL_BASE_URL, TOOLCALL_API_KEY and TOOLCALL_MODEL."""
        environ = os.environ if environ is None else environ
        default = cls()
        return cls(
            base_url=environ.get("TOOLCALL_BASE_URL", default.base_url),
            api_key=environ.get("TOOLCALL_API_KEY", default.api_key),
            model=environ.get("TOOLCALL_MODEL") or None,
        )


class OpenAIChatModel:
    """Chat model backed by an OpenAI-compatible chat completions endpoint."""

    def __init__(self, config: LLMConfig | None = None, client: AsyncOpenAI | None = None):
        self.config = config or LLMConfig.vllm_local()
        self.client = client or AsyncOpenAI(
            api_key=self.config.api_key,
            base_url=self.config.base_url,
        )
        self._model = self.config.model

    @property
    def name(self) -> str:
        return "llm-server"

    async def get_model(self) -> str:
        """Get the model name, auto-detecting the first served model if needed."""
        if self._model is None:
            models = await self.client.models.list()
            self._model = models.data[0].id
            logger.info(f"Auto-detected model: {self._model}")
        return self._model

    async def generate(
        self,
        messages: list[Message],
        *,
        temperature: float = 0.7,
        max_tokens: int = 512,
    ) -> str:
        """Send a chat request and return the raw text output."""
        model = await self.get_model()
        start_time = time.perf_counter()

        response = await self.client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(f"Generation with {model} took {elapsed_ms:.0f}ms")
        return response.choices[0].message.content or ""


@dataclass
class ScriptedChatModel:
    """Replays canned outputs in order; useful offline and in tests.

    An entry that is an exception instance is raised instead of returned.
    Every request is recorded in ``requests``.
    """
    outputs: list[str | BaseException]
    requests: list[dict[str, Any]] = field(default_factory=list)

    @property
    def name(self) -> str:
        return "scripted"

    async def generate(
        self,
        messages: list[Message],
        *,
        temperature: float = 0.7,
        max_tokens: int = 512,
    ) -> str:
        self.requests.append({
            "messages": [dict(message) for message in messages],
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        index = len(self.requests) - 1
        if index >= len(self.outputs):
            raise RuntimeError(f"Scripted model has no output for request {index + 1}")

        output = self.outputs[index]
        if isinstance(output, BaseException):
            raise output
        return output
