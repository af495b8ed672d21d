"""Tests for model clients and connection config."""

import asyncio
from types import SimpleNamespace

import pytest

from toolcall_engine.llm_client import LLMConfig, OpenAIChatModel, ScriptedChatModel


class FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeModels:
    async def list(self):
        return SimpleNamespace(data=[SimpleNamespace(id="served-model")])


def fake_client(content="hello"):
    completions = FakeCompletions(content)
    client = SimpleNamespace(
        chat=SimpleNamespace(completions=completions),
        models=FakeModels(),
    )
    return client, completions


class TestLLMConfig:
    """Tests for LLMConfig presets."""

    def test_defaults(self):
        """Test the default points at a local vLLM server."""
        config = LLMConfig()
        assert config.base_url == "http://localhost:8000/v1"
        assert config.model is None

    def test_groq(self):
        """Test the Groq preset."""
        config = LLMConfig.groq("key")
        assert config.base_url == "https://api.groq.com/openai/v1"
        assert config.api_key == "key"

    def test_from_env(self):
        """Test environment overrides."""
        config = LLMConfig.from_env({
            "TOOLCALL_BASE_URL": "http://example:9000/v1",
            "TOOLCALL_API_KEY": "secret",
            "TOOLCALL_MODEL": "qwen",
        })
        assert config.base_url == "http://example:9000/v1"
        assert config.api_key == "secret"
        assert config.model == "qwen"

    def test_from_env_empty(self):
        """Test missing variables fall back to defaults."""
        config = LLMConfig.from_env({})
        assert config == LLMConfig()


class TestOpenAIChatModel:
    """Tests for OpenAIChatModel with a stubbed client."""

    def test_generate(self):
        """Test request arguments and returned text."""
        client, completions = fake_client("raw text")
        model = OpenAIChatModel(LLMConfig(model="m"), client=client)

        text = asyncio.run(model.generate([{"role": "user", "content": "hi"}], temperature=0.1, max_tokens=32))

        assert text == "raw text"
        assert completions.kwargs["model"] == "m"
        assert completions.kwargs["temperature"] == 0.1
        assert completions.kwargs["max_tokens"] == 32

    def test_model_auto_detected(self):
        """Test the first served model is used when none is configured."""
        client, completions = fake_client()
        model = OpenAIChatModel(LLMConfig(), client=client)

        asyncio.run(model.generate([{"role": "user", "content": "hi"}]))
        assert completions.kwargs["model"] == "served-model"

    def test_none_content(self):
        """Test a missing message content becomes an empty string."""
        client, _ = fake_client(None)
        model = OpenAIChatModel(LLMConfig(model="m"), client=client)
        assert asyncio.run(model.generate([])) == ""


class TestScriptedChatModel:
    """Tests for ScriptedChatModel."""

    def test_replays_in_order(self):
        """Test outputs are returned in order and requests recorded."""
        model = ScriptedChatModel(outputs=["a", "b"])
        assert asyncio.run(model.generate([{"role": "user", "content": "1"}])) == "a"
        assert asyncio.run(model.generate([{"role": "user", "content": "2"}])) == "b"
        assert [r["messages"][0]["content"] for r in model.requests] == ["1", "2"]

    def test_raises_scripted_exception(self):
        """Test exception entries are raised."""
        model = ScriptedChatModel(outputs=[ValueError("bad")])
        with pytest.raises(ValueError):
            asyncio.run(model.generate([]))

    def test_exhausted(self):
        """Test running out of outputs raises."""
        model = ScriptedChatModel(outputs=[])
        with pytest.raises(RuntimeError):
            asyncio.run(model.generate([]))
