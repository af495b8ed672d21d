"""Tests for ToolRegistry."""

import pytest

from toolcall_engine.models import ToolSchema
from toolcall_engine.registry import ToolRegistry


async def echo(args):
    return dict(args)


async def other(args):
    return {"other": True}


@pytest.fixture
def registry():
    """Create an empty registry for tests."""
    return ToolRegistry()


def make_schema(name: str) -> ToolSchema:
    return ToolSchema(name=name, description=f"{name} tool")


class TestRegistration:
    """Tests for register and lookup."""

    def test_register_and_lookup(self, registry):
        """Test a registered tool can be looked up."""
        registry.register(make_schema("echo"), echo)

        registration = registry.lookup("echo")
        assert registration is not None
        assert registration.name == "echo"
        assert registration.executor is echo

    def test_lookup_missing(self, registry):
        """Test lookup of an unknown tool returns None."""
        assert registry.lookup("missing") is None

    def test_last_registration_wins(self, registry):
        """Test re-registering a name replaces the entry."""
        registry.register(make_schema("tool"), echo)
        registry.register(make_schema("tool"), other)

        assert len(registry) == 1
        assert registry.lookup("tool").executor is other

    def test_non_callable_executor(self, registry):
        """Test executor must be callable."""
        with pytest.raises(TypeError):
            registry.register(make_schema("tool"), "not callable")

    def test_registration_order(self, registry):
        """Test schemas are listed in registration order."""
        for name in ["c", "a", "b"]:
            registry.register(make_schema(name), echo)
        assert registry.names == ["c", "a", "b"]
        assert [s.name for s in registry.schemas] == ["c", "a", "b"]

    def test_contains(self, registry):
        """Test membership check."""
        registry.register(make_schema("echo"), echo)
        assert "echo" in registry
        assert "other" not in registry

    def test_unregister(self, registry):
        """Test unregister removes a tool and tolerates unknown names."""
        registry.register(make_schema("echo"), echo)
        registry.unregister("echo")
        registry.unregister("echo")
        assert registry.lookup("echo") is None


class TestClear:
    """Tests for clear-then-register resets."""

    def test_clear(self, registry):
        """Test clear removes everything."""
        registry.register(make_schema("a"), echo)
        registry.register(make_schema("b"), echo)
        registry.clear()
        assert len(registry) == 0
        assert registry.lookup("a") is None

    @pytest.mark.parametrize("prior", [[], ["a"], ["a", "stale", "x"]])
    def test_reset_is_idempotent(self, registry, prior):
        """Test clear followed by N registrations yields exactly N tools."""
        for name in prior:
            registry.register(make_schema(name), other)

        names = ["a", "b", "c"]
        for _ in range(2):
            registry.clear()
            for name in names:
                registry.register(make_schema(name), echo)

        assert len(registry) == len(names)
        for name in names:
            assert registry.lookup(name).executor is echo
        assert registry.lookup("stale") is None
