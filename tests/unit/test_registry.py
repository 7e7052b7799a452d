"""
Unit tests for the tool registry and tool schemas.
"""
import pydantic
import pytest

from hostsense.tools import (
    DuplicateToolError,
    RegistryFrozenError,
    ToolDefinition,
    ToolNotFoundError,
    ToolParameter,
    ToolRegistry,
)


def _noop():
    return "ok"


class TestToolRegistry:
    """Tests for registration and lookup."""

    def test_listing_preserves_registration_order(self):
        registry = ToolRegistry()
        for name in ("zeta", "alpha", "mid"):
            registry.register(name=name, description=f"{name} tool")(_noop)

        assert [d.name for d in registry.list_definitions()] == ["zeta", "alpha", "mid"]
        assert registry.names() == ["zeta", "alpha", "mid"]
        assert len(registry) == 3

    def test_duplicate_name_rejected(self):
        registry = ToolRegistry()
        registry.register(name="get_idle_time", description="Idle")(_noop)

        with pytest.raises(DuplicateToolError, match="get_idle_time"):
            registry.register(name="get_idle_time", description="Again")(_noop)

        assert len(registry) == 1

    def test_frozen_registry_rejects_registration(self):
        registry = ToolRegistry().freeze()

        assert registry.frozen is True
        with pytest.raises(RegistryFrozenError):
            registry.register(name="late", description="Too late")(_noop)

    def test_get_unknown_raises(self):
        registry = ToolRegistry()
        with pytest.raises(ToolNotFoundError) as exc_info:
            registry.get("nope")
        assert str(exc_info.value) == "unknown tool: nope"

    def test_lookup_helpers(self, echo_registry):
        assert "echo" in echo_registry
        assert "missing" not in echo_registry
        assert echo_registry.get_definition("echo").parameters[0].name == "msg"
        assert echo_registry.get("echo").name == "echo"

    def test_decorator_returns_function(self):
        registry = ToolRegistry()
        decorated = registry.register(name="noop", description="Nothing")(_noop)
        assert decorated is _noop


class TestToolDefinition:
    """Tests for definition validation and JSON schema output."""

    def test_empty_name_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            ToolDefinition(name="", description="Nameless")

    def test_empty_description_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            ToolDefinition(name="silent", description="")

    def test_duplicate_parameter_rejected(self):
        param = ToolParameter(name="path", type="string", description="Path")
        with pytest.raises(pydantic.ValidationError, match="duplicate parameter"):
            ToolDefinition(name="dup", description="Dup", parameters=[param, param])

    def test_input_schema(self, echo_registry):
        schema = echo_registry.get_definition("add").to_input_schema()

        assert schema["type"] == "object"
        assert schema["required"] == ["a"]
        assert schema["properties"]["a"] == {"type": "integer", "description": "First operand"}
        assert schema["properties"]["b"]["default"] == 1
        assert schema["properties"]["b"]["minimum"] == 0
        assert schema["properties"]["b"]["maximum"] == 100

    def test_enum_in_schema(self, echo_registry):
        schema = echo_registry.get_definition("pick").to_input_schema()
        assert schema["properties"]["color"]["enum"] == ["red", "green"]

    def test_no_parameters_schema(self, echo_registry):
        schema = echo_registry.get_definition("boom").to_input_schema()
        assert schema == {"type": "object", "properties": {}, "required": []}
