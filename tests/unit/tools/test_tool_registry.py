from __future__ import annotations

import pytest

from workspace_mcp.tools import ToolDispatchError, ToolRegistry


def test_registry_keeps_deterministic_registration_order() -> None:
    registry = ToolRegistry()
    registry.register("alpha", lambda _: {"tool": "alpha"})
    registry.register("beta", lambda _: {"tool": "beta"})

    assert registry.names() == ("alpha", "beta")


def test_registry_dispatches_registered_tool() -> None:
    registry = ToolRegistry()
    registry.register("echo", lambda payload: {"payload": payload})

    assert registry.dispatch("echo", {"k": "v"}) == {"payload": {"k": "v"}}


def test_unknown_tool_raises_dispatch_error() -> None:
    with pytest.raises(ToolDispatchError) as error:
        ToolRegistry().dispatch("missing", {})

    assert error.value.code == "UNKNOWN_TOOL"
    assert error.value.message == "Unknown tool: missing"


def test_duplicate_registration_is_rejected() -> None:
    registry = ToolRegistry()
    registry.register("echo", lambda payload: payload)

    with pytest.raises(ValueError, match="already registered"):
        registry.register("echo", lambda payload: payload)


def test_definitions_carry_description_and_schema() -> None:
    registry = ToolRegistry()
    schema = {"type": "object", "properties": {"path": {"type": "string"}}}
    registry.register("read", lambda payload: payload, "Read a file.", schema)
    registry.register("bare", lambda payload: payload)

    assert registry.definitions() == [
        {"name": "read", "description": "Read a file.", "inputSchema": schema},
        {
            "name": "bare",
            "description": "",
            "inputSchema": {"type": "object", "properties": {}},
        },
    ]
