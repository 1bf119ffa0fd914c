"""Unit tests for the tool registry and the file tools."""

import pytest

from agent_chat_sdk.tools.base import create_tool, is_tool_error
from agent_chat_sdk.tools.execution import ToolExecutionConfig
from agent_chat_sdk.tools.file_operations import FAST_TOOL_CONFIG, register_file_tools
from agent_chat_sdk.tools.registry import ToolRegistry, UnknownToolError


def test_schemas_use_openai_function_shape(probe_registry):
    schemas = probe_registry.get_tool_schemas()
    assert {s["function"]["name"] for s in schemas} == {"lookup", "broken", "sync_add"}
    lookup = next(s for s in schemas if s["function"]["name"] == "lookup")
    assert lookup["type"] == "function"
    assert lookup["function"]["parameters"]["required"] == ["key"]


def test_get_unknown_tool_raises():
    with pytest.raises(UnknownToolError, match="Unknown tool: nope"):
        ToolRegistry().get("nope")


def test_add_and_membership():
    registry = ToolRegistry()
    registry.add(create_tool("ping", "Ping", lambda: "pong"))
    assert "ping" in registry
    assert registry.has_tool("ping")
    assert registry.get("ping").display_name == "ping"
    assert len(registry) == 1


@pytest.mark.asyncio
async def test_unknown_tool_returns_error_result():
    result = await ToolRegistry().execute_tool("nope", {})
    assert is_tool_error(result)
    assert result["__errorType"] == "UnknownToolError"


@pytest.mark.asyncio
async def test_invalid_input_returns_error_result_without_calling_tool():
    calls = []
    registry = ToolRegistry()
    register_file_tools(registry)
    original = registry.get("read_file").execute

    async def spy(**kwargs):
        calls.append(kwargs)
        return await original(**kwargs)

    registry.get("read_file").execute = spy
    result = await registry.wrapped().execute_tool("read_file", {"path": "README.md"})
    assert result["__errorType"] == "ValidationError"
    assert calls == []


@pytest.mark.asyncio
async def test_sync_tool_is_supported(probe_registry):
    assert await probe_registry.execute_tool("sync_add", {"a": 2, "b": 3}) == 5
    assert await probe_registry.wrapped().execute_tool("sync_add", {"a": 2, "b": 3}) == 5


@pytest.mark.asyncio
async def test_unwrapped_registry_propagates_tool_errors(probe_registry):
    with pytest.raises(RuntimeError, match="disk on fire"):
        await probe_registry.execute_tool("broken", {})


@pytest.mark.asyncio
async def test_wrapped_registry_turns_failures_into_error_results(probe_registry):
    wrapped = probe_registry.wrapped({"retry_delay_ms": 0})
    result = await wrapped.execute_tool("broken", {})
    assert result["__errorType"] == "ToolRetryExhaustedError"
    assert "disk on fire" in result["__errorMessage"]
    assert "1 retries" in result["__errorMessage"]


def test_wrapped_registry_effective_configs(probe_registry):
    wrapped = probe_registry.wrapped(ToolExecutionConfig(timeout_ms=9000, retries=4, retry_delay_ms=50))
    assert wrapped.get("lookup").execution_config == ToolExecutionConfig(
        timeout_ms=9000, retries=4, retry_delay_ms=50
    )
    assert wrapped.get("broken").execution_config == ToolExecutionConfig(
        timeout_ms=9000, retries=1, retry_delay_ms=0
    )
    # the source registry is left untouched
    assert probe_registry.get("broken").execution_config == {"retries": 1, "retry_delay_ms": 0}


def test_file_tools_carry_fast_config():
    registry = ToolRegistry()
    register_file_tools(registry)
    wrapped = registry.wrapped()
    assert wrapped.get("read_file").execution_config == ToolExecutionConfig(**FAST_TOOL_CONFIG)
    assert wrapped.get("list_files").execution_config == ToolExecutionConfig(**FAST_TOOL_CONFIG)
    assert wrapped.get("edit_file").execution_config == ToolExecutionConfig()


@pytest.mark.asyncio
async def test_file_tools_read_edit_list():
    registry = ToolRegistry()
    files = register_file_tools(registry, {"a.txt": "alpha"})

    assert await registry.execute_tool("read_file", {"file_path": "a.txt"}) == {
        "file_path": "a.txt",
        "content": "alpha",
    }
    missing = await registry.execute_tool("read_file", {"file_path": "b.txt"})
    assert missing["error"] == "File not found: b.txt"
    assert missing["available_files"] == ["a.txt"]

    edited = await registry.execute_tool("edit_file", {"file_path": "b.txt", "content": "beta"})
    assert edited["content_length"] == 4
    assert files["b.txt"] == "beta"

    assert await registry.execute_tool("list_files", {}) == {"files": ["a.txt", "b.txt"], "count": 2}


@pytest.mark.asyncio
@pytest.mark.parametrize("arguments", [["x"], "x", None, 3])
async def test_non_mapping_arguments_return_error_result(probe_registry, arguments):
    result = await probe_registry.wrapped().execute_tool("lookup", arguments)
    assert result["__errorType"] == "ValidationError"
    assert "must be an object" in result["__errorMessage"]
