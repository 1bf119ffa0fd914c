"""Shared fixtures: a scripted LLM provider and a registry of probe tools."""

import copy

import pytest

from agent_chat_sdk.llm.base import LLMProvider, LLMResponse, ToolCall
from agent_chat_sdk.tools.registry import ToolRegistry


class ScriptedProvider(LLMProvider):
    """Returns queued responses in order and records every request."""

    name = "scripted"

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    async def generate(self, messages, tools=None, *, system=None, **kwargs):
        self.calls.append(
            {"messages": copy.deepcopy(messages), "tools": tools, "system": system, "kwargs": kwargs}
        )
        if not self.responses:
            return LLMResponse(content="done")
        return self.responses.pop(0)


def tool_step(*calls, content=""):
    """Response asking for tools; ``calls`` are (id, name, arguments) tuples."""
    return LLMResponse(
        content=content,
        tool_calls=[ToolCall(id=i, name=n, arguments=a) for i, n, a in calls],
        finish_reason="tool_use",
    )


def text_step(content):
    return LLMResponse(content=content, finish_reason="end_turn")


@pytest.fixture
def probe_registry():
    """``lookup`` succeeds, ``broken`` always raises, ``sync_add`` is a plain function."""
    registry = ToolRegistry()

    @registry.register(
        "lookup",
        "Look up a key",
        parameters_schema={"properties": {"key": {"type": "string"}}, "required": ["key"]},
    )
    async def lookup(key: str) -> dict:
        return {"key": key, "value": key.upper()}

    @registry.register("broken", "Always fails", execution_config={"retries": 1, "retry_delay_ms": 0})
    async def broken() -> dict:
        raise RuntimeError("disk on fire")

    @registry.register("sync_add", "Add two numbers")
    def sync_add(a: int, b: int) -> int:
        return a + b

    return registry
