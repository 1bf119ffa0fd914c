"""Unit tests for provider message conversion and fallback."""

import json

import pytest

from agent_chat_sdk.llm.anthropic import _anthropic_tools, _openai_messages_to_anthropic
from agent_chat_sdk.llm.base import LLMProvider
from agent_chat_sdk.llm.factory import FallbackLLMProvider, create_provider
from agent_chat_sdk.llm.openai import _normalize_messages_for_openai
from conftest import ScriptedProvider, text_step

TURN = [
    {"role": "system", "content": "Be brief."},
    {"role": "user", "content": "read both files"},
    {
        "role": "assistant",
        "content": "",
        "tool_calls": [
            {"id": "c1", "type": "function", "function": {"name": "read_file", "arguments": {"file_path": "a"}}},
            {"id": "c2", "type": "function", "function": {"name": "read_file", "arguments": '{"file_path": "b"}'}},
        ],
    },
    {"role": "tool", "tool_call_id": "c1", "content": {"content": "A"}, "is_error": False},
    {"role": "tool", "tool_call_id": "c2", "content": {"__toolError": True}, "is_error": True},
]


def test_anthropic_conversion_groups_tool_results():
    system, messages = _openai_messages_to_anthropic(TURN)
    assert system == "Be brief."
    assert [m["role"] for m in messages] == ["user", "assistant", "user"]

    uses = messages[1]["content"]
    assert [b["input"] for b in uses] == [{"file_path": "a"}, {"file_path": "b"}]

    results = messages[2]["content"]
    assert [r["tool_use_id"] for r in results] == ["c1", "c2"]
    assert "is_error" not in results[0]
    assert results[1]["is_error"] is True
    assert json.loads(results[0]["content"]) == {"content": "A"}


def test_anthropic_tools_shape():
    tools = _anthropic_tools(
        [{"type": "function", "function": {"name": "t", "description": "d", "parameters": {"type": "object"}}}]
    )
    assert tools == [{"name": "t", "description": "d", "input_schema": {"type": "object"}}]


def test_openai_normalization_serializes_payloads():
    messages = _normalize_messages_for_openai(TURN)
    calls = messages[2]["tool_calls"]
    assert json.loads(calls[0]["function"]["arguments"]) == {"file_path": "a"}
    assert calls[1]["function"]["arguments"] == '{"file_path": "b"}'
    assert all("is_error" not in m for m in messages)
    assert json.loads(messages[4]["content"]) == {"__toolError": True}
    # the caller's messages are not modified
    assert TURN[4]["is_error"] is True


def test_unknown_provider_rejected():
    with pytest.raises(ValueError, match="Unknown LLM provider"):
        create_provider("nope")


class FailingProvider(LLMProvider):
    name = "failing"

    async def generate(self, messages, tools=None, *, system=None, **kwargs):
        raise ConnectionError("down")


@pytest.mark.asyncio
async def test_fallback_provider_used_on_primary_failure():
    fallback = ScriptedProvider([text_step("from fallback")])
    provider = FallbackLLMProvider(FailingProvider(), fallback)
    response = await provider.generate([{"role": "user", "content": "hi"}], system="s")
    assert response.content == "from fallback"
    assert fallback.calls[0]["system"] == "s"
