"""Anthropic Claude provider with tool support."""

from __future__ import annotations

import json
import os
from typing import Any

from anthropic import AsyncAnthropic

from agent_chat_sdk.llm.base import LLMProvider, LLMResponse, ToolCall
from agent_chat_sdk.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"


def _tool_result_content(content: Any) -> str:
    if isinstance(content, str):
        return content
    return json.dumps(content, default=str)


def _openai_messages_to_anthropic(messages: list[dict[str, Any]]) -> tuple[str | None, list[dict[str, Any]]]:
    """Split out system text and convert the rest to Anthropic content blocks.

    Consecutive tool results are merged into one user message, as the
    Messages API requires all results of a step in a single turn.
    """
    system_parts: list[str] = []
    result: list[dict[str, Any]] = []
    for m in messages:
        role = m.get("role", "")
        if role == "system":
            system_parts.append(m.get("content") or "")
            continue
        if role == "user":
            result.append({"role": "user", "content": m.get("content") or ""})
            continue
        if role == "assistant":
            content = m.get("content") or ""
            tool_calls = m.get("tool_calls") or []
            if not tool_calls:
                result.append({"role": "assistant", "content": content})
                continue
            blocks: list[dict[str, Any]] = []
            if content:
                blocks.append({"type": "text", "text": content})
            for tc in tool_calls:
                fn = tc.get("function") or {}
                args = fn.get("arguments", "{}")
                if isinstance(args, str):
                    try:
                        args = json.loads(args)
                    except json.JSONDecodeError:
                        args = {}
                blocks.append({"type": "tool_use", "id": tc.get("id", ""), "name": fn.get("name", ""), "input": args})
            result.append({"role": "assistant", "content": blocks})
            continue
        if role == "tool":
            block = {
                "type": "tool_result",
                "tool_use_id": m.get("tool_call_id", ""),
                "content": _tool_result_content(m.get("content")),
            }
            if m.get("is_error"):
                block["is_error"] = True
            previous = result[-1] if result else None
            if previous and previous["role"] == "user" and isinstance(previous["content"], list):
                previous["content"].append(block)
            else:
                result.append({"role": "user", "content": [block]})
    system = "\n\n".join(p for p in system_parts if p) or None
    return system, result


def _anthropic_tools(openai_tools: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Convert OpenAI function tools to Anthropic tools format."""
    out = []
    for t in openai_tools:
        fn = t.get("function") or {}
        out.append({
            "name": fn.get("name", ""),
            "description": fn.get("description", ""),
            "input_schema": fn.get("parameters") or {"type": "object", "properties": {}},
        })
    return out


class AnthropicProvider(LLMProvider):
    """Anthropic Claude API with tool calling."""

    name = "anthropic"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.3,
        max_tokens: int = 2000,
        timeout: float = 60.0,
    ) -> None:
        self.client = AsyncAnthropic(api_key=api_key or os.getenv("ANTHROPIC_API_KEY"))
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

    async def generate(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
        *,
        system: str | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Call the Messages API with OpenAI-format messages and tools converted."""
        inline_system, anthropic_messages = _openai_messages_to_anthropic(messages)
        system = "\n\n".join(p for p in (system, inline_system) if p) or None
        if not anthropic_messages:
            return LLMResponse(content="", finish_reason="error")
        request: dict[str, Any] = {
            "model": kwargs.get("model") or self.model,
            "max_tokens": kwargs.get("max_tokens", self.max_tokens),
            "messages": anthropic_messages,
            "temperature": kwargs.get("temperature", self.temperature),
        }
        if system:
            request["system"] = system
        if tools:
            request["tools"] = _anthropic_tools(tools)
            request["tool_choice"] = {"type": "auto"}
        try:
            response = await self.client.messages.create(**request, timeout=kwargs.get("timeout", self.timeout))
        except Exception as e:
            logger.exception("anthropic_generate_failed", error=str(e))
            raise
        tool_calls: list[ToolCall] = []
        content_parts: list[str] = []
        for block in response.content:
            if block.type == "text":
                content_parts.append(block.text or "")
            elif block.type == "tool_use":
                tool_calls.append(ToolCall(id=block.id, name=block.name, arguments=dict(block.input or {})))
        return LLMResponse(
            content="".join(content_parts).strip(),
            tool_calls=tool_calls,
            finish_reason=response.stop_reason,
        )
