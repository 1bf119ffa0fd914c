"""LLM provider abstractions."""

from agent_chat_sdk.llm.base import LLMProvider, LLMResponse, ToolCall

__all__ = ["LLMProvider", "LLMResponse", "ToolCall"]
