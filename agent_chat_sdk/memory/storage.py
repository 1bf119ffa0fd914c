"""Conversation history models and the storage contract every backend satisfies."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(UTC)


class ToolCall(BaseModel):
    """A tool invocation requested by the model."""

    tool_call_id: str
    tool_name: str
    input: Any = None


class ToolResult(BaseModel):
    """
    Outcome of a tool invocation as persisted with the assistant message.

    ``is_error`` is set when ``output`` is an error sentinel; ``error`` then
    carries its message.
    """

    tool_call_id: str
    tool_name: str
    output: Any = None
    error: str | None = None
    is_error: bool = False


class ChatMessage(BaseModel):
    id: str
    role: Literal["user", "assistant", "system"]
    content: str
    timestamp: datetime = Field(default_factory=utcnow)
    tool_calls: list[ToolCall] | None = None
    tool_results: list[ToolResult] | None = None
    ui_message_parts: list[Any] | None = None


class Conversation(BaseModel):
    id: str
    messages: list[ChatMessage] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    metadata: dict[str, Any] = Field(default_factory=dict)


class ChatStorage(ABC):
    """
    Persistence contract for conversation history.

    ``save_message`` and ``get_conversation`` are required. Listing, creating
    and deleting conversations are optional; backends that lack them raise
    NotImplementedError, and ``supports`` reports which are available.
    """

    @abstractmethod
    async def save_message(self, conversation_id: str, message: ChatMessage) -> None:
        """Append a message, creating the conversation if it does not exist."""

    @abstractmethod
    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        """Return the conversation with all messages, or None if unknown."""

    async def list_conversations(self, limit: int = 50, offset: int = 0) -> list[Conversation]:
        """Most recently updated first."""
        raise NotImplementedError(f"{type(self).__name__} does not list conversations")

    async def create_conversation(
        self,
        conversation_id: str,
        metadata: dict[str, Any] | None = None,
    ) -> Conversation:
        raise NotImplementedError(f"{type(self).__name__} does not create conversations")

    async def delete_conversation(self, conversation_id: str) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not delete conversations")

    def supports(self, operation: str) -> bool:
        """True when ``operation`` is overridden by this backend."""
        method = getattr(type(self), operation, None)
        return method is not None and method is not getattr(ChatStorage, operation, None)
