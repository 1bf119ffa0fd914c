"""Conversation history storage."""

from agent_chat_sdk.memory.in_memory import MemoryStorage
from agent_chat_sdk.memory.sqlite_storage import SQLiteStorage
from agent_chat_sdk.memory.storage import (
    ChatMessage,
    ChatStorage,
    Conversation,
    ToolCall,
    ToolResult,
)

__all__ = [
    "ChatMessage",
    "ChatStorage",
    "Conversation",
    "MemoryStorage",
    "SQLiteStorage",
    "ToolCall",
    "ToolResult",
]
