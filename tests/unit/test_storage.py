"""Unit tests for conversation storage backends."""

import asyncio

import pytest

from agent_chat_sdk.memory.in_memory import MemoryStorage
from agent_chat_sdk.memory.sqlite_storage import SQLiteStorage
from agent_chat_sdk.memory.storage import ChatMessage, ChatStorage, ToolCall, ToolResult


class MinimalStorage(ChatStorage):
    async def save_message(self, conversation_id, message):
        pass

    async def get_conversation(self, conversation_id):
        return None


def assistant_with_tools():
    return ChatMessage(
        id="m2",
        role="assistant",
        content="Reading it now.",
        tool_calls=[ToolCall(tool_call_id="c1", tool_name="read_file", input={"file_path": "a.txt"})],
        tool_results=[
            ToolResult(
                tool_call_id="c1",
                tool_name="read_file",
                output={"__toolError": True, "__errorType": "ToolTimeoutError"},
                error='Tool "read_file" timed out after 5000ms',
                is_error=True,
            )
        ],
    )


def test_optional_operations_are_reported():
    assert MemoryStorage().supports("list_conversations")
    assert MemoryStorage().supports("delete_conversation")
    assert not MinimalStorage().supports("list_conversations")
    assert not MinimalStorage().supports("create_conversation")


@pytest.mark.asyncio
async def test_optional_operations_raise_when_missing():
    with pytest.raises(NotImplementedError):
        await MinimalStorage().list_conversations()


@pytest.mark.asyncio
async def test_memory_save_creates_conversation():
    storage = MemoryStorage()
    assert await storage.get_conversation("c") is None

    await storage.save_message("c", ChatMessage(id="m1", role="user", content="hi"))
    await storage.save_message("c", assistant_with_tools())

    conversation = await storage.get_conversation("c")
    assert [m.id for m in conversation.messages] == ["m1", "m2"]
    assert conversation.created_at == conversation.messages[0].timestamp
    assert conversation.updated_at >= conversation.created_at
    assert conversation.messages[1].tool_results[0].is_error is True


@pytest.mark.asyncio
async def test_memory_list_create_delete():
    storage = MemoryStorage()
    await storage.save_message("old", ChatMessage(id="m1", role="user", content="first"))
    await asyncio.sleep(0.01)
    await storage.save_message("new", ChatMessage(id="m2", role="user", content="second"))

    assert [c.id for c in await storage.list_conversations()] == ["new", "old"]
    assert [c.id for c in await storage.list_conversations(limit=1, offset=1)] == ["old"]

    created = await storage.create_conversation("fresh", {"topic": "files"})
    assert created.metadata == {"topic": "files"}
    assert created.messages == []

    await storage.delete_conversation("old")
    assert await storage.get_conversation("old") is None
    await storage.delete_conversation("missing")


@pytest.mark.asyncio
async def test_sqlite_round_trip(tmp_path):
    async with SQLiteStorage(tmp_path / "chat.db") as storage:
        await storage.save_message("c", ChatMessage(id="m1", role="user", content="read a.txt"))
        await storage.save_message("c", assistant_with_tools())

        conversation = await storage.get_conversation("c")
        assert [m.role for m in conversation.messages] == ["user", "assistant"]
        assistant = conversation.messages[1]
        assert assistant.tool_calls[0].input == {"file_path": "a.txt"}
        result = assistant.tool_results[0]
        assert result.is_error is True
        assert result.output["__errorType"] == "ToolTimeoutError"
        assert conversation.messages[0].tool_calls is None

        assert await storage.get_conversation("missing") is None


@pytest.mark.asyncio
async def test_sqlite_persists_across_connections(tmp_path):
    db_path = tmp_path / "chat.db"
    async with SQLiteStorage(db_path) as storage:
        await storage.save_message("c", ChatMessage(id="m1", role="user", content="hello"))
    async with SQLiteStorage(db_path) as storage:
        conversation = await storage.get_conversation("c")
    assert conversation.messages[0].content == "hello"


@pytest.mark.asyncio
async def test_sqlite_create_list_delete(tmp_path):
    async with SQLiteStorage(tmp_path / "chat.db") as storage:
        await storage.save_message("c", ChatMessage(id="m1", role="user", content="hello"))
        await storage.create_conversation("c", {"topic": "reset"})
        conversation = await storage.get_conversation("c")
        assert conversation.messages == []
        assert conversation.metadata == {"topic": "reset"}

        await storage.create_conversation("d")
        assert {c.id for c in await storage.list_conversations()} == {"c", "d"}

        await storage.delete_conversation("c")
        assert await storage.get_conversation("c") is None
        assert [c.id for c in await storage.list_conversations()] == ["d"]


@pytest.mark.asyncio
async def test_sqlite_requires_connection(tmp_path):
    storage = SQLiteStorage(tmp_path / "chat.db")
    with pytest.raises(RuntimeError, match="not connected"):
        await storage.get_conversation("c")
