"""SQLite conversation storage."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite

from agent_chat_sdk.memory.storage import (
    ChatMessage,
    ChatStorage,
    Conversation,
    ToolCall,
    ToolResult,
    utcnow,
)
from agent_chat_sdk.utils.logging import get_logger

logger = get_logger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS conversations (
    id TEXT PRIMARY KEY,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    metadata JSON
);
CREATE TABLE IF NOT EXISTS messages (
    seq INTEGER PRIMARY KEY AUTOINCREMENT,
    id TEXT NOT NULL,
    conversation_id TEXT NOT NULL REFERENCES conversations(id),
    role TEXT CHECK(role IN ('user', 'assistant', 'system')),
    content TEXT,
    timestamp TEXT NOT NULL,
    tool_calls JSON,
    tool_results JSON,
    ui_message_parts JSON
);
CREATE INDEX IF NOT EXISTS idx_messages_conversation ON messages(conversation_id, seq);
"""


def _dump_list(items: list[Any] | None) -> str | None:
    if items is None:
        return None
    return json.dumps([i.model_dump(mode="json") if hasattr(i, "model_dump") else i for i in items], default=str)


class SQLiteStorage(ChatStorage):
    """
    Async SQLite persistence for conversations and their messages.

    Use as an async context manager or call ``connect``/``close`` explicitly.
    """

    def __init__(self, db_path: str | Path = "data/agent_chat.db") -> None:
        self.db_path = Path(db_path)
        self._conn: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Create connection and initialize schema."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = await aiosqlite.connect(str(self.db_path))
        self._conn.row_factory = aiosqlite.Row
        await self._conn.execute("PRAGMA foreign_keys = ON")
        await self._conn.executescript(SCHEMA)
        await self._conn.commit()

    async def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    async def __aenter__(self) -> "SQLiteStorage":
        await self.connect()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def _ensure_conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("SQLiteStorage not connected; use await storage.connect() or async with storage")
        return self._conn

    async def _insert_conversation(
        self,
        conversation_id: str,
        created_at: datetime,
        metadata: dict[str, Any],
    ) -> None:
        conn = self._ensure_conn()
        await conn.execute(
            "INSERT OR IGNORE INTO conversations (id, created_at, updated_at, metadata) VALUES (?, ?, ?, ?)",
            (conversation_id, created_at.isoformat(), created_at.isoformat(), json.dumps(metadata)),
        )

    async def save_message(self, conversation_id: str, message: ChatMessage) -> None:
        conn = self._ensure_conn()
        await self._insert_conversation(conversation_id, message.timestamp, {})
        await conn.execute(
            """INSERT INTO messages
               (id, conversation_id, role, content, timestamp, tool_calls, tool_results, ui_message_parts)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                message.id,
                conversation_id,
                message.role,
                message.content,
                message.timestamp.isoformat(),
                _dump_list(message.tool_calls),
                _dump_list(message.tool_results),
                _dump_list(message.ui_message_parts),
            ),
        )
        await conn.execute(
            "UPDATE conversations SET updated_at = ? WHERE id = ?",
            (utcnow().isoformat(), conversation_id),
        )
        await conn.commit()
        logger.debug("message_saved", conversation_id=conversation_id, role=message.role)

    async def _load_conversation(self, row: aiosqlite.Row) -> Conversation:
        conn = self._ensure_conn()
        cursor = await conn.execute(
            "SELECT * FROM messages WHERE conversation_id = ? ORDER BY seq",
            (row["id"],),
        )
        message_rows = await cursor.fetchall()
        await cursor.close()
        messages: list[ChatMessage] = []
        for m in message_rows:
            tool_calls = json.loads(m["tool_calls"]) if m["tool_calls"] else None
            tool_results = json.loads(m["tool_results"]) if m["tool_results"] else None
            messages.append(
                ChatMessage(
                    id=m["id"],
                    role=m["role"],
                    content=m["content"] or "",
                    timestamp=datetime.fromisoformat(m["timestamp"]),
                    tool_calls=[ToolCall(**tc) for tc in tool_calls] if tool_calls is not None else None,
                    tool_results=[ToolResult(**tr) for tr in tool_results] if tool_results is not None else None,
                    ui_message_parts=json.loads(m["ui_message_parts"]) if m["ui_message_parts"] else None,
                )
            )
        return Conversation(
            id=row["id"],
            messages=messages,
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
            metadata=json.loads(row["metadata"]) if row["metadata"] else {},
        )

    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        conn = self._ensure_conn()
        cursor = await conn.execute("SELECT * FROM conversations WHERE id = ?", (conversation_id,))
        row = await cursor.fetchone()
        await cursor.close()
        if row is None:
            return None
        return await self._load_conversation(row)

    async def list_conversations(self, limit: int = 50, offset: int = 0) -> list[Conversation]:
        conn = self._ensure_conn()
        cursor = await conn.execute(
            "SELECT * FROM conversations ORDER BY updated_at DESC LIMIT ? OFFSET ?",
            (limit, offset),
        )
        rows = await cursor.fetchall()
        await cursor.close()
        return [await self._load_conversation(r) for r in rows]

    async def create_conversation(
        self,
        conversation_id: str,
        metadata: dict[str, Any] | None = None,
    ) -> Conversation:
        conn = self._ensure_conn()
        now = utcnow()
        await conn.execute("DELETE FROM messages WHERE conversation_id = ?", (conversation_id,))
        await conn.execute(
            "INSERT OR REPLACE INTO conversations (id, created_at, updated_at, metadata) VALUES (?, ?, ?, ?)",
            (conversation_id, now.isoformat(), now.isoformat(), json.dumps(metadata or {})),
        )
        await conn.commit()
        logger.info("conversation_created", conversation_id=conversation_id)
        return Conversation(id=conversation_id, created_at=now, updated_at=now, metadata=metadata or {})

    async def delete_conversation(self, conversation_id: str) -> None:
        conn = self._ensure_conn()
        await conn.execute("DELETE FROM messages WHERE conversation_id = ?", (conversation_id,))
        await conn.execute("DELETE FROM conversations WHERE id = ?", (conversation_id,))
        await conn.commit()
        logger.info("conversation_deleted", conversation_id=conversation_id)
