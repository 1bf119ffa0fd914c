"""In-process conversation storage for servers, tests and examples."""

from __future__ import annotations

from typing import Any

from agent_chat_sdk.memory.storage import ChatMessage, ChatStorage, Conversation, utcnow
from agent_chat_sdk.utils.logging import get_logger

logger = get_logger(__name__)


class MemoryStorage(ChatStorage):
    """Dict-backed storage; contents vanish with the process."""

    def __init__(self) -> None:
        self._conversations: dict[str, Conversation] = {}

    async def save_message(self, conversation_id: str, message: ChatMessage) -> None:
        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            conversation = Conversation(
                id=conversation_id,
                created_at=message.timestamp,
                updated_at=message.timestamp,
            )
            self._conversations[conversation_id] = conversation
        conversation.messages.append(message)
        conversation.updated_at = utcnow()
        logger.debug(
            "message_saved",
            conversation_id=conversation_id,
            role=message.role,
            message_count=len(conversation.messages),
        )

    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        conversation = self._conversations.get(conversation_id)
        logger.debug(
            "conversation_loaded",
            conversation_id=conversation_id,
            found=conversation is not None,
        )
        return conversation

    async def list_conversations(self, limit: int = 50, offset: int = 0) -> list[Conversation]:
        ordered = sorted(self._conversations.values(), key=lambda c: c.updated_at, reverse=True)
        return ordered[offset:offset + limit]

    async def create_conversation(
        self,
        conversation_id: str,
        metadata: dict[str, Any] | None = None,
    ) -> Conversation:
        conversation = Conversation(id=conversation_id, metadata=metadata or {})
        self._conversations[conversation_id] = conversation
        logger.info("conversation_created", conversation_id=conversation_id)
        return conversation

    async def delete_conversation(self, conversation_id: str) -> None:
        self._conversations.pop(conversation_id, None)
        logger.info("conversation_deleted", conversation_id=conversation_id)
