"""Request models for the chat and history routes."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, Field, model_validator

_MODEL_ROLES = ("user", "assistant", "system")


def _message_text(message: dict[str, Any]) -> str:
    """Plain text of a chat message given either ``content`` or UI ``parts``."""
    content = message.get("content")
    if isinstance(content, str):
        return content
    parts = message.get("parts") or []
    return "".join(p.get("text", "") for p in parts if isinstance(p, dict) and p.get("type") == "text")


class ChatRequest(BaseModel):
    """
    Body of a chat request.

    ``conversation_id`` may be given at the top level or inside
    ``metadata``/``data``; the first one found wins.
    """

    messages: list[dict[str, Any]]
    conversation_id: str | None = None
    metadata: Any = None
    data: Any = None

    @model_validator(mode="after")
    def _resolve_conversation_id(self) -> "ChatRequest":
        if self.conversation_id is None:
            for source in (self.metadata, self.data):
                if isinstance(source, dict) and source.get("conversation_id"):
                    self.conversation_id = str(source["conversation_id"])
                    break
        return self

    def to_model_messages(self) -> list[dict[str, Any]]:
        """Convert client messages to ``role``/``content`` messages for the model."""
        return [
            {"role": m["role"], "content": _message_text(m)}
            for m in self.messages
            if m.get("role") in _MODEL_ROLES
        ]

    def last_user_message(self) -> dict[str, Any] | None:
        if self.messages and self.messages[-1].get("role") == "user":
            return self.messages[-1]
        return None

    @staticmethod
    def stored_content(message: dict[str, Any]) -> str:
        """Text stored for a user message; falls back to the raw JSON."""
        return _message_text(message) or json.dumps(message, default=str)


class HistoryRequest(BaseModel):
    conversation_id: str = Field(min_length=1)
