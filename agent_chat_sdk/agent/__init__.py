"""Conversation driver and route configuration."""

from agent_chat_sdk.agent.config import AgentChatRouteConfig, ModelConfig, make_agent_chat_route_config
from agent_chat_sdk.agent.errors import NotAuthenticatedError, StorageNotConfiguredError
from agent_chat_sdk.agent.requests import ChatRequest, HistoryRequest
from agent_chat_sdk.agent.runner import (
    StepResult,
    TurnResult,
    get_chat_history,
    run_conversation_turn,
    stream_message,
)

__all__ = [
    "AgentChatRouteConfig",
    "ChatRequest",
    "HistoryRequest",
    "ModelConfig",
    "NotAuthenticatedError",
    "StepResult",
    "StorageNotConfiguredError",
    "TurnResult",
    "get_chat_history",
    "make_agent_chat_route_config",
    "run_conversation_turn",
    "stream_message",
]
