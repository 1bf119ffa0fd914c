"""
Agent Chat SDK - converse with a tool-calling language-model agent.

Every tool call runs under a per-attempt timeout and an exponential-backoff
retry loop, and failures come back as structured error results instead of
exceptions, so a failing tool never aborts a conversation turn.
"""

__version__ = "0.1.0"

from agent_chat_sdk.agent import (
    AgentChatRouteConfig,
    ChatRequest,
    ModelConfig,
    make_agent_chat_route_config,
    run_conversation_turn,
)
from agent_chat_sdk.memory import ChatMessage, ChatStorage, Conversation, MemoryStorage
from agent_chat_sdk.tools import (
    Tool,
    ToolExecutionConfig,
    ToolRegistry,
    ToolRetryExhaustedError,
    ToolTimeoutError,
    create_tool,
    is_tool_error,
    wrap_tool_with_timeout_retry,
)

__all__ = [
    "AgentChatRouteConfig",
    "ChatMessage",
    "ChatRequest",
    "ChatStorage",
    "Conversation",
    "MemoryStorage",
    "ModelConfig",
    "Tool",
    "ToolExecutionConfig",
    "ToolRegistry",
    "ToolRetryExhaustedError",
    "ToolTimeoutError",
    "create_tool",
    "is_tool_error",
    "make_agent_chat_route_config",
    "run_conversation_turn",
    "wrap_tool_with_timeout_retry",
]
